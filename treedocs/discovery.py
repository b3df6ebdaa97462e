"""Package walking: find every file the configured parser accepts."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from .config import CONFIG_FILENAME
from .logging import get_logger
from .models import ParsedEntry
from .parsers import ParseError, SourceParser, get_parser

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
}

_EXCLUDED_FILES = {
    CONFIG_FILENAME,
    ".DS_Store",
    "Thumbs.db",
}

CandidateFilter = Callable[[Path], bool]


def accept_all(path: Path) -> bool:
    """Default candidate filter: every regular file is worth parsing."""
    return True


def extension_filter(extensions: Sequence[str]) -> CandidateFilter:
    """Return a filter that only lets through files ending in one of ``extensions``.

    Only useful as a speed-up for ecosystems that always use the extension; the
    parser still has the final say on every candidate.
    """
    allowed = tuple(ext.lower() for ext in extensions if ext)
    if not allowed:
        return accept_all

    def _filter(path: Path) -> bool:
        return path.name.lower().endswith(allowed)

    return _filter


@dataclass
class IgnoreRule:
    """A gitignore-style exclusion pattern from .treedocs.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


@dataclass
class DiscoveryResult:
    """Files that parsed, plus the candidates the parser rejected."""

    entries: List[ParsedEntry] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


class DiscoveryWalker:
    """Walks a package root and keeps every file the parser accepts."""

    def __init__(
        self,
        parser: SourceParser | None = None,
        *,
        candidate_filter: CandidateFilter | None = None,
        exclude_paths: Sequence[str] = (),
        exclude_dirs: Sequence[Path] = (),
        workers: Optional[int] = None,
    ) -> None:
        self.parser = parser or get_parser()
        self.candidate_filter = candidate_filter or accept_all
        self.rules = [rule for rule in map(build_ignore_rule, exclude_paths) if rule is not None]
        self.exclude_dirs = {Path(path).resolve() for path in exclude_dirs}
        self.workers = workers
        self.logger = get_logger("discovery")

    def discover(self, package_root: Path) -> List[ParsedEntry]:
        """Return a (file, header) entry for each file under ``package_root`` that parses."""
        return self.walk(package_root).entries

    def walk(self, package_root: Path) -> DiscoveryResult:
        root = Path(package_root).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Package path not found: {package_root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Package path is not a directory: {package_root}")

        candidates = sorted(self.iter_candidates(root))
        self.logger.debug("Found %d candidate files under %s", len(candidates), root)

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            outcomes = list(executor.map(self._parse_candidate, candidates))

        result = DiscoveryResult()
        for path, header in outcomes:
            if header is None:
                result.skipped.append(path)
            else:
                result.entries.append(ParsedEntry(path=path, header=header))
        self.logger.debug(
            "Parsed %d files, skipped %d", len(result.entries), len(result.skipped)
        )
        return result

    def iter_candidates(self, root: Path) -> Iterator[Path]:
        """Yield regular files under ``root`` that pass exclusion rules and the candidate filter."""
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in dirnames:
                if name in _EXCLUDED_DIRS:
                    continue
                if (current_dir / name).resolve() in self.exclude_dirs:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._is_ignored(rel_path, True):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in filenames:
                if filename in _EXCLUDED_FILES:
                    continue
                path = current_dir / filename
                if not path.is_file():
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._is_ignored(rel_path, False):
                    continue
                if not self.candidate_filter(path):
                    continue
                yield path

    def _is_ignored(self, rel_path: str, is_dir: bool) -> bool:
        return any(rule.matches(rel_path, is_dir) for rule in self.rules)

    def _parse_candidate(self, path: Path) -> Tuple[Path, Optional[str]]:
        contents = path.read_bytes()
        try:
            parsed = self.parser.parse(path, contents)
        except ParseError as exc:
            self.logger.warning(
                "Invalid input %s: %s ... documentation won't be generated for this file",
                path,
                exc,
            )
            return path, None
        return path, parsed.header


__all__ = [
    "CandidateFilter",
    "DiscoveryResult",
    "DiscoveryWalker",
    "IgnoreRule",
    "accept_all",
    "build_ignore_rule",
    "extension_filter",
]
