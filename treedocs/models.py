"""Core data models shared across treedocs components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class ParsedSource:
    """Result of parsing one source file: its leading header and the rest."""

    header: str
    document: str


@dataclass(frozen=True)
class ParsedEntry:
    """A source file that parsed successfully, paired with its raw header."""

    path: Path
    header: str


@dataclass(frozen=True)
class RunContext:
    """Per-invocation state threaded through every rendered page."""

    package_root: Path
    output_root: Path
    package_name: str


@dataclass(frozen=True)
class DocParams:
    """Values every page template needs for navigation."""

    package_name: str
    relative_resources_path: str


@dataclass
class DirectoryIndex:
    """Listing for one output directory: direct pages and immediate subdirectories."""

    directory: Path
    title: str
    files: List[str] = field(default_factory=list)
    directories: List[str] = field(default_factory=list)


@dataclass
class RunOutcome:
    """Summary of a documentation run."""

    output_root: Path
    package_name: str
    pages: List[Path] = field(default_factory=list)
    indexes: List[Path] = field(default_factory=list)
    assets: List[Path] = field(default_factory=list)
    skipped: int = 0
    message: Optional[str] = None

    @property
    def generated(self) -> bool:
        return bool(self.pages)
