"""Directory listing pages for the generated tree."""

from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from .logging import get_logger
from .models import DirectoryIndex, DocParams, RunContext
from .paths import resolve_relative_path
from .rendering import PageTemplates

INDEX_FILENAME = "index.html"
ROOT_TITLE = "package"


def group_pages_by_directory(output_root: Path, pages: Iterable[Path]) -> Dict[Path, Set[Path]]:
    """Map every directory from ``output_root`` down to each page's parent to its direct pages.

    Ancestors without pages of their own still get an (empty) entry so that
    every level of the tree can be navigated.
    """
    grouped: Dict[Path, Set[Path]] = defaultdict(set)
    for page in pages:
        directory = page.parent
        grouped[directory].add(page)
        while directory != output_root:
            if output_root not in directory.parents:
                raise ValueError(f"{page} is not inside {output_root}")
            directory = directory.parent
            grouped.setdefault(directory, set())
    return dict(grouped)


def list_subdirectories(directory: Path) -> List[str]:
    return sorted(child.name for child in directory.iterdir() if child.is_dir())


class IndexBuilder:
    """Writes an index.html into every directory of the output tree."""

    def __init__(
        self,
        templates: PageTemplates | None = None,
        *,
        workers: Optional[int] = None,
    ) -> None:
        self.templates = templates or PageTemplates()
        self.workers = workers
        self.logger = get_logger("indexes")

    def build(self, pages: Iterable[Path], context: RunContext) -> List[Path]:
        """Write one index per directory and return the index paths, sorted."""
        grouped = group_pages_by_directory(context.output_root, pages)
        directories = sorted(grouped)
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            written = list(
                executor.map(
                    lambda directory: self.write_index(directory, grouped[directory], context),
                    directories,
                )
            )
        return sorted(written)

    def collect(self, directory: Path, pages: Iterable[Path], context: RunContext) -> DirectoryIndex:
        """Describe the direct children of ``directory``; subdirectories come from disk."""
        if directory == context.output_root:
            title = ROOT_TITLE
        else:
            title = f"{directory.relative_to(context.output_root).as_posix()}/"

        files = []
        for page in pages:
            if page.name == INDEX_FILENAME:
                self.logger.warning(
                    "%s is replaced by the directory index of %s", page, directory
                )
                continue
            files.append(page.name)

        return DirectoryIndex(
            directory=directory,
            title=title,
            files=sorted(files),
            directories=list_subdirectories(directory),
        )

    def write_index(self, directory: Path, pages: Iterable[Path], context: RunContext) -> Path:
        index = self.collect(directory, pages, context)
        params = DocParams(
            package_name=context.package_name,
            relative_resources_path=resolve_relative_path(context.output_root, directory),
        )
        index_file = directory / INDEX_FILENAME
        index_file.write_text(self.templates.render_index(index, params), encoding="utf-8")
        self.logger.debug("Wrote %s", index_file)
        return index_file


__all__ = [
    "INDEX_FILENAME",
    "IndexBuilder",
    "group_pages_by_directory",
    "list_subdirectories",
]
