"""Pipeline orchestration: discover, render pages, build indexes, copy assets."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from .assets import write_assets
from .config import CONFIG_FILENAME, TreeDocsConfig, load_config
from .discovery import DiscoveryWalker, extension_filter
from .indexes import IndexBuilder
from .logging import get_logger
from .models import ParsedEntry, RunContext, RunOutcome
from .pages import PageRenderer
from .parsers import get_parser
from .rendering import PageTemplates

NO_DOCUMENTATION_MESSAGE = (
    "No documentation was generated because no parseable source file was found"
)


def derive_package_name(package_root: Path) -> str:
    """Use the package directory's own name, without trailing separators."""
    name = package_root.name
    if not name:
        name = str(package_root).rstrip("/\\")
    return name or "package"


class Orchestrator:
    """Coordinates a full documentation run for one package."""

    def __init__(
        self,
        walker: DiscoveryWalker | None = None,
        page_renderer: PageRenderer | None = None,
        index_builder: IndexBuilder | None = None,
        *,
        config: TreeDocsConfig | None = None,
        workers: Optional[int] = None,
    ) -> None:
        self._walker = walker
        self._page_renderer = page_renderer
        self._index_builder = index_builder
        self._config = config
        self._workers = workers
        self.logger = get_logger("orchestrator")

    def run(
        self,
        package_root: str | Path,
        output_root: str | Path,
        package_name: str | None = None,
    ) -> RunOutcome:
        """Regenerate the whole documentation tree for ``package_root`` into ``output_root``."""
        package_path = Path(package_root).expanduser().resolve()
        output_path = Path(output_root).expanduser().resolve()
        if output_path == package_path or output_path in package_path.parents:
            raise ValueError(
                f"Output directory {output_path} must not be the package directory "
                "or one of its parents"
            )
        config = self._config or load_config(package_path / CONFIG_FILENAME)
        workers = self._workers if self._workers is not None else config.workers

        name = package_name or config.package_name or derive_package_name(package_path)
        context = RunContext(
            package_root=package_path,
            output_root=output_path,
            package_name=name,
        )
        self.logger.info("Generating documentation for %s into %s", package_path, output_path)

        walker = self._walker or self._build_walker(config, output_path, workers)
        discovered = walker.walk(package_path)
        if not discovered.entries:
            self.logger.info(NO_DOCUMENTATION_MESSAGE)
            return RunOutcome(
                output_root=output_path,
                package_name=name,
                skipped=len(discovered.skipped),
                message=NO_DOCUMENTATION_MESSAGE,
            )

        templates = PageTemplates(config.templates_dir)
        page_renderer = self._page_renderer or PageRenderer(templates)
        index_builder = self._index_builder or IndexBuilder(templates, workers=workers)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            pages = list(
                executor.map(
                    lambda entry: self._render_entry(page_renderer, entry, context),
                    discovered.entries,
                )
            )
        self.logger.debug("Rendered %d pages", len(pages))

        indexes = index_builder.build(pages, context)
        self.logger.debug("Wrote %d directory indexes", len(indexes))

        assets = write_assets(output_path)

        self.logger.info(
            "Generated %d pages and %d indexes for package %s",
            len(pages),
            len(indexes),
            name,
        )
        return RunOutcome(
            output_root=output_path,
            package_name=name,
            pages=sorted(pages),
            indexes=indexes,
            assets=assets,
            skipped=len(discovered.skipped),
        )

    @staticmethod
    def _render_entry(renderer: PageRenderer, entry: ParsedEntry, context: RunContext) -> Path:
        return renderer.render(entry.path, entry.header, context)

    @staticmethod
    def _build_walker(
        config: TreeDocsConfig, output_root: Path, workers: Optional[int]
    ) -> DiscoveryWalker:
        return DiscoveryWalker(
            get_parser(config.parser),
            candidate_filter=extension_filter(config.discovery.extensions),
            exclude_paths=config.discovery.exclude_paths,
            exclude_dirs=[output_root],
            workers=workers,
        )


__all__ = ["NO_DOCUMENTATION_MESSAGE", "Orchestrator", "derive_package_name"]
