"""Render one HTML page per parsed source file."""

from __future__ import annotations

from pathlib import Path

from markupsafe import Markup

from .headers import normalize_header
from .logging import get_logger
from .models import DocParams, RunContext
from .paths import add_html_extension, resolve_relative_path
from .rendering import MarkdownError, PageTemplates, render_markdown
from .rendering.markup import MarkdownRenderer


def output_path_for(source_path: Path, package_root: Path, output_root: Path) -> Path:
    """Mirror ``source_path`` under ``output_root`` with an ``.html`` suffix appended."""
    relative = source_path.relative_to(package_root)
    return output_root / add_html_extension(relative)


class PageRenderer:
    """Turns a source file header into a standalone HTML page."""

    def __init__(
        self,
        templates: PageTemplates | None = None,
        markdown_renderer: MarkdownRenderer | None = None,
    ) -> None:
        self.templates = templates or PageTemplates()
        self.markdown_renderer = markdown_renderer or render_markdown
        self.logger = get_logger("pages")

    def render(self, source_path: Path, header: str, context: RunContext) -> Path:
        """Write the page for ``source_path`` and return where it landed."""
        output_file = output_path_for(source_path, context.package_root, context.output_root)
        output_dir = output_file.parent
        output_dir.mkdir(parents=True, exist_ok=True)

        params = DocParams(
            package_name=context.package_name,
            relative_resources_path=resolve_relative_path(context.output_root, output_dir),
        )
        body = self.render_header(source_path, header)
        title = source_path.relative_to(context.package_root).as_posix()
        html = self.templates.render_page(title, body, params)

        output_file.write_text(html, encoding="utf-8")
        self.logger.debug("Wrote %s", output_file)
        return output_file

    def render_header(self, source_path: Path, header: str) -> Markup | str:
        """Return the header as markup, or as plain text when markdown rendering fails."""
        text = normalize_header(header)
        if not text:
            return ""
        try:
            return self.markdown_renderer(text)
        except MarkdownError as exc:
            self.logger.warning(
                "Could not render the header of %s as markdown: %s. "
                "Its plain text will be pasted in the documentation instead",
                source_path,
                exc,
            )
            return text


__all__ = ["PageRenderer", "output_path_for"]
