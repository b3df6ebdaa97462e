"""Jinja environment and page templates."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from ..models import DirectoryIndex, DocParams

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


class PageTemplates:
    """Renders source pages and directory indexes to HTML strings."""

    PAGE_TEMPLATE = "page.html.j2"
    INDEX_TEMPLATE = "index.html.j2"

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(DEFAULT_TEMPLATES_DIR))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=select_autoescape(enabled_extensions=("html", "j2"), default=True),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render_page(self, title: str, body: Markup | str, params: DocParams) -> str:
        template = self._env.get_template(self.PAGE_TEMPLATE)
        return template.render(
            title=title,
            body=body,
            is_markup=isinstance(body, Markup),
            package_name=params.package_name,
            relative_resources_path=params.relative_resources_path,
        )

    def render_index(self, index: DirectoryIndex, params: DocParams) -> str:
        template = self._env.get_template(self.INDEX_TEMPLATE)
        return template.render(
            title=index.title,
            files=index.files,
            directories=index.directories,
            package_name=params.package_name,
            relative_resources_path=params.relative_resources_path,
        )
