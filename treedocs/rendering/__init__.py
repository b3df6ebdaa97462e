"""Markdown and HTML template rendering for generated pages."""

from .markup import MarkdownError, render_markdown
from .templates import PageTemplates

__all__ = ["MarkdownError", "PageTemplates", "render_markdown"]
