"""Markdown to HTML conversion for file headers."""

from __future__ import annotations

from typing import Callable

import markdown
from markdown.extensions import Extension
from markupsafe import Markup

_EXTENSIONS = ("fenced_code", "tables", "sane_lists")


class MarkdownError(RuntimeError):
    """Raised when header prose cannot be rendered as markdown."""


class EscapeRawHtmlExtension(Extension):
    """Treat raw HTML in a header as text, so ``<script>`` renders as ``&lt;script&gt;``."""

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        md.preprocessors.deregister("html_block", strict=False)
        md.inlinePatterns.deregister("html", strict=False)


MarkdownRenderer = Callable[[str], Markup]


def render_markdown(text: str) -> Markup:
    """Render ``text`` to HTML, returning markup safe to embed in a template."""
    if not text:
        return Markup("")
    try:
        html = markdown.markdown(
            text,
            extensions=[*_EXTENSIONS, EscapeRawHtmlExtension()],
            output_format="html",
        )
    except Exception as exc:
        raise MarkdownError(str(exc) or exc.__class__.__name__) from exc
    return Markup(html)


__all__ = ["EscapeRawHtmlExtension", "MarkdownError", "MarkdownRenderer", "render_markdown"]
