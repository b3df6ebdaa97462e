"""Tests for treedocs.pages."""

from __future__ import annotations

import logging
from pathlib import Path

from markupsafe import Markup

from treedocs.models import RunContext
from treedocs.pages import PageRenderer, output_path_for
from treedocs.rendering import MarkdownError


def _context(tmp_path: Path) -> RunContext:
    package_root = tmp_path / "package"
    package_root.mkdir(exist_ok=True)
    return RunContext(
        package_root=package_root,
        output_root=tmp_path / "out",
        package_name="Prelude",
    )


def _failing_renderer(text: str) -> Markup:
    raise MarkdownError("unexpected end of input")


def test_output_path_mirrors_the_source_tree(tmp_path: Path) -> None:
    package_root = tmp_path / "package"
    output_root = tmp_path / "out"

    assert output_path_for(package_root / "Bool" / "not", package_root, output_root) == (
        output_root / "Bool" / "not.html"
    )
    assert output_path_for(package_root / "package.dhall", package_root, output_root) == (
        output_root / "package.dhall.html"
    )


def test_render_writes_markdown_header_with_relative_navigation(tmp_path: Path) -> None:
    context = _context(tmp_path)
    source = context.package_root / "Bool" / "not"

    output = PageRenderer().render(source, "{- # Negation\n\nFlips a *Bool*. -}", context)

    assert output == context.output_root / "Bool" / "not.html"
    html = output.read_text(encoding="utf-8")
    assert "<h1>Negation</h1>" in html
    assert "<em>Bool</em>" in html
    assert 'href="../index.css"' in html
    assert 'href="../index.html"' in html
    assert ">Prelude<" in html
    assert "Bool/not" in html


def test_render_at_the_root_uses_an_empty_prefix(tmp_path: Path) -> None:
    context = _context(tmp_path)

    output = PageRenderer().render(context.package_root / "package.dhall", "-- hi", context)

    html = output.read_text(encoding="utf-8")
    assert 'href="index.css"' in html
    assert "<p>hi</p>" in html


def test_render_falls_back_to_literal_text_when_markdown_fails(tmp_path: Path, caplog) -> None:
    context = _context(tmp_path)
    renderer = PageRenderer(markdown_renderer=_failing_renderer)
    source = context.package_root / "a" / "b" / "c.dhall"

    with caplog.at_level(logging.WARNING, logger="treedocs"):
        output = renderer.render(source, "-- Some <b>bold</b> & text", context)

    html = output.read_text(encoding="utf-8")
    assert html.strip()
    assert "Some &lt;b&gt;bold&lt;/b&gt; &amp; text" in html
    assert "<b>bold</b>" not in html
    assert 'href="../../index.css"' in html
    assert any("c.dhall" in record.getMessage() for record in caplog.records)


def test_render_header_returns_markup_on_success(tmp_path: Path) -> None:
    body = PageRenderer().render_header(tmp_path / "x.dhall", "-- **bold**")
    assert isinstance(body, Markup)
    assert "<strong>bold</strong>" in body


def test_render_handles_empty_headers(tmp_path: Path) -> None:
    context = _context(tmp_path)
    renderer = PageRenderer(markdown_renderer=_failing_renderer)

    output = renderer.render(context.package_root / "empty.dhall", "  \n", context)

    html = output.read_text(encoding="utf-8")
    assert "doc-plain" not in html
    assert "empty.dhall" in html


def test_render_is_idempotent(tmp_path: Path) -> None:
    context = _context(tmp_path)
    renderer = PageRenderer()
    source = context.package_root / "x" / "y.dhall"

    first = renderer.render(source, "-- header", context).read_bytes()
    second = renderer.render(source, "-- header", context).read_bytes()

    assert first == second


def test_render_escapes_raw_html_in_headers(tmp_path: Path) -> None:
    context = _context(tmp_path)
    header = (
        "{- Use <b>bold</b> sparingly.\n\n"
        "<script>alert(1)</script>\n\n"
        '<div onclick="steal()">*still markdown*</div> -}'
    )

    html = PageRenderer().render(context.package_root / "x.dhall", header, context).read_text(
        encoding="utf-8"
    )

    assert "<script" not in html
    assert "<div onclick" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "Use &lt;b&gt;bold&lt;/b&gt; sparingly." in html
    assert "<em>still markdown</em>" in html
