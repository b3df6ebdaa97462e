"""Tests for parser discovery utilities."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from treedocs.models import ParsedSource
from treedocs.parsers import DhallHeaderParser, SourceParser, discover_parsers, get_parser


class DummyParser(SourceParser):
    """Test parser used for plugin discovery validation."""

    name = "dummy"

    def parse(self, path: Path, contents: bytes) -> ParsedSource:  # pragma: no cover - unused
        return ParsedSource(header="", document=contents.decode("utf-8"))


def _patch_entry_points(monkeypatch, *entries) -> None:
    class DummyEntryPoints(list):
        def select(self, **kwargs):
            if kwargs.get("group") == "treedocs.parsers":
                return self
            return []

    monkeypatch.setattr(
        "treedocs.parsers.metadata.entry_points",
        lambda: DummyEntryPoints(entries),
        raising=False,
    )


def test_get_parser_defaults_to_dhall() -> None:
    assert isinstance(get_parser(), DhallHeaderParser)
    assert isinstance(get_parser("DHALL"), DhallHeaderParser)


def test_discover_parsers_lists_builtins() -> None:
    assert "dhall" in discover_parsers()


def test_get_parser_loads_entry_points(monkeypatch) -> None:
    _patch_entry_points(monkeypatch, SimpleNamespace(name="dummy", load=lambda: DummyParser))

    parser = get_parser("dummy")
    assert isinstance(parser, DummyParser)


def test_entry_points_cannot_shadow_builtins(monkeypatch) -> None:
    _patch_entry_points(monkeypatch, SimpleNamespace(name="dhall", load=lambda: DummyParser))

    assert isinstance(get_parser("dhall"), DhallHeaderParser)


def test_get_parser_rejects_entry_point_of_wrong_type(monkeypatch) -> None:
    _patch_entry_points(monkeypatch, SimpleNamespace(name="broken", load=lambda: object()))

    with pytest.raises(TypeError):
        get_parser("broken")


def test_get_parser_raises_for_unknown_name() -> None:
    with pytest.raises(ValueError):
        get_parser("does-not-exist")
