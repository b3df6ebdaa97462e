"""Source parser implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable

from .base import ParseError, SourceParser
from .dhall import DhallHeaderParser

_ENTRY_POINT_GROUP = "treedocs.parsers"

DEFAULT_PARSER = "dhall"

_BUILTIN_FACTORIES: dict[str, Callable[[], SourceParser]] = {
    "dhall": DhallHeaderParser,
}


def discover_parsers() -> Dict[str, Callable[[], SourceParser]]:
    """Return parser factories keyed by lower-cased name, built-ins first."""
    factories: Dict[str, Callable[[], SourceParser]] = dict(_BUILTIN_FACTORIES)

    for entry in _iter_entry_points():
        key = entry.name.lower()
        if key in factories:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load parser entry point '{entry.name}': {exc}") from exc

        def _factory(obj: object = loaded) -> SourceParser:
            return _coerce_parser(obj)

        factories[key] = _factory

    return factories


def get_parser(name: str | None = None) -> SourceParser:
    """Instantiate the parser registered as ``name`` (the Dhall parser by default)."""
    key = (name or DEFAULT_PARSER).lower()
    factories = discover_parsers()
    factory = factories.get(key)
    if factory is None:
        known = ", ".join(sorted(factories))
        raise ValueError(f"Unknown parser '{name}'. Available parsers: {known}")
    instance = factory()
    if not isinstance(instance, SourceParser):
        raise TypeError(f"Parser factory for '{name}' did not return a SourceParser instance")
    return instance


def _coerce_parser(obj: object) -> SourceParser:
    if isinstance(obj, SourceParser):
        return obj
    if isinstance(obj, type) and issubclass(obj, SourceParser):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, SourceParser):
            return instance
    raise TypeError("Parser entry point must be a SourceParser subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "DEFAULT_PARSER",
    "DhallHeaderParser",
    "ParseError",
    "SourceParser",
    "discover_parsers",
    "get_parser",
]
