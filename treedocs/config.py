"""Configuration loading for treedocs (.treedocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".treedocs.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DiscoveryConfig:
    """Candidate filtering applied before files are handed to the parser."""

    extensions: List[str] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class TreeDocsConfig:
    """Represents the settings defined in .treedocs.yml."""

    root: Path
    package_name: Optional[str] = None
    output: Optional[Path] = None
    parser: Optional[str] = None
    workers: Optional[int] = None
    templates_dir: Optional[Path] = None
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)


def load_config(config_path: Path) -> TreeDocsConfig:
    """Load configuration from ``config_path`` (a file or the directory holding it)."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return TreeDocsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    output_str = _as_str(data.get("output"))
    templates_dir_str = _as_str(data.get("templates_dir"))

    workers = _as_int(data.get("workers"))
    if workers is not None and workers < 1:
        raise ConfigError("workers must be a positive integer")

    discovery_data = _as_dict(data.get("discovery"))
    discovery = DiscoveryConfig()
    if discovery_data:
        discovery.extensions = [_normalise_extension(ext) for ext in _as_str_list(discovery_data.get("extensions"))]
        discovery.exclude_paths = _as_str_list(discovery_data.get("exclude_paths"))

    return TreeDocsConfig(
        root=root,
        package_name=_as_str(data.get("package_name")),
        output=root / output_str if output_str else None,
        parser=_as_str(data.get("parser")),
        workers=workers,
        templates_dir=root / templates_dir_str if templates_dir_str else None,
        discovery=discovery,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _normalise_extension(value: str) -> str:
    value = value.strip()
    if value and not value.startswith("."):
        return f".{value}"
    return value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
