"""Tests for treedocs.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from treedocs.config import ConfigError, DiscoveryConfig, TreeDocsConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, TreeDocsConfig)
    assert config.root == tmp_path.resolve()
    assert config.package_name is None
    assert config.output is None
    assert config.parser is None
    assert config.workers is None
    assert config.templates_dir is None
    assert config.discovery == DiscoveryConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".treedocs.yml"
    config_file.write_text(
        """
package_name: Prelude
output: site/docs
parser: dhall
workers: 4
templates_dir: templates
discovery:
  extensions: [dhall, ".txt"]
  exclude_paths:
    - "tests/"
    - "*.tmp"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.package_name == "Prelude"
    assert config.output == tmp_path.resolve() / "site" / "docs"
    assert config.parser == "dhall"
    assert config.workers == 4
    assert config.templates_dir == tmp_path.resolve() / "templates"
    assert config.discovery.extensions == [".dhall", ".txt"]
    assert config.discovery.exclude_paths == ["tests/", "*.tmp"]


def test_load_config_accepts_empty_file(tmp_path: Path) -> None:
    (tmp_path / ".treedocs.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.package_name is None


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".treedocs.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".treedocs.yml").write_text("package_name: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_positive_workers(tmp_path: Path) -> None:
    (tmp_path / ".treedocs.yml").write_text("workers: 0\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reads_explicit_file_name(tmp_path: Path) -> None:
    custom = tmp_path / "docs-config.yml"
    custom.write_text("package_name: Custom\n", encoding="utf-8")

    assert load_config(custom).package_name == "Custom"
