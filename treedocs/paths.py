"""Relative navigation between generated pages and the output root."""

from __future__ import annotations

from pathlib import Path


def resolve_relative_path(output_root: Path, current_dir: Path) -> str:
    """Return the ``../`` prefix that climbs from ``current_dir`` to ``output_root``.

    ``current_dir`` must be ``output_root`` itself or one of its descendants::

        >>> resolve_relative_path(Path("/a/b/c"), Path("/a/b/c/d/e"))
        '../../'
        >>> resolve_relative_path(Path("/a"), Path("/a"))
        ''
    """
    if current_dir == output_root:
        return ""
    try:
        relative = current_dir.relative_to(output_root)
    except ValueError as exc:
        raise ValueError(f"{current_dir} is not inside {output_root}") from exc
    return "../" * len(relative.parts)


def add_html_extension(path: Path) -> Path:
    """Append ``.html`` to ``path`` while keeping any existing suffix."""
    return path.with_name(f"{path.name}.html")


__all__ = ["add_html_extension", "resolve_relative_path"]
