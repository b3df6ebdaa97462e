"""Static files shipped with treedocs and copied into every output tree."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from .logging import get_logger

STATIC_DIR = Path(__file__).resolve().parent / "static"

logger = get_logger("assets")


def load_assets(static_dir: Path = STATIC_DIR) -> Dict[str, bytes]:
    """Return the bundled assets as ``relative filename -> contents``."""
    assets: Dict[str, bytes] = {}
    for path in sorted(static_dir.rglob("*")):
        if path.is_file():
            assets[path.relative_to(static_dir).as_posix()] = path.read_bytes()
    return assets


def write_assets(output_root: Path, assets: Dict[str, bytes] | None = None) -> List[Path]:
    """Copy every asset verbatim into ``output_root``, creating it when needed."""
    bundle = load_assets() if assets is None else assets
    output_root.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for name, contents in sorted(bundle.items()):
        target = output_root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(contents)
        written.append(target)
    logger.debug("Copied %d static assets into %s", len(written), output_root)
    return written


__all__ = ["STATIC_DIR", "load_assets", "write_assets"]
