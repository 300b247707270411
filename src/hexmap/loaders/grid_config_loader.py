"""Grid configuration: loads grid settings from config/grid.yaml.

Provides a single ``GridConfig`` dataclass that is loaded once at startup
and then passed wherever grid geometry is needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Tuple

import yaml

from hexmap.util.errors import InvalidConfiguration
from hexmap.util.hex_math import PLANE_EXTENT

log = logging.getLogger(__name__)

DEFAULT_GRID_CONFIG_PATH = "config/grid.yaml"


@dataclass
class GridConfig:
    """All grid settings.

    Every field has a sensible default so the editor can start even
    without the file.
    """

    # -- Geometry ----------------------------------------------------
    grid_size: int = 5
    cell_size: float = 0.1
    plane_extent: float = PLANE_EXTENT
    elevation: float = 0.0

    # -- Presentation ------------------------------------------------
    preview_color: Tuple[float, float, float, float] = field(
        default_factory=lambda: (1.0, 1.0, 1.0, 0.5))

    # -- Persistence -------------------------------------------------
    map_path: str = "maps/default.yaml"

    def validate(self) -> None:
        """Raise InvalidConfiguration if a geometry setting is out of range."""
        if not self.cell_size > 0:
            raise InvalidConfiguration("cell_size", self.cell_size)
        if not self.plane_extent > 0:
            raise InvalidConfiguration("plane_extent", self.plane_extent)
        if self.grid_size < 1:
            raise InvalidConfiguration("grid_size", self.grid_size, "must be at least 1")
        if len(self.preview_color) != 4:
            raise InvalidConfiguration("preview_color", self.preview_color,
                                       "must have four components (RGBA)")


def load_grid_config(path: str = DEFAULT_GRID_CONFIG_PATH) -> GridConfig:
    """Load grid configuration from a YAML file.

    Missing keys fall back to dataclass defaults.  If the file does not
    exist, a warning is logged and pure defaults are returned.

    Raises:
        InvalidConfiguration: If the document is not a mapping or a loaded
            value is non-numeric or out of range.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Grid config not found at %s, using defaults", p)
        return GridConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise InvalidConfiguration("document", raw, "must be a mapping of settings")

    log.info("Loaded grid config from %s (%d keys)", p, len(raw))

    values = {k: v for k, v in raw.items() if k in GridConfig.__dataclass_fields__}
    for key, kind in _NUMERIC_FIELDS.items():
        if key in values:
            values[key] = _coerce(key, values[key], kind)

    color_raw = values.pop("preview_color", None)
    cfg = GridConfig(**values)
    if color_raw is not None:
        try:
            cfg.preview_color = tuple(float(c) for c in color_raw)
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration("preview_color", color_raw,
                                       "must be a list of numbers") from exc
    cfg.validate()
    return cfg


_NUMERIC_FIELDS = {
    "grid_size": int,
    "cell_size": float,
    "plane_extent": float,
    "elevation": float,
}


def _coerce(key: str, value: Any, kind: type) -> Any:
    if isinstance(value, bool):
        raise InvalidConfiguration(key, value, "must be a number")
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(key, value, "must be a number") from exc
