"""Plane projector: a configured view of the hex transform pipeline.

Binds cell size, plane extent and elevation once so callers do not have to
thread them through every conversion.  Settings are validated on
construction; the transforms themselves never raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hexmap.models.hex import AxialCoord
from hexmap.util import hex_math
from hexmap.util.errors import InvalidConfiguration
from hexmap.util.hex_math import PLANE_EXTENT, Point

if TYPE_CHECKING:
    from hexmap.loaders.grid_config_loader import GridConfig


class PlaneProjector:
    """Converts between a bounded square world plane and hex space.

    Args:
        cell_size: Size of one hex cell in normalized plane units.
        extent: Half-extent of the world plane.
        elevation: World y of the plane, used for cell centres.

    Raises:
        InvalidConfiguration: If ``cell_size`` or ``extent`` is not positive.
    """

    def __init__(
        self,
        cell_size: float,
        extent: float = PLANE_EXTENT,
        elevation: float = 0.0,
    ) -> None:
        if not cell_size > 0:
            raise InvalidConfiguration("cell_size", cell_size)
        if not extent > 0:
            raise InvalidConfiguration("plane_extent", extent)
        self._cell_size = float(cell_size)
        self._extent = float(extent)
        self._elevation = float(elevation)

    @classmethod
    def from_config(cls, config: GridConfig) -> PlaneProjector:
        return cls(config.cell_size, config.plane_extent, config.elevation)

    @property
    def cell_size(self) -> float:
        return self._cell_size

    @property
    def extent(self) -> float:
        return self._extent

    @property
    def elevation(self) -> float:
        return self._elevation

    # -- Transforms ------------------------------------------------------

    def world_to_normalized(self, point: Point) -> tuple[float, float]:
        return hex_math.world_to_normalized(point, self._cell_size, self._extent)

    def point_to_hex(self, point: Point) -> AxialCoord:
        """Return the cell under a world point (already ray-cast onto the plane)."""
        return hex_math.point_to_hex(point, self._cell_size, self._extent)

    def hex_to_point(self, coord: AxialCoord) -> Point:
        """Return the world-space centre of ``coord`` at the plane's elevation."""
        return hex_math.hex_to_point(coord, self._cell_size, self._extent, self._elevation)

    def contains(self, point: Point) -> bool:
        """True if the point lies on the bounded plane (x/z within the extent)."""
        x, _, z = point
        return abs(x) <= self._extent and abs(z) <= self._extent

    def __repr__(self) -> str:
        return (f"PlaneProjector(cell_size={self._cell_size}, "
                f"extent={self._extent}, elevation={self._elevation})")
