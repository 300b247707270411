"""Hex math utilities: transforms between the world plane and hex space.

Pipeline (forward):
    world point (x, y, z)  →  normalized plane (nx, ny)  →  fractional axial (q, r)
    →  rounded AxialCoord

The plane is the world x/z plane; y is elevation and does not take part in
the transform.  Every function here has an exact inverse so cell centres
round-trip without drift.

Reference: https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations

import math

from hexmap.models.hex import AxialCoord

SQRT3 = math.sqrt(3.0)

PLANE_EXTENT: float = 5.0
"""Half-extent of the square world plane (world units)."""

Point = tuple[float, float, float]


def normalize_axis(value: float, extent: float = PLANE_EXTENT) -> float:
    """Map a world axis value from [-extent, extent] to [-1, 1] (unclamped)."""
    return ((value + extent) / (2.0 * extent)) * 2.0 - 1.0


def denormalize_axis(value: float, extent: float = PLANE_EXTENT) -> float:
    """Inverse of :func:`normalize_axis`."""
    return ((value + 1.0) / 2.0) * (2.0 * extent) - extent


def world_to_normalized(
    point: Point, cell_size: float, extent: float = PLANE_EXTENT
) -> tuple[float, float]:
    """Project a world point onto normalized plane coordinates in cell units.

    Both axes are negated so increasing q/r moves towards the positive world
    axes in the grid's visual orientation.
    """
    x, _, z = point
    return (
        -(normalize_axis(x, extent) / cell_size),
        -(normalize_axis(z, extent) / cell_size),
    )


def normalized_to_world(
    nx: float,
    ny: float,
    cell_size: float,
    extent: float = PLANE_EXTENT,
    elevation: float = 0.0,
) -> Point:
    """Inverse of :func:`world_to_normalized`; y is set to ``elevation``."""
    return (
        denormalize_axis(-nx * cell_size, extent),
        elevation,
        denormalize_axis(-ny * cell_size, extent),
    )


def normalized_to_axial_fractional(x: float, y: float) -> tuple[float, float]:
    """Apply the hex basis: q = 2/3·x, r = -1/3·x + √3/3·y."""
    q = 2.0 / 3.0 * x
    r = -1.0 / 3.0 * x + SQRT3 / 3.0 * y
    return q, r


def axial_to_normalized(q: float, r: float) -> tuple[float, float]:
    """Inverse hex basis: x = 3/2·q, y = √3/2·q + √3·r."""
    x = 3.0 / 2.0 * q
    y = SQRT3 / 2.0 * q + SQRT3 * r
    return x, y


def point_to_hex(point: Point, cell_size: float, extent: float = PLANE_EXTENT) -> AxialCoord:
    """Return the hex cell containing a world point."""
    nx, ny = world_to_normalized(point, cell_size, extent)
    q, r = normalized_to_axial_fractional(nx, ny)
    return AxialCoord.from_fractional(q, r)


def hex_to_point(
    coord: AxialCoord,
    cell_size: float,
    extent: float = PLANE_EXTENT,
    elevation: float = 0.0,
) -> Point:
    """Return the world-space centre of a hex cell."""
    nx, ny = axial_to_normalized(coord.q, coord.r)
    return normalized_to_world(nx, ny, cell_size, extent, elevation)
