"""Hexagonal coordinate system using axial coordinates (q, r).

Axial coordinates define position on a hex grid where:
- q axis runs along the plane's first diagonal
- r axis runs along the plane's depth axis
- s = -q - r is the implicit third cube coordinate

Components are stored as floats because callers may hold intermediate
fractional results.  Coordinates produced by :meth:`AxialCoord.from_fractional`
are always integral-valued.

Reference: https://www.redblobgames.com/grids/hexagons/
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AxialCoord:
    """Immutable axial hex coordinate.

    Equality and hashing compare the raw float components exactly.

    Attributes:
        q: Column coordinate.
        r: Row coordinate.
    """

    q: float
    r: float

    # -- Cube coordinate -------------------------------------------------

    @property
    def s(self) -> float:
        """Implicit cube coordinate: s = -q - r."""
        return -self.q - self.r

    def to_cube(self) -> tuple[float, float, float]:
        """Return the cube triple (x, y, z) with x + y + z == 0."""
        return (self.q, self.r, self.s)

    @classmethod
    def from_cube(cls, x: float, y: float, z: float) -> AxialCoord:
        """Drop the redundant cube component (z is implied by x and y)."""
        return cls(x, y)

    # -- Rounding --------------------------------------------------------

    @classmethod
    def from_fractional(cls, q: float, r: float) -> AxialCoord:
        """Round a fractional axial pair to the nearest hex cell.

        Rounds in cube space, then rebuilds the component with the largest
        rounding error from the other two so that x + y + z stays 0.
        """
        fx, fy = q, r
        fz = -q - r

        x = round(fx)
        y = round(fy)
        z = round(fz)

        x_diff = abs(x - fx)
        y_diff = abs(y - fy)
        z_diff = abs(z - fz)

        if x_diff > y_diff and x_diff > z_diff:
            x = -y - z
        elif y_diff > z_diff:
            y = -x - z
        # else: z = -x - y (implicit, not stored)

        # float(int) never yields -0.0
        return cls(float(x), float(y))

    # -- Arithmetic ------------------------------------------------------

    def __add__(self, other: AxialCoord) -> AxialCoord:
        return AxialCoord(self.q + other.q, self.r + other.r)

    def __sub__(self, other: AxialCoord) -> AxialCoord:
        return AxialCoord(self.q - other.q, self.r - other.r)

    # -- Serialization ---------------------------------------------------

    def key(self) -> str:
        """Compact ``"q,r"`` form used in logs and file formats."""
        return f"{self.q:g},{self.r:g}"

    def __repr__(self) -> str:
        return f"Hex({self.q:g},{self.r:g})"
