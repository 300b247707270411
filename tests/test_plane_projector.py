"""Tests for PlaneProjector: validated, bound transform settings."""

import pytest

from hexmap.engine.plane_projector import PlaneProjector
from hexmap.loaders.grid_config_loader import GridConfig
from hexmap.models.hex import AxialCoord
from hexmap.util.errors import InvalidConfiguration


class TestConstruction:
    @pytest.mark.parametrize("cell_size", [0.0, -0.1])
    def test_non_positive_cell_size_rejected(self, cell_size):
        with pytest.raises(InvalidConfiguration) as exc_info:
            PlaneProjector(cell_size)
        assert exc_info.value.setting == "cell_size"

    def test_non_positive_extent_rejected(self):
        with pytest.raises(InvalidConfiguration):
            PlaneProjector(0.1, extent=0.0)

    def test_from_config(self):
        p = PlaneProjector.from_config(GridConfig(cell_size=0.5, plane_extent=8.0, elevation=1.5))
        assert p.cell_size == 0.5
        assert p.extent == 8.0
        assert p.elevation == 1.5


class TestTransforms:
    def test_round_trip(self):
        p = PlaneProjector(0.1, elevation=2.0)
        for q in range(-9, 10):
            for r in range(-9, 10):
                c = AxialCoord(q, r)
                point = p.hex_to_point(c)
                assert point[1] == 2.0
                assert p.point_to_hex(point) == c

    def test_world_to_normalized_matches_cell_units(self):
        p = PlaneProjector(0.5)
        assert p.world_to_normalized((0.0, 0.0, 0.0)) == pytest.approx((0.0, 0.0))


class TestContains:
    def test_inside_and_on_edge(self):
        p = PlaneProjector(0.1)
        assert p.contains((0.0, 0.0, 0.0))
        assert p.contains((5.0, 3.0, -5.0))

    def test_outside(self):
        p = PlaneProjector(0.1)
        assert not p.contains((5.01, 0.0, 0.0))
        assert not p.contains((0.0, 0.0, -6.0))
