"""Tests for grid configuration loading and validation."""

from pathlib import Path

import pytest

from hexmap.loaders.grid_config_loader import GridConfig, load_grid_config
from hexmap.util.errors import InvalidConfiguration


class TestGridConfig:
    def test_defaults_are_valid(self):
        cfg = GridConfig()
        cfg.validate()
        assert cfg.cell_size == 0.1
        assert cfg.plane_extent == 5.0
        assert cfg.grid_size == 5

    @pytest.mark.parametrize("kwargs", [
        {"cell_size": 0.0},
        {"cell_size": -1.0},
        {"plane_extent": 0.0},
        {"grid_size": 0},
        {"preview_color": (1.0, 1.0, 1.0)},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfiguration):
            GridConfig(**kwargs).validate()


class TestLoadGridConfig:
    def test_missing_file_returns_defaults(self, tmp_path: Path):
        cfg = load_grid_config(str(tmp_path / "nope.yaml"))
        assert cfg == GridConfig()

    def test_loads_values_and_ignores_unknown_keys(self, tmp_path: Path):
        path = tmp_path / "grid.yaml"
        path.write_text(
            "cell_size: 0.25\n"
            "grid_size: 12\n"
            "preview_color: [0.2, 0.4, 0.6, 1]\n"
            "shader: legacy\n",
            encoding="utf-8",
        )
        cfg = load_grid_config(str(path))
        assert cfg.cell_size == 0.25
        assert cfg.grid_size == 12
        assert cfg.preview_color == (0.2, 0.4, 0.6, 1.0)
        assert cfg.plane_extent == 5.0

    def test_empty_file_returns_defaults(self, tmp_path: Path):
        path = tmp_path / "grid.yaml"
        path.write_text("", encoding="utf-8")
        assert load_grid_config(str(path)) == GridConfig()

    def test_invalid_file_raises(self, tmp_path: Path):
        path = tmp_path / "grid.yaml"
        path.write_text("cell_size: 0\n", encoding="utf-8")
        with pytest.raises(InvalidConfiguration):
            load_grid_config(str(path))

    def test_shipped_config_loads(self):
        path = Path(__file__).resolve().parent.parent / "config" / "grid.yaml"
        cfg = load_grid_config(str(path))
        assert cfg.cell_size == 0.1
        assert cfg.map_path == "maps/default.yaml"

    def test_list_document_raises(self, tmp_path: Path):
        path = tmp_path / "grid.yaml"
        path.write_text("- cell_size\n- 0.1\n", encoding="utf-8")
        with pytest.raises(InvalidConfiguration):
            load_grid_config(str(path))

    @pytest.mark.parametrize("line", [
        "cell_size: big\n",
        "grid_size: [1, 2]\n",
        "elevation: true\n",
        "preview_color: [red, green, blue, 1]\n",
    ])
    def test_non_numeric_values_raise(self, tmp_path: Path, line):
        path = tmp_path / "grid.yaml"
        path.write_text(line, encoding="utf-8")
        with pytest.raises(InvalidConfiguration):
            load_grid_config(str(path))

    def test_numeric_strings_are_coerced(self, tmp_path: Path):
        path = tmp_path / "grid.yaml"
        path.write_text('cell_size: "0.5"\ngrid_size: "7"\n', encoding="utf-8")
        cfg = load_grid_config(str(path))
        assert cfg.cell_size == 0.5
        assert cfg.grid_size == 7
