"""Tests for map_save and map_load round-trip persistence."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from hexmap.models.cell import CellRecord, CellState
from hexmap.models.hex import AxialCoord
from hexmap.persistence.map_load import load_map_data, parse_map_data
from hexmap.persistence.map_save import save_map_data
from hexmap.util.errors import MapDataError


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def _cells() -> list[tuple[AxialCoord, CellRecord]]:
    return [
        (AxialCoord(0, 0), CellRecord(content_id="tree", label="Tree", asset_ref="tiles/tree",
                                      representation=object(), state=CellState.INSTANTIATED)),
        (AxialCoord(2, -1), CellRecord(content_id="rock", label="Rock", asset_ref="tiles/rock",
                                       show_preview=False)),
        (AxialCoord(-3, 4), CellRecord(content_id="house", label="Small house",
                                       asset_ref="guid-0c1f")),
    ]


# -------------------------------------------------------------------
# Tests
# -------------------------------------------------------------------

class TestSaveLoad:
    @pytest.mark.asyncio
    async def test_save_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / "maps" / "map.yaml"
        await save_map_data(_cells(), path=str(path))
        assert path.exists()
        assert not path.with_suffix(".yaml.tmp").exists()

    @pytest.mark.asyncio
    async def test_parallel_sequences_on_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "map.yaml"
        await save_map_data(_cells(), path=str(path))
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert raw["meta"]["version"] == 1
        assert raw["coordinates"][1] == {"q": 2, "r": -1}
        assert raw["cells"][1]["content_id"] == "rock"
        assert len(raw["coordinates"]) == len(raw["cells"]) == 3
        # Live state is not persisted.
        assert "representation" not in raw["cells"][0]
        assert "state" not in raw["cells"][0]

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path: Path) -> None:
        path = str(tmp_path / "map.yaml")
        await save_map_data(_cells(), path=path)
        data = await load_map_data(path)
        assert data is not None
        assert list(data.cells) == [AxialCoord(0, 0), AxialCoord(2, -1), AxialCoord(-3, 4)]
        rock = data.cells[AxialCoord(2, -1)]
        assert rock.label == "Rock"
        assert rock.asset_ref == "tiles/rock"
        assert rock.show_preview is False
        assert rock.state is CellState.UNREALIZED
        assert data.cells[AxialCoord(0, 0)].representation is None

    @pytest.mark.asyncio
    async def test_load_nonexistent_returns_none(self, tmp_path: Path) -> None:
        assert await load_map_data(str(tmp_path / "nope.yaml")) is None

    @pytest.mark.asyncio
    async def test_empty_map(self, tmp_path: Path) -> None:
        path = str(tmp_path / "map.yaml")
        await save_map_data([], path=path)
        data = await load_map_data(path)
        assert data.cells == {}

    @pytest.mark.asyncio
    async def test_shipped_default_map_loads(self) -> None:
        path = Path(__file__).resolve().parent.parent / "maps" / "default.yaml"
        data = await load_map_data(str(path))
        assert len(data.cells) == 3
        assert data.cells[AxialCoord(1, -1)].content_id == "rock"


class TestCorruptData:
    def test_length_mismatch_is_an_error(self):
        raw = {
            "coordinates": [{"q": 0, "r": 0}, {"q": 1, "r": 0}],
            "cells": [{"content_id": "tree", "label": "Tree", "asset_ref": "tiles/tree"}],
        }
        with pytest.raises(MapDataError) as exc_info:
            parse_map_data(raw, "broken.yaml")
        assert "2 coordinates but 1 cells" in str(exc_info.value)

    def test_malformed_entry(self):
        raw = {
            "coordinates": [{"q": 0}],
            "cells": [{"content_id": "tree"}],
        }
        with pytest.raises(MapDataError):
            parse_map_data(raw)

    def test_label_defaults_to_content_id(self):
        data = parse_map_data({
            "coordinates": [{"q": 0, "r": 0}],
            "cells": [{"content_id": "tree", "asset_ref": "tiles/tree"}],
        })
        assert data.cells[AxialCoord(0, 0)].label == "tree"

    @pytest.mark.asyncio
    async def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "map.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(MapDataError):
            await load_map_data(str(path))

    @pytest.mark.asyncio
    async def test_unparseable_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "map.yaml"
        path.write_text("coordinates: [\n", encoding="utf-8")
        with pytest.raises(MapDataError):
            await load_map_data(str(path))

    @pytest.mark.parametrize("raw", [
        {"coordinates": 3, "cells": 3},
        {"coordinates": [{"q": 0, "r": 0}], "cells": "tree"},
    ])
    def test_sequences_must_be_lists(self, raw):
        with pytest.raises(MapDataError):
            parse_map_data(raw)

    @pytest.mark.asyncio
    async def test_invalid_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "map.yaml"
        path.write_bytes(b"coordinates: [\xff]\n")
        with pytest.raises(MapDataError):
            await load_map_data(str(path))

    def test_duplicate_coordinate_is_an_error(self):
        raw = {
            "coordinates": [{"q": 0, "r": 0}, {"q": 0, "r": 0}],
            "cells": [
                {"content_id": "a", "asset_ref": "tiles/a"},
                {"content_id": "b", "asset_ref": "tiles/b"},
            ],
        }
        with pytest.raises(MapDataError) as exc_info:
            parse_map_data(raw, "dup.yaml")
        assert "duplicate coordinate 0,0 at entry 1" in str(exc_info.value)

    def test_show_preview_must_be_boolean(self):
        raw = {
            "coordinates": [{"q": 0, "r": 0}],
            "cells": [{"content_id": "tree", "asset_ref": "tiles/tree", "show_preview": "false"}],
        }
        with pytest.raises(MapDataError):
            parse_map_data(raw)
