"""Map load: restores the cell mapping from a YAML map file.

Zips the persisted ``coordinates`` and ``cells`` sequences back into a
mapping.  A length mismatch or a repeated coordinate is reported as
:class:`MapDataError` so no record is dropped unnoticed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from hexmap.models.cell import CellRecord, CellState
from hexmap.models.hex import AxialCoord
from hexmap.persistence.map_save import DEFAULT_MAP_PATH
from hexmap.util.errors import MapDataError

log = logging.getLogger(__name__)


# ===================================================================
# Result container
# ===================================================================

@dataclass
class MapData:
    """Cells restored from a map file.

    Attributes:
        cells: Restored records keyed by coordinate, in file order.
        meta: Metadata from the file (version, save timestamp).
    """

    cells: dict[AxialCoord, CellRecord] = field(default_factory=dict)
    meta: dict[str, Any] = field(default_factory=dict)

    def items(self) -> list[tuple[AxialCoord, CellRecord]]:
        return list(self.cells.items())


# ===================================================================
# Public API
# ===================================================================


async def load_map_data(path: str = DEFAULT_MAP_PATH) -> Optional[MapData]:
    """Load a map file.

    Returns None if the file does not exist.

    Raises:
        MapDataError: The file cannot be parsed, the two sequences differ
            in length, or an entry is malformed.
    """
    map_file = Path(path)
    if not map_file.exists():
        log.info("No map file found at %s", path)
        return None

    try:
        raw = yaml.safe_load(map_file.read_text(encoding="utf-8")) or {}
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise MapDataError(path, f"unparseable YAML ({exc})") from exc

    if not isinstance(raw, dict):
        raise MapDataError(path, "unexpected format (not a mapping)")

    return parse_map_data(raw, path)


def parse_map_data(raw: dict[str, Any], path: Any = "<memory>") -> MapData:
    """Build :class:`MapData` from an already-parsed document."""
    coords_raw = raw.get("coordinates") or []
    cells_raw = raw.get("cells") or []
    for name, seq in (("coordinates", coords_raw), ("cells", cells_raw)):
        if not isinstance(seq, list):
            raise MapDataError(path, f"'{name}' is not a sequence")
    if len(coords_raw) != len(cells_raw):
        raise MapDataError(
            path,
            f"{len(coords_raw)} coordinates but {len(cells_raw)} cells",
        )

    result = MapData(meta=raw.get("meta") or {})
    for index, (coord_dict, cell_dict) in enumerate(zip(coords_raw, cells_raw)):
        try:
            coord = _to_hex(coord_dict)
            record = _deserialize_cell(cell_dict)
        except (KeyError, TypeError, ValueError) as exc:
            raise MapDataError(path, f"malformed entry {index}: {exc!r}") from exc
        if coord in result.cells:
            raise MapDataError(path, f"duplicate coordinate {coord.key()} at entry {index}")
        result.cells[coord] = record

    log.info("Map loaded from %s (version %s, %d cells)",
             path, result.meta.get("version", "?"), len(result.cells))
    return result


# ===================================================================
# Helpers
# ===================================================================

def _to_hex(d: dict[str, Any]) -> AxialCoord:
    return AxialCoord(q=float(d["q"]), r=float(d["r"]))


def _deserialize_cell(d: dict[str, Any]) -> CellRecord:
    show_preview = d.get("show_preview", True)
    if not isinstance(show_preview, bool):
        raise TypeError(f"show_preview must be a boolean, got {show_preview!r}")
    return CellRecord(
        content_id=str(d["content_id"]),
        label=str(d.get("label", d["content_id"])),
        asset_ref=d.get("asset_ref"),
        state=CellState.UNREALIZED,
        show_preview=show_preview,
    )
