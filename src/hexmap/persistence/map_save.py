"""Map save: serializes the cell mapping to YAML.

The mapping is written as two parallel ordered sequences, ``coordinates``
and ``cells``; entry *i* of one belongs to entry *i* of the other.
Live state (representations, load state) is not persisted.

File format:
    meta:
      version: 1
      saved_at: "2026-10-18T12:00:00"
    coordinates:
      - {q: 0, r: 0}
    cells:
      - {content_id: tree, label: Tree, asset_ref: "guid-123", show_preview: true}
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Iterable

import yaml

from hexmap.models.cell import CellRecord
from hexmap.models.hex import AxialCoord

log = logging.getLogger(__name__)

DEFAULT_MAP_PATH = "maps/default.yaml"
MAP_FORMAT_VERSION = 1


# ===================================================================
# Public API
# ===================================================================


async def save_map_data(
    cells: Iterable[tuple[AxialCoord, CellRecord]],
    path: str = DEFAULT_MAP_PATH,
) -> None:
    """Write the cell mapping to a YAML file (atomic replace).

    Args:
        cells: (coord, record) pairs; written in the given order.
        path: Output file path.
    """
    pairs = list(cells)
    data: dict[str, Any] = {
        "meta": _serialize_meta(),
        "coordinates": [_hex(coord) for coord, _ in pairs],
        "cells": [_serialize_cell(record) for _, record in pairs],
    }

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    tmp = out.with_suffix(".yaml.tmp")
    try:
        tmp.write_text(
            yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False),
            encoding="utf-8",
        )
        tmp.replace(out)
        log.info("Map saved to %s (%d cells)", path, len(pairs))
    except Exception:
        log.exception("Failed to save map to %s", path)
        if tmp.exists():
            tmp.unlink(missing_ok=True)
        raise


# ===================================================================
# Helpers
# ===================================================================

def _serialize_meta() -> dict[str, Any]:
    return {
        "version": MAP_FORMAT_VERSION,
        "saved_at": time.strftime("%Y-%m-%dT%H:%M:%S"),
    }


def _hex(c: AxialCoord) -> dict[str, Any]:
    # Integral coordinates are written as ints for readability.
    return {"q": _compact(c.q), "r": _compact(c.r)}


def _compact(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def _serialize_cell(record: CellRecord) -> dict[str, Any]:
    return {
        "content_id": record.content_id,
        "label": record.label,
        "asset_ref": record.asset_ref,
        "show_preview": record.show_preview,
    }
