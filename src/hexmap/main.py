"""Hex map entry point.

Loads a map headlessly and reports its cells:
1. Load grid configuration
2. Create services (store, projector, content service, editor)
3. Restore the map file through a placeholder asset loader
4. Wait for all loads to settle and log the cell summary
5. Optionally write the map back out

Usage:
    python -m hexmap.main --config config/grid.yaml --map maps/default.yaml
    # or via entry point:
    hexmap --map maps/default.yaml --save-to maps/copy.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from hexmap.engine.asset_loader import AssetLoader, PlaceholderAssetLoader
from hexmap.engine.cell_store import CellStore
from hexmap.engine.content_service import ContentService
from hexmap.engine.feedback import FeedbackState
from hexmap.engine.map_editor import MapEditor
from hexmap.engine.plane_projector import PlaneProjector
from hexmap.loaders.grid_config_loader import DEFAULT_GRID_CONFIG_PATH, GridConfig, load_grid_config
from hexmap.persistence.map_load import load_map_data
from hexmap.persistence.map_save import save_map_data
from hexmap.util.errors import HexMapError
from hexmap.util.events import ContentLoadFailed, EventBus

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Container for all services (makes passing around easier)
# ---------------------------------------------------------------------------


@dataclass
class Services:
    """Holds references to all editor services."""

    config: GridConfig
    event_bus: EventBus
    projector: PlaneProjector
    store: CellStore
    content: ContentService
    feedback: FeedbackState
    editor: MapEditor


def create_services(config: GridConfig, loader: Optional[AssetLoader] = None) -> Services:
    """Instantiate all services with proper dependency injection.

    Raises:
        InvalidConfiguration: If the grid geometry is invalid.
    """
    config.validate()
    event_bus = EventBus()
    projector = PlaneProjector.from_config(config)
    store = CellStore()
    content = ContentService(store, projector, loader or PlaceholderAssetLoader(), event_bus)
    feedback = FeedbackState(event_bus)
    editor = MapEditor(projector, content, feedback)
    log.info("Services created (%r, grid_size=%d)", projector, config.grid_size)
    return Services(
        config=config,
        event_bus=event_bus,
        projector=projector,
        store=store,
        content=content,
        feedback=feedback,
        editor=editor,
    )


async def run(config_path: str, map_path: Optional[str], save_to: Optional[str]) -> int:
    """Load, settle and report a map.  Returns a process exit code."""
    config = load_grid_config(config_path)
    services = create_services(config)

    failures: list[ContentLoadFailed] = []
    services.event_bus.on(ContentLoadFailed, failures.append)

    path = map_path or config.map_path
    data = await load_map_data(path)
    if data is None:
        log.info("Starting with an empty map")
    else:
        services.content.restore(data.items())
        await services.content.wait_idle()

    for summary in services.content.summaries():
        record = services.store.get(summary.coord)
        log.info("  %-10s %-20s %s", summary.coord.key(), summary.label,
                 record.state.value if record is not None else "?")
    log.info("%d cells, %d failed to load", len(services.store), len(failures))

    if save_to:
        await save_map_data(services.content.snapshot(), path=save_to)

    services.content.clear_all()
    return 1 if failures else 0


def main() -> None:
    """Entry point for the ``hexmap`` command."""
    parser = argparse.ArgumentParser(description="Load and inspect a hex tile map")
    parser.add_argument("--config", default=DEFAULT_GRID_CONFIG_PATH, help="grid config YAML")
    parser.add_argument("--map", default=None, help="map file (default: config map_path)")
    parser.add_argument("--save-to", default=None, help="write the loaded map to this file")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        code = asyncio.run(run(args.config, args.map, args.save_to))
    except HexMapError as exc:
        log.error("%s", exc)
        sys.exit(2)
    sys.exit(code)


if __name__ == "__main__":
    main()
