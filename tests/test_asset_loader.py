"""Tests for the placeholder asset loader."""

import pytest

from hexmap.engine.asset_loader import PlaceholderAssetLoader


class TestPlaceholderAssetLoader:
    def test_is_valid(self):
        loader = PlaceholderAssetLoader()
        assert loader.is_valid("tiles/tree")
        assert not loader.is_valid("")
        assert not loader.is_valid(None)
        assert not loader.is_valid(42)

    @pytest.mark.asyncio
    async def test_instantiate_and_release(self):
        loader = PlaceholderAssetLoader()
        rep = await loader.instantiate("tiles/tree", (1.0, 0.0, 2.0))
        assert rep.asset_ref == "tiles/tree"
        assert rep.position == (1.0, 0.0, 2.0)
        assert loader.live == {rep.instance_id: rep}

        loader.release(rep)
        assert rep.released
        assert loader.live == {}
        assert (loader.created_count, loader.released_count) == (1, 1)

    @pytest.mark.asyncio
    async def test_double_release_is_counted_once(self):
        loader = PlaceholderAssetLoader()
        rep = await loader.instantiate("tiles/tree", (0.0, 0.0, 0.0))
        loader.release(rep)
        loader.release(rep)
        assert loader.released_count == 1

    @pytest.mark.asyncio
    async def test_failing_asset_raises(self):
        loader = PlaceholderAssetLoader(failing={"tiles/broken"})
        with pytest.raises(RuntimeError):
            await loader.instantiate("tiles/broken", (0.0, 0.0, 0.0))
        assert loader.live == {}

    @pytest.mark.asyncio
    async def test_instance_ids_are_unique(self):
        loader = PlaceholderAssetLoader(delay=0.001)
        a = await loader.instantiate("tiles/a", (0.0, 0.0, 0.0))
        b = await loader.instantiate("tiles/a", (0.0, 0.0, 0.0))
        assert a.instance_id != b.instance_id
