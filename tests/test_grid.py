from __future__ import annotations

import pytest

from agri_sim.core.errors import Reason
from agri_sim.economy.catalog import CROP, LIVESTOCK, STRUCTURE
from agri_sim.world.grid import FarmGrid


@pytest.fixture
def grid() -> FarmGrid:
    return FarmGrid(5)


def test_new_grid_is_empty_and_ordered(grid):
    assert len(grid) == 25
    assert all(t.is_empty for t in grid)
    assert [t.id for t in grid][:3] == ["tile-0-0", "tile-0-1", "tile-0-2"]
    assert grid.tile(4, 4).id == "tile-4-4"
    assert grid.tile(5, 0) is None


def test_place_and_occupied(grid):
    assert grid.place(1, 1, "paddyRice", CROP, 20).ok
    result = grid.place(1, 1, "sugarcane", CROP, 30)
    assert result.ok is False
    assert result.reason is Reason.TILE_OCCUPIED
    assert grid.tile(1, 1).content_id == "paddyRice"


def test_place_off_grid(grid):
    result = grid.place(9, 9, "paddyRice", CROP, 20)
    assert result.reason is Reason.UNKNOWN_TILE


def test_livestock_counts_one_head(grid):
    grid.place(0, 0, "duck", LIVESTOCK, 70)
    grid.place(0, 1, "paddyRice", CROP, 20)
    assert grid.tile(0, 0).livestock_count == 1
    assert grid.tile(0, 1).livestock_count == 0
    assert grid.has_livestock()


def test_liquidate_well_default_rate(grid):
    grid.place(2, 2, "well", STRUCTURE, 800)
    result = grid.liquidate(2, 2)
    assert result.ok
    assert result.refund == pytest.approx(560.0)
    assert result.released_building_value == pytest.approx(800.0)
    assert result.content_id == "well"
    assert grid.tile(2, 2).is_empty


def test_liquidate_with_paved_road(grid):
    grid.place(0, 0, "paved_road", STRUCTURE, 500)
    grid.place(2, 2, "well", STRUCTURE, 800)
    result = grid.liquidate(2, 2)
    assert result.refund == pytest.approx(680.0)


def test_liquidate_crop_releases_no_building_value(grid):
    grid.place(0, 0, "durian", CROP, 120)
    result = grid.liquidate(0, 0)
    assert result.refund == pytest.approx(84.0)
    assert result.released_building_value == 0.0


def test_liquidate_empty_or_missing(grid):
    assert grid.liquidate(0, 0).reason is Reason.EMPTY_TILE
    assert grid.liquidate(7, 0).reason is Reason.UNKNOWN_TILE


def test_renovate_well(grid):
    grid.place(0, 0, "well", STRUCTURE, 250)
    grid.tile(0, 0).health = 40

    quote = grid.renovate(0, 0)

    assert quote.ok
    assert (quote.from_id, quote.to_id, quote.cost) == ("well", "well_upgraded", 400.0)
    tile = grid.tile(0, 0)
    assert tile.content_id == "well_upgraded"
    assert tile.health == 100
    assert tile.base_value == 650.0


def test_renovate_without_upgrade_path(grid):
    grid.place(0, 0, "barn", STRUCTURE, 150)
    grid.place(0, 1, "paddyRice", CROP, 20)
    assert grid.renovate(0, 0).reason is Reason.NO_UPGRADE_PATH
    assert grid.renovate(0, 1).reason is Reason.NO_UPGRADE_PATH
    assert grid.renovate(0, 2).reason is Reason.NO_UPGRADE_PATH

    grid.place(0, 3, "well", STRUCTURE, 250)
    grid.renovate(0, 3)
    assert grid.renovate(0, 3).reason is Reason.NO_UPGRADE_PATH


def test_upgraded_structure_counts_as_its_class(grid):
    grid.place(0, 0, "well", STRUCTURE, 250)
    grid.renovate(0, 0)
    assert grid.has_structure("well")
    assert not grid.has_structure("barn")


def test_tiles_of_and_count(grid):
    grid.place(0, 0, "paddyRice", CROP, 20)
    grid.place(3, 3, "paddyRice", CROP, 20)
    grid.place(1, 0, "sugarcane", CROP, 30)
    assert [t.id for t in grid.tiles_of(CROP, "paddyRice")] == ["tile-0-0", "tile-3-3"]
    assert grid.count(CROP) == 3
    assert len(grid.occupied_tiles()) == 3


def test_expand_keeps_existing_tiles(grid):
    grid.place(4, 4, "barn", STRUCTURE, 150)
    assert grid.expand() == 6
    assert len(grid) == 36
    assert grid.tile(4, 4).content_id == "barn"
    assert grid.tile(5, 5).is_empty
    # new border tiles come after the first 25
    assert [t.id for t in grid][25] == "tile-0-5"


def test_snapshot_is_plain_data(grid):
    grid.place(0, 0, "paddyRice", CROP, 20)
    snap = grid.snapshot()
    assert snap[0]["content_id"] == "paddyRice"
    snap[0]["content_id"] = "durian"
    assert grid.tile(0, 0).content_id == "paddyRice"
