from __future__ import annotations

import pytest

from agri_sim.core.errors import Reason
from agri_sim.economy.catalog import CROP_DATA, STRUCTURE_DATA
from agri_sim.simulation.engine import FarmGame, expansion_cost
from agri_sim.simulation.policy import PlantingPolicy

from conftest import make_event


def test_initialize_fresh_state(make_game):
    game = make_game()
    assert game.ledger.cash == 10000
    assert game.ledger.integrity == 100
    assert game.ledger.yearly_tax_liability == 1250
    assert game.grid.size == 5
    assert game.year == 1
    assert not game.game_over
    assert game.market.price("gold") == 8000


def test_initialize_discards_previous_game(make_game):
    game = make_game()
    game.place(0, 0, "barn")
    game.buy_instrument("usd", 1)
    game.end_turn()

    game.initialize()

    assert game.grid.occupied_tiles() == []
    assert game.ledger.holdings == {}
    assert game.ledger.building_value == 0
    assert list(game.market.get("gold").price_history) == [8000]


# =============================================================================
# Placement
# =============================================================================

def test_place_crop_debits_cash(make_game):
    game = make_game()
    result = game.place(0, 0, "durian")
    assert result.ok
    assert game.ledger.cash == 10000 - CROP_DATA["durian"]["cost"]
    assert game.ledger.building_value == 0


def test_place_structure_adds_building_value(make_game):
    game = make_game()
    game.place(0, 0, "silo")
    assert game.ledger.building_value == STRUCTURE_DATA["silo"]["cost"]
    assert game.has_structure("silo")


def test_place_unknown_asset(make_game):
    result = make_game().place(0, 0, "unicorn")
    assert result.reason is Reason.UNKNOWN_ASSET


def test_place_insufficient_funds_leaves_state(make_game):
    game = make_game()
    game.ledger.cash = 100
    result = game.place(0, 0, "barn")
    assert result.reason is Reason.INSUFFICIENT_FUNDS
    assert game.ledger.cash == 100
    assert game.grid.tile(0, 0).is_empty


def test_place_on_occupied_tile(make_game):
    game = make_game()
    game.place(0, 0, "paddyRice")
    result = game.place(0, 0, "sugarcane")
    assert result.reason is Reason.TILE_OCCUPIED
    assert game.ledger.cash == 9980


def test_livestock_requires_every_prerequisite(make_game):
    game = make_game()
    result = game.place(0, 0, "pig")
    assert result.reason is Reason.MISSING_PREREQUISITE
    assert "well" in result.message and "barn" in result.message

    game.place(1, 0, "well")
    assert game.place(0, 0, "pig").reason is Reason.MISSING_PREREQUISITE

    game.place(1, 1, "barn")
    assert game.place(0, 0, "pig").ok


def test_upgraded_well_satisfies_prerequisite(make_game):
    game = make_game()
    game.place(0, 0, "pond")
    game.place(0, 1, "well")
    game.renovate(0, 1)
    assert game.place(0, 2, "fish").ok


# =============================================================================
# Liquidation and renovation
# =============================================================================

def test_liquidate_structure(make_game):
    game = make_game()
    game.place(0, 0, "well")
    result = game.liquidate(0, 0)
    assert result.ok
    assert result.refund == pytest.approx(175.0)
    assert game.ledger.cash == pytest.approx(10000 - 250 + 175)
    assert game.ledger.building_value == 0


def test_liquidate_renovated_well(make_game):
    game = make_game()
    game.place(0, 0, "well")
    game.renovate(0, 0)
    game.ledger.cash = 5000
    result = game.liquidate(0, 0)
    assert result.refund == pytest.approx(455.0)
    assert game.ledger.cash == pytest.approx(5455.0)


def test_liquidate_then_replace_never_profits(make_game):
    game = make_game()
    for asset in ("paddyRice", "durian", "well", "paved_road", "barn"):
        game.place(2, 2, asset)
        before = game.ledger.cash
        game.liquidate(2, 2)
        game.place(2, 2, asset)
        assert game.ledger.cash < before
        game.liquidate(2, 2)


def test_liquidate_empty_tile(make_game):
    assert make_game().liquidate(0, 0).reason is Reason.EMPTY_TILE


def test_renovate_debits_and_adds_value(make_game):
    game = make_game()
    game.place(0, 0, "fence")
    result = game.renovate(0, 0)
    assert result.ok
    assert game.grid.tile(0, 0).content_id == "fence_upgraded"
    assert game.ledger.cash == 10000 - 400 - 200
    assert game.ledger.building_value == 600


def test_renovate_insufficient_funds(make_game):
    game = make_game()
    game.place(0, 0, "silo")
    game.ledger.cash = 100
    result = game.renovate(0, 0)
    assert result.reason is Reason.INSUFFICIENT_FUNDS
    assert game.grid.tile(0, 0).content_id == "silo"


def test_renovate_without_path(make_game):
    game = make_game()
    game.place(0, 0, "barn")
    assert game.renovate(0, 0).reason is Reason.NO_UPGRADE_PATH


# =============================================================================
# Land
# =============================================================================

def test_expansion_cost_grows():
    assert expansion_cost(6) == 1500
    assert expansion_cost(7) == 2250
    assert expansion_cost(8) == 3375


def test_expand_grid(make_game):
    game = make_game()
    result = game.expand_grid()
    assert result.ok
    assert game.grid.size == 6
    assert game.ledger.cash == 8500
    assert game.ledger.yearly_tax_liability == 1800
    assert game.balance_sheet().assets.land_value == 36000


def test_expand_grid_insufficient_funds(make_game):
    game = make_game()
    game.ledger.cash = 1000
    assert game.expand_grid().reason is Reason.INSUFFICIENT_FUNDS
    assert game.grid.size == 5


def test_tax_follows_expansion(make_game):
    game = make_game()
    game.expand_grid()
    record = game.end_turn().record
    assert record.expenses == 1800


# =============================================================================
# Market
# =============================================================================

def test_buy_and_sell_instrument(make_game):
    game = make_game()
    assert game.buy_instrument("usd", 2).ok
    assert game.ledger.cash == 5000
    assert game.ledger.held("usd") == 2

    assert game.sell_instrument("usd", 2).ok
    assert game.ledger.cash == 10000
    assert "usd" not in game.ledger.holdings


def test_buy_rejected_when_short(make_game):
    game = make_game()
    quote = game.buy_instrument("gold", 2)
    assert quote.reason is Reason.INSUFFICIENT_FUNDS
    assert game.ledger.cash == 10000
    assert game.ledger.holdings == {}


def test_sell_more_than_held(make_game):
    game = make_game()
    game.buy_instrument("stocks", 1)
    assert game.sell_instrument("stocks", 2).reason is Reason.INSUFFICIENT_HOLDINGS
    assert game.ledger.held("stocks") == 1


def test_holdings_show_on_balance_sheet(make_game):
    game = make_game()
    game.buy_instrument("gold", 1)
    sheet = game.balance_sheet()
    assert sheet.assets.stock_value == 8000
    assert sheet.equity.net_worth == 33750


# =============================================================================
# Insurance, tools and choices
# =============================================================================

def test_buy_insurance(make_game):
    game = make_game()
    assert game.buy_insurance("oneTime").ok
    assert game.ledger.cash == 2000
    assert game.ledger.insurance.kind == "oneTime"
    assert game.ledger.insurance.active


def test_buy_insurance_unknown_or_unaffordable(make_game):
    game = make_game()
    assert game.buy_insurance("lifetime").reason is Reason.UNKNOWN_ASSET
    game.ledger.cash = 500
    assert game.buy_insurance("annual").reason is Reason.INSUFFICIENT_FUNDS
    assert not game.ledger.insurance.active


def test_set_tool(make_game):
    game = make_game()
    assert game.set_tool("tractor").ok
    assert game.ledger.tools["tractor"] is True
    assert game.set_tool("tractor", False).ok
    assert game.ledger.tools["tractor"] is False
    assert game.set_tool("jetpack").reason is Reason.UNKNOWN_TOOL


@pytest.fixture
def bribed_game(make_game):
    game = make_game([make_event(kind="CORRUPTION", payAmount=1500, refuseIntegrityLoss=-15)])
    game.end_turn()
    return game


def test_pay_bribe(bribed_game):
    cash = bribed_game.ledger.cash
    assert bribed_game.resolve_corruption(accept=True).ok
    assert bribed_game.ledger.cash == pytest.approx(cash - 1500)
    assert bribed_game.ctx.pending_corruption is None


def test_refuse_bribe(bribed_game):
    integrity = bribed_game.ledger.integrity
    assert bribed_game.resolve_corruption(accept=False).ok
    assert bribed_game.ledger.integrity == pytest.approx(integrity - 15)
    assert bribed_game.resolve_corruption(accept=False).reason is Reason.NO_PENDING_CHOICE


# =============================================================================
# Policy
# =============================================================================

def test_policy_plants_and_keeps_reserve(make_game):
    game = make_game()
    game.ledger.cash = 1500
    planted = PlantingPolicy(crop="paddyRice").act(game)
    assert planted == 12
    assert game.ledger.cash == 1260


def test_policy_resolves_pending_bribe(bribed_game):
    PlantingPolicy().act(bribed_game)
    assert bribed_game.ctx.pending_corruption is None


def test_default_game_uses_bundled_catalog():
    game = FarmGame(seed=3)
    game.initialize()
    assert len(game.ctx.events.catalog) >= 10


def _net_worths(game: FarmGame, years: int) -> list[float]:
    policy = PlantingPolicy()
    for _ in range(years):
        policy.act(game)
        game.end_turn()
    return [r.net_worth for r in game.history]


def test_initialize_replays_a_seeded_game():
    game = FarmGame(seed=11)
    game.initialize()
    first = _net_worths(game, 12)

    game.initialize()
    assert _net_worths(game, 12) == first


def test_initialize_keeps_an_injected_stream(make_game):
    game = make_game()
    game.end_turn()
    rng = game.rng
    calls = rng.calls
    game.initialize()
    assert game.rng is rng
    assert game.rng.calls == calls
