"""Game facade: the operations a presentation layer calls between turns."""

from __future__ import annotations

from typing import Optional

import numpy as np

from agri_sim.core.config import (
    ANNUAL_INSURANCE_FEE,
    BASE_LAND_PRICE,
    DEFAULT_SEED,
    DEFAULT_VERBOSITY,
    GRID_EXPANSION_GROWTH,
    INITIAL_GRID_SIZE,
    ONE_TIME_INSURANCE_FEE,
    STARTING_CASH,
    STARTING_INTEGRITY,
    STARTING_YEAR,
    TAX_PER_TILE,
)
from agri_sim.core.errors import Reason, Result, TradeQuote
from agri_sim.economy.balance_sheet import BalanceSheet
from agri_sim.economy.catalog import LIVESTOCK, STRUCTURE, TOOLS, lookup, prerequisites
from agri_sim.economy.ledger import ANNUAL, ONE_TIME, Insurance, PlayerLedger
from agri_sim.economy.market import MarketEngine, RandomSource
from agri_sim.simulation.events import EventSystem, GameEvent, load_event_catalog
from agri_sim.simulation.metrics import YearHistory
from agri_sim.simulation.turn import SimulationContext, TurnResult, process_turn
from agri_sim.viz.logger import SimLogger
from agri_sim.world.grid import FarmGrid

INSURANCE_FEES: dict[str, float] = {
    ONE_TIME: ONE_TIME_INSURANCE_FEE,
    ANNUAL: ANNUAL_INSURANCE_FEE,
}


def expansion_cost(new_size: int) -> float:
    return float(round(BASE_LAND_PRICE * GRID_EXPANSION_GROWTH ** (new_size - INITIAL_GRID_SIZE)))


class FarmGame:
    """One independent game instance.

    Randomness comes from a single seedable source shared by the event
    system and the market, so a seed (or a scripted fake) replays a game.
    Seeded games restart their generator on every ``initialize()``; an
    injected ``rng`` is used as given and keeps its stream.
    """

    def __init__(
        self,
        seed: int = DEFAULT_SEED,
        catalog: Optional[list[GameEvent]] = None,
        rng: Optional[RandomSource] = None,
        logger: Optional[SimLogger] = None,
    ) -> None:
        self.seed = seed
        self._seeded = rng is None
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._catalog = catalog if catalog is not None else load_event_catalog()
        self.logger = logger or SimLogger(verbosity=DEFAULT_VERBOSITY, stdout=False)
        self.ctx: SimulationContext = self._new_context()

    def _new_context(self) -> SimulationContext:
        grid = FarmGrid(INITIAL_GRID_SIZE)
        ledger = PlayerLedger(
            cash=STARTING_CASH,
            integrity=STARTING_INTEGRITY,
            yearly_tax_liability=grid.size * grid.size * TAX_PER_TILE,
        )
        return SimulationContext(
            grid=grid,
            ledger=ledger,
            market=MarketEngine(self.rng),
            events=EventSystem(self.rng, self._catalog),
            year=STARTING_YEAR,
        )

    def initialize(self) -> None:
        """Start a fresh game: 5x5 empty farm, $10,000, full integrity, base prices."""
        if self._seeded:
            self.rng = np.random.default_rng(self.seed)
        self.ctx = self._new_context()
        self.ctx.market.reset()
        self.logger.log(SimLogger.TURN, "New farm founded", year=self.ctx.year)

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def ledger(self) -> PlayerLedger:
        return self.ctx.ledger

    @property
    def grid(self) -> FarmGrid:
        return self.ctx.grid

    @property
    def market(self) -> MarketEngine:
        return self.ctx.market

    @property
    def year(self) -> int:
        return self.ctx.year

    @property
    def history(self) -> YearHistory:
        return self.ctx.history

    @property
    def forecast(self) -> Optional[str]:
        return self.ctx.forecast

    @property
    def game_over(self) -> bool:
        return self.ctx.game_over

    def grid_snapshot(self) -> list[dict]:
        return self.ctx.grid.snapshot()

    def market_snapshot(self) -> dict[str, dict]:
        return self.ctx.market.snapshot()

    def balance_sheet(self) -> BalanceSheet:
        return self.ctx.balance_sheet()

    def has_structure(self, structure_id: str) -> bool:
        return self.ctx.grid.has_structure(structure_id)

    # -------------------------------------------------------------------------
    # Turn
    # -------------------------------------------------------------------------

    def end_turn(self) -> TurnResult:
        """Process the year end. Keeps returning GameOver once integrity is gone."""
        return process_turn(self.ctx, self.logger)

    def _log(self, category: str, result: Result, **data) -> Result:
        self.logger.log(category, result.message, year=self.ctx.year, ok=result.ok, **data)
        return result

    # -------------------------------------------------------------------------
    # Farm
    # -------------------------------------------------------------------------

    def place(self, x: int, z: int, asset_id: str) -> Result:
        """Buy an asset from the catalog and put it on an empty tile."""
        entry = lookup(asset_id)
        if entry is None:
            return self._log(SimLogger.GRID, Result.failure(Reason.UNKNOWN_ASSET, f"Unknown asset {asset_id}"))
        kind, price = entry
        ledger = self.ctx.ledger
        grid = self.ctx.grid

        if ledger.cash < price:
            return self._log(SimLogger.GRID, Result.failure(
                Reason.INSUFFICIENT_FUNDS, f"{asset_id} costs ${price:,.2f}",
            ))

        tile = grid.tile(x, z)
        if tile is not None and not tile.is_empty:
            return self._log(SimLogger.GRID, Result.failure(
                Reason.TILE_OCCUPIED, f"Tile ({x}, {z}) holds {tile.content_id}",
            ))

        if kind == LIVESTOCK:
            missing = [s for s in prerequisites(asset_id) if not grid.has_structure(s)]
            if missing:
                return self._log(SimLogger.GRID, Result.failure(
                    Reason.MISSING_PREREQUISITE, f"{asset_id} needs {', '.join(missing)}",
                ))

        result = grid.place(x, z, asset_id, kind, price)
        if result.ok:
            ledger.debit(price)
            if kind == STRUCTURE:
                ledger.add_building_value(price)
        return self._log(SimLogger.GRID, result)

    def liquidate(self, x: int, z: int) -> Result:
        result = self.ctx.grid.liquidate(x, z)
        if result.ok:
            self.ctx.ledger.credit(result.refund)
            if result.released_building_value:
                self.ctx.ledger.release_building_value(result.released_building_value)
        return self._log(SimLogger.GRID, result)

    def renovate(self, x: int, z: int) -> Result:
        quote = self.ctx.grid.renovation_quote(x, z)
        if not quote.ok:
            return self._log(SimLogger.GRID, quote)
        if self.ctx.ledger.cash < quote.cost:
            return self._log(SimLogger.GRID, Result.failure(
                Reason.INSUFFICIENT_FUNDS, f"Renovation costs ${quote.cost:,.2f}",
            ))

        result = self.ctx.grid.renovate(x, z)
        self.ctx.ledger.debit(result.cost)
        self.ctx.ledger.add_building_value(result.cost)
        return self._log(SimLogger.GRID, result, to_id=result.to_id)

    def expand_grid(self) -> Result:
        """Buy one more row and column of land."""
        ledger = self.ctx.ledger
        new_size = self.ctx.grid.size + 1
        cost = expansion_cost(new_size)
        if ledger.cash < cost:
            return self._log(SimLogger.GRID, Result.failure(
                Reason.INSUFFICIENT_FUNDS, f"Expansion to {new_size}x{new_size} costs ${cost:,.2f}",
            ))

        self.ctx.grid.expand()
        ledger.debit(cost)
        ledger.yearly_tax_liability = new_size * new_size * TAX_PER_TILE
        return self._log(SimLogger.GRID, Result.success(f"Farm expanded to {new_size}x{new_size}"))

    def set_tool(self, tool: str, value: bool = True) -> Result:
        if tool not in TOOLS:
            return Result.failure(Reason.UNKNOWN_TOOL, f"Unknown tool {tool}")
        self.ctx.ledger.tools[tool] = value
        return self._log(SimLogger.LEDGER, Result.success(f"{tool} {'on' if value else 'off'}"))

    # -------------------------------------------------------------------------
    # Market
    # -------------------------------------------------------------------------

    def buy_instrument(self, instrument_id: str, quantity: float) -> TradeQuote:
        ledger = self.ctx.ledger
        quote = self.ctx.market.buy(instrument_id, quantity, ledger.cash)
        if quote.ok:
            ledger.debit(quote.cost)
            ledger.add_holding(instrument_id, quantity)
        return self._log(SimLogger.TRADE, quote)

    def sell_instrument(self, instrument_id: str, quantity: float) -> TradeQuote:
        ledger = self.ctx.ledger
        quote = self.ctx.market.sell(instrument_id, quantity, ledger.held(instrument_id))
        if quote.ok:
            ledger.credit(quote.proceeds)
            ledger.add_holding(instrument_id, -quantity)
        return self._log(SimLogger.TRADE, quote)

    # -------------------------------------------------------------------------
    # Insurance & choices
    # -------------------------------------------------------------------------

    def buy_insurance(self, kind: str) -> Result:
        fee = INSURANCE_FEES.get(kind)
        if fee is None:
            return Result.failure(Reason.UNKNOWN_ASSET, f"Unknown insurance kind {kind}")
        ledger = self.ctx.ledger
        if ledger.cash < fee:
            return self._log(SimLogger.LEDGER, Result.failure(
                Reason.INSUFFICIENT_FUNDS, f"{kind} insurance costs ${fee:,.2f}",
            ))
        ledger.debit(fee)
        ledger.insurance = Insurance(kind=kind, active=True)
        return self._log(SimLogger.LEDGER, Result.success(f"Bought {kind} crop insurance"))

    def resolve_corruption(self, accept: bool) -> Result:
        """Pay the official, or refuse and take the integrity hit."""
        demand = self.ctx.pending_corruption
        if demand is None:
            return Result.failure(Reason.NO_PENDING_CHOICE, "No bribe is pending")

        ledger = self.ctx.ledger
        if accept:
            ledger.debit(demand.pay_amount)
            message = f"Paid ${demand.pay_amount:,.2f} to the official"
        else:
            ledger.adjust_integrity(demand.refuse_integrity_loss)
            message = f"Refused the bribe: integrity {ledger.integrity:.1f}"
        self.ctx.pending_corruption = None
        return self._log(SimLogger.EVENT, Result.success(message))
