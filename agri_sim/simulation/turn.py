"""Year-end turn processor: the 8-stage accounting pipeline.

A turn runs to completion in a single call against a SimulationContext:

    1. Event roll        4. Interest          7. Insurance renewal
    2. Depreciation      5. Harvest           8. Market fluctuation
    3. Property tax      6. Integrity bonus

then the balance sheet is recomputed and a YearRecord appended.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from agri_sim.core.config import (
    ANIMAL_PLOW_MULTIPLIER,
    ANNUAL_INSURANCE_FEE,
    DEPRECIATION_WITH_BARN,
    DEPRECIATION_WITHOUT_BARN,
    DROUGHT_PENALTY,
    HAND_TOOLS_MULTIPLIER,
    HARVESTER_MULTIPLIER,
    INTEGRITY_PROFIT_BOOST,
    INTEREST_RATE,
    STARTING_YEAR,
    TAX_PER_TILE,
    TRACTOR_FUEL_COST,
    TRACTOR_MULTIPLIER,
)
from agri_sim.core.errors import Reason, Result
from agri_sim.economy.balance_sheet import BalanceSheet, compute_balance_sheet
from agri_sim.economy.catalog import (
    BARN_CLASS,
    CROP,
    FORECAST_CLASS,
    LIVESTOCK,
    WELL_CLASS,
    crop_yield,
    livestock_yield,
)
from agri_sim.economy.ledger import ANNUAL, PlayerLedger
from agri_sim.economy.market import MarketEngine
from agri_sim.simulation.events import CorruptionDemand, EventOutcome, EventSystem, GameEvent
from agri_sim.simulation.metrics import YearHistory, YearRecord
from agri_sim.viz.logger import SimLogger
from agri_sim.world.grid import FarmGrid


@dataclass
class SimulationContext:
    """Everything one game instance owns. Passed explicitly into each turn."""

    grid: FarmGrid
    ledger: PlayerLedger
    market: MarketEngine
    events: EventSystem
    year: int = STARTING_YEAR
    history: YearHistory = field(default_factory=YearHistory)
    current_event: Optional[GameEvent] = None
    forecast: Optional[str] = None
    pending_corruption: Optional[CorruptionDemand] = None
    game_over: bool = False

    def balance_sheet(self) -> BalanceSheet:
        return compute_balance_sheet(self.grid, self.ledger, self.market)


@dataclass(frozen=True)
class HarvestReport:
    income: float
    fuel_cost: float
    crops_harvested: int
    drought_penalty: float
    tool_multiplier: float


@dataclass(frozen=True)
class TurnResult(Result):
    record: Optional[YearRecord] = None
    outcome: Optional[EventOutcome] = None


# =============================================================================
# Pipeline stages
# =============================================================================

def depreciation_rate(grid: FarmGrid) -> float:
    return DEPRECIATION_WITH_BARN if grid.has_structure(BARN_CLASS) else DEPRECIATION_WITHOUT_BARN


def property_tax(grid: FarmGrid) -> float:
    return grid.size * grid.size * TAX_PER_TILE


def tool_multiplier(ledger: PlayerLedger, grid: FarmGrid) -> float:
    """Tool bonuses stack multiplicatively."""
    tools = ledger.tools
    multiplier = 1.0
    if tools.get("handTools"):
        multiplier *= HAND_TOOLS_MULTIPLIER
    if tools.get("animalPlow") and grid.has_livestock():
        multiplier *= ANIMAL_PLOW_MULTIPLIER
    if tools.get("tractor"):
        multiplier *= TRACTOR_MULTIPLIER
    if tools.get("harvester") and tools.get("tractorRenovated"):
        multiplier *= HARVESTER_MULTIPLIER
    return multiplier


def harvest(ctx: SimulationContext) -> HarvestReport:
    """Collect crop and livestock income. Crops are cleared; livestock stays."""
    grid = ctx.grid
    ledger = ctx.ledger
    mods = ledger.modifiers

    # Well presence is checked now, not when the drought was rolled
    has_well = grid.has_structure(WELL_CLASS)
    if has_well:
        mods.drought = False
    drought = DROUGHT_PENALTY if mods.drought else 1.0

    tools = tool_multiplier(ledger, grid)
    fuel_cost = TRACTOR_FUEL_COST if ledger.tools.get("tractor") else 0.0

    income = 0.0
    crops = 0
    for tile in grid:
        if tile.kind == CROP and tile.content_id:
            income += (
                crop_yield(tile.content_id)
                * mods.crop_yield
                * tools
                * drought
                * mods.sell_price
                * mods.specific_for(tile.content_id)
            )
            crops += 1
            grid.clear(tile)
        elif tile.kind == LIVESTOCK and tile.content_id and tile.livestock_count > 0:
            income += (
                tile.livestock_count
                * livestock_yield(tile.content_id)
                * mods.livestock
                * mods.specific_for(tile.content_id)
            )

    mods.specific.clear()
    return HarvestReport(
        income=income,
        fuel_cost=fuel_cost,
        crops_harvested=crops,
        drought_penalty=drought,
        tool_multiplier=tools,
    )


def roll_event(ctx: SimulationContext) -> Optional[EventOutcome]:
    event = ctx.events.draw()
    ctx.current_event = event
    if event is None:
        return None
    return ctx.events.apply(event, ctx)


def update_forecast(ctx: SimulationContext) -> None:
    """A comm tower previews next year's event with an extra draw."""
    if ctx.grid.has_structure(FORECAST_CLASS):
        forecast = ctx.events.draw()
        ctx.forecast = forecast.name if forecast else None
    else:
        ctx.forecast = None


# =============================================================================
# Turn
# =============================================================================

def process_turn(ctx: SimulationContext, logger: Optional[SimLogger] = None) -> TurnResult:
    """Run one full year end against *ctx*."""
    logger = logger or SimLogger(verbosity=-1, stdout=False)
    ledger = ctx.ledger
    grid = ctx.grid
    year = ctx.year

    if ctx.game_over or ledger.integrity <= 0:
        ctx.game_over = True
        logger.log(SimLogger.TURN, "Integrity exhausted: game over", year=year)
        logger.flush()
        return TurnResult.failure(Reason.GAME_OVER, "Integrity has reached zero")

    opening_cash = ledger.cash

    # 1. EVENT ROLL
    outcome = roll_event(ctx)
    if outcome:
        logger.log(
            SimLogger.EVENT,
            f"{outcome.event.name}: {outcome.event.description}",
            year=year,
            destroyed=len(outcome.destroyed_tiles),
            protected=outcome.protected_crops,
        )
    update_forecast(ctx)

    # 2. DEPRECIATION
    rate = depreciation_rate(grid)
    ledger.scale_integrity(rate)
    ledger.building_value *= rate
    logger.log(SimLogger.LEDGER, f"Depreciation x{rate:.2f}: integrity {ledger.integrity:.1f}", year=year)

    # 3. PROPERTY TAX
    tax = property_tax(grid)
    ledger.debit(tax)
    ledger.yearly_tax_liability = tax
    logger.log(SimLogger.LEDGER, f"Property tax ${tax:,.2f}", year=year)

    # 4. INTEREST
    interest = ledger.cash * INTEREST_RATE
    ledger.credit(interest)
    logger.log(SimLogger.LEDGER, f"Interest +${interest:,.2f}", year=year)

    # 5. HARVEST
    report = harvest(ctx)
    ledger.credit(report.income)
    ledger.debit(report.fuel_cost)
    logger.log(
        SimLogger.LEDGER,
        f"Harvest +${report.income:,.2f} ({report.crops_harvested} crop tiles), fuel ${report.fuel_cost:,.2f}",
        year=year,
    )

    # 6. INTEGRITY BONUS (profitable year)
    if ledger.cash > opening_cash:
        ledger.adjust_integrity(INTEGRITY_PROFIT_BOOST)
        logger.log(SimLogger.LEDGER, f"Profitable year: integrity {ledger.integrity:.1f}", year=year)

    # 7. ANNUAL INSURANCE RENEWAL
    if ledger.insurance.kind == ANNUAL:
        ledger.debit(ANNUAL_INSURANCE_FEE)
        ledger.insurance.active = True
        logger.log(SimLogger.LEDGER, f"Insurance renewed ${ANNUAL_INSURANCE_FEE:,.2f}", year=year)

    # 8. MARKET FLUCTUATION
    ctx.market.step_random_walk()
    for asset in ctx.market.assets:
        logger.log(SimLogger.MARKET, f"{asset.symbol} {asset.current_price:,.2f}", year=year)

    balance_sheet = ctx.balance_sheet()
    record = YearRecord(
        year=year,
        balance_sheet=balance_sheet,
        event=outcome.event if outcome else None,
        revenue=report.income + interest,
        expenses=tax + report.fuel_cost,
        integrity=ledger.integrity,
        market_prices={a.id: a.current_price for a in ctx.market.assets},
    )
    ctx.history.append(record)
    ctx.year = year + 1

    logger.log(
        SimLogger.TURN,
        f"Year closed: cash ${ledger.cash:,.2f}, net worth ${balance_sheet.equity.net_worth:,.2f}",
        year=year,
    )
    logger.flush()
    return TurnResult(ok=True, message=f"Year {year} complete", record=record, outcome=outcome)
