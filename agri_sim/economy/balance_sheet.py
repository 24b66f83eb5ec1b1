"""Balance sheet derived on demand from the grid, the ledger and the market."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from agri_sim.core.config import BASE_LAND_PRICE, LIVESTOCK_VALUE
from agri_sim.economy.catalog import LIVESTOCK


@dataclass(frozen=True)
class Assets:
    cash: float
    stock_value: float
    land_value: float
    livestock_value: float
    building_value: float
    total: float


@dataclass(frozen=True)
class Liabilities:
    loans: float
    unpaid_maintenance: float
    yearly_tax_liability: float
    total: float


@dataclass(frozen=True)
class Equity:
    net_worth: float


@dataclass(frozen=True)
class BalanceSheet:
    assets: Assets
    liabilities: Liabilities
    equity: Equity

    def to_dict(self) -> dict:
        return asdict(self)


def compute_balance_sheet(
    grid: "FarmGrid",  # noqa: F821
    ledger: "PlayerLedger",  # noqa: F821
    market: "MarketEngine",  # noqa: F821
) -> BalanceSheet:
    """Net worth is assets minus liabilities, computed from the same totals."""
    stock_value = market.portfolio_value(ledger.holdings)
    land_value = grid.size * grid.size * BASE_LAND_PRICE
    livestock_value = sum(
        t.livestock_count * LIVESTOCK_VALUE for t in grid if t.kind == LIVESTOCK
    )

    total_assets = ledger.cash + stock_value + land_value + livestock_value + ledger.building_value
    total_liabilities = ledger.loans + ledger.unpaid_maintenance + ledger.yearly_tax_liability

    return BalanceSheet(
        assets=Assets(
            cash=ledger.cash,
            stock_value=stock_value,
            land_value=land_value,
            livestock_value=livestock_value,
            building_value=ledger.building_value,
            total=total_assets,
        ),
        liabilities=Liabilities(
            loans=ledger.loans,
            unpaid_maintenance=ledger.unpaid_maintenance,
            yearly_tax_liability=ledger.yearly_tax_liability,
            total=total_liabilities,
        ),
        equity=Equity(net_worth=total_assets - total_liabilities),
    )
