"""Player ledger: cash, integrity, liabilities, insurance and holdings."""

from __future__ import annotations

from dataclasses import dataclass, field

from agri_sim.core.config import (
    INTEGRITY_MAX,
    INTEGRITY_MIN,
    STARTING_CASH,
    STARTING_INTEGRITY,
)
from agri_sim.economy.catalog import TOOLS

NO_INSURANCE = "none"
ONE_TIME = "oneTime"
ANNUAL = "annual"


@dataclass
class Insurance:
    """Crop insurance cover. One-time cover is permanent, annual must be renewed."""

    kind: str = NO_INSURANCE
    active: bool = False


@dataclass
class EventModifiers:
    """Multipliers left behind by events and consumed by the harvest."""

    crop_yield: float = 1.0
    sell_price: float = 1.0
    livestock: float = 1.0
    specific: dict[str, float] = field(default_factory=dict)  # current harvest only
    drought: bool = False

    def specific_for(self, asset_id: str) -> float:
        return self.specific.get(asset_id, 1.0)


@dataclass
class PlayerLedger:
    """Everything the player owns or owes outside the farm grid."""

    cash: float = STARTING_CASH
    integrity: float = STARTING_INTEGRITY
    loans: float = 0.0
    unpaid_maintenance: float = 0.0
    yearly_tax_liability: float = 0.0
    building_value: float = 0.0
    insurance: Insurance = field(default_factory=Insurance)
    holdings: dict[str, float] = field(default_factory=dict)
    tools: dict[str, bool] = field(default_factory=lambda: {t: False for t in TOOLS})
    modifiers: EventModifiers = field(default_factory=EventModifiers)

    # -- Cash ---------------------------------------------------------------

    def credit(self, amount: float) -> None:
        self.cash = max(0.0, self.cash + amount)

    def debit(self, amount: float) -> float:
        """Deduct *amount*, never going below zero. Returns what was actually paid."""
        paid = min(self.cash, amount)
        self.cash = max(0.0, self.cash - amount)
        return paid

    # -- Integrity ----------------------------------------------------------

    def adjust_integrity(self, delta: float) -> None:
        self.integrity = max(INTEGRITY_MIN, min(INTEGRITY_MAX, self.integrity + delta))

    def scale_integrity(self, factor: float) -> None:
        self.integrity = max(INTEGRITY_MIN, min(INTEGRITY_MAX, self.integrity * factor))

    # -- Buildings ----------------------------------------------------------

    def add_building_value(self, amount: float) -> None:
        self.building_value += amount

    def release_building_value(self, amount: float) -> None:
        self.building_value = max(0.0, self.building_value - amount)

    # -- Holdings -----------------------------------------------------------

    def held(self, instrument_id: str) -> float:
        return self.holdings.get(instrument_id, 0.0)

    def add_holding(self, instrument_id: str, quantity: float) -> None:
        remaining = self.held(instrument_id) + quantity
        if remaining > 0:
            self.holdings[instrument_id] = remaining
        else:
            self.holdings.pop(instrument_id, None)

    @property
    def has_active_insurance(self) -> bool:
        return self.insurance.active
