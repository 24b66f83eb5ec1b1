"""Tradable instruments with mean-reverting random-walk prices.

Three instrument classes are simulated independently:

- commodity (gold): low volatility, slight upward bias, a safe haven
- currency (usd): moderate volatility, strong pull back to its base rate
- equity (stocks): high volatility, weak reversion so trends can persist

Quotes (``buy`` / ``sell``) never touch player state; the caller applies them.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Optional, Protocol

from agri_sim.core.config import (
    EVENT_PRICE_CEILING,
    EVENT_PRICE_FLOOR,
    MARKET_CLASS_DYNAMICS,
    PRICE_HISTORY_LENGTH,
)
from agri_sim.core.errors import Reason, TradeQuote


class RandomSource(Protocol):
    """Anything with a ``random()`` returning a float in [0, 1)."""

    def random(self) -> float: ...


@dataclass
class MarketAsset:
    """A single tradable instrument."""

    id: str
    symbol: str
    name: str
    instrument_class: str  # "commodity", "currency", "equity"
    base_price: float
    volatility: float
    min_price: float
    max_price: float
    current_price: float = 0.0
    price_history: deque = field(default_factory=lambda: deque(maxlen=PRICE_HISTORY_LENGTH))

    def __post_init__(self) -> None:
        if not self.current_price:
            self.current_price = self.base_price
        if not self.price_history:
            self.price_history.append(self.current_price)

    def record_price(self, price: float) -> None:
        self.current_price = price
        self.price_history.append(price)  # deque evicts the oldest


def default_assets() -> list[MarketAsset]:
    return [
        MarketAsset(
            id="gold", symbol="XAU", name="Gold", instrument_class="commodity",
            base_price=8000.0, volatility=0.03, min_price=5000.0, max_price=12000.0,
        ),
        MarketAsset(
            id="usd", symbol="USD", name="US Dollar", instrument_class="currency",
            base_price=2500.0, volatility=0.06, min_price=1800.0, max_price=4000.0,
        ),
        MarketAsset(
            id="stocks", symbol="STK", name="Stocks", instrument_class="equity",
            base_price=5000.0, volatility=0.10, min_price=1000.0, max_price=15000.0,
        ),
    ]


class MarketEngine:
    """Owns the instruments and simulates their prices."""

    def __init__(self, rng: RandomSource, assets: Optional[list[MarketAsset]] = None) -> None:
        self._rng = rng
        self._assets: dict[str, MarketAsset] = {
            a.id: a for a in (assets if assets is not None else default_assets())
        }

    @property
    def assets(self) -> list[MarketAsset]:
        return list(self._assets.values())

    def get(self, instrument_id: str) -> Optional[MarketAsset]:
        return self._assets.get(instrument_id)

    def price(self, instrument_id: str) -> float:
        return self._assets[instrument_id].current_price

    # -------------------------------------------------------------------------
    # Price dynamics
    # -------------------------------------------------------------------------

    def step_random_walk(self) -> None:
        """Advance every instrument by one year of random drift."""
        for asset in self._assets.values():
            dynamics = MARKET_CLASS_DYNAMICS[asset.instrument_class]
            u = float(self._rng.random())
            shock = 1 + (u - dynamics["bias"]) * 2 * asset.volatility
            new_price = asset.current_price * shock

            # Mean reversion toward base price
            new_price += (asset.base_price - new_price) * dynamics["reversion"]

            new_price = max(asset.min_price, min(asset.max_price, round(new_price)))
            asset.record_price(float(new_price))

    def apply_event_impacts(self, impacts: dict[str, float]) -> None:
        """Multiply prices by event-driven factors, e.g. a disaster lifting gold."""
        for instrument_id, multiplier in impacts.items():
            asset = self._assets.get(instrument_id)
            if asset is None:
                continue
            new_price = round(asset.current_price * multiplier, 2)
            asset.record_price(max(EVENT_PRICE_FLOOR, min(EVENT_PRICE_CEILING, new_price)))

    def reset(self) -> None:
        """Return every instrument to its base price with a fresh history."""
        for asset in self._assets.values():
            asset.price_history.clear()
            asset.record_price(asset.base_price)

    # -------------------------------------------------------------------------
    # Quotes
    # -------------------------------------------------------------------------

    def buy(self, instrument_id: str, quantity: float, available_cash: float) -> TradeQuote:
        asset = self._assets.get(instrument_id)
        if asset is None:
            return TradeQuote.failure(Reason.UNKNOWN_INSTRUMENT, f"Asset not found: {instrument_id}")
        if quantity <= 0:
            return TradeQuote.failure(Reason.INVALID_QUANTITY, "Quantity must be positive")

        cost = asset.current_price * quantity
        if cost > available_cash:
            return TradeQuote(
                ok=False,
                reason=Reason.INSUFFICIENT_FUNDS,
                message=f"Insufficient funds. Need ${cost:.2f}",
                instrument_id=instrument_id,
                quantity=quantity,
                cost=cost,
            )
        return TradeQuote(
            ok=True,
            message=f"Bought {quantity:g} {asset.symbol} @ ${asset.current_price:.2f}",
            instrument_id=instrument_id,
            quantity=quantity,
            cost=cost,
        )

    def sell(self, instrument_id: str, quantity: float, held_quantity: float) -> TradeQuote:
        asset = self._assets.get(instrument_id)
        if asset is None:
            return TradeQuote.failure(Reason.UNKNOWN_INSTRUMENT, f"Asset not found: {instrument_id}")
        if quantity <= 0:
            return TradeQuote.failure(Reason.INVALID_QUANTITY, "Quantity must be positive")
        if quantity > held_quantity:
            return TradeQuote.failure(
                Reason.INSUFFICIENT_HOLDINGS, f"You only own {held_quantity:g} units",
            )

        proceeds = asset.current_price * quantity
        return TradeQuote(
            ok=True,
            message=f"Sold {quantity:g} {asset.symbol} @ ${asset.current_price:.2f}",
            instrument_id=instrument_id,
            quantity=quantity,
            proceeds=proceeds,
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def portfolio_value(self, holdings: dict[str, float]) -> float:
        total = 0.0
        for instrument_id, quantity in holdings.items():
            asset = self._assets.get(instrument_id)
            if asset is not None:
                total += asset.current_price * quantity
        return round(total, 2)

    def price_change(self, instrument_id: str) -> float:
        """Percent change since the previous history entry."""
        asset = self._assets.get(instrument_id)
        if asset is None or len(asset.price_history) < 2:
            return 0.0
        previous = asset.price_history[-2]
        return (asset.current_price - previous) / previous * 100

    def snapshot(self) -> dict[str, dict]:
        return {
            a.id: {
                "symbol": a.symbol,
                "name": a.name,
                "instrument_class": a.instrument_class,
                "current_price": a.current_price,
                "base_price": a.base_price,
                "volatility": a.volatility,
                "history": list(a.price_history),
            }
            for a in self._assets.values()
        }
