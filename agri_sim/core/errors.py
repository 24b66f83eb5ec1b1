"""Failure taxonomy and tagged results returned by every player operation.

Operations never raise for domain failures. They hand back a ``Result`` and
the caller checks ``ok`` before assuming anything changed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Reason(Enum):
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_HOLDINGS = "insufficient_holdings"
    TILE_OCCUPIED = "tile_occupied"
    UNKNOWN_INSTRUMENT = "unknown_instrument"
    MISSING_PREREQUISITE = "missing_prerequisite"
    NO_UPGRADE_PATH = "no_upgrade_path"
    GAME_OVER = "game_over"
    UNKNOWN_ASSET = "unknown_asset"
    UNKNOWN_TILE = "unknown_tile"
    EMPTY_TILE = "empty_tile"
    INVALID_QUANTITY = "invalid_quantity"
    UNKNOWN_TOOL = "unknown_tool"
    NO_PENDING_CHOICE = "no_pending_choice"


class CatalogError(ValueError):
    """Raised when an event catalog cannot be loaded."""


@dataclass(frozen=True)
class Result:
    """Outcome of a request/response operation."""

    ok: bool
    reason: Optional[Reason] = None
    message: str = ""

    @classmethod
    def success(cls, message: str = "") -> "Result":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, reason: Reason, message: str = "") -> "Result":
        return cls(ok=False, reason=reason, message=message or reason.value)


@dataclass(frozen=True)
class TradeQuote(Result):
    """Price quote for a buy or sell. Quoting never moves holdings or cash."""

    instrument_id: str = ""
    quantity: float = 0.0
    cost: float = 0.0
    proceeds: float = 0.0


@dataclass(frozen=True)
class LiquidationResult(Result):
    refund: float = 0.0
    released_building_value: float = 0.0
    content_id: Optional[str] = None


@dataclass(frozen=True)
class RenovationQuote(Result):
    from_id: Optional[str] = None
    to_id: Optional[str] = None
    cost: float = 0.0
