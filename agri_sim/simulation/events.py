"""Yearly random events: catalog loading, weighted draw and effect application."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Optional, Union

from agri_sim.core.errors import CatalogError
from agri_sim.economy.catalog import CROP, LIVESTOCK, STRUCTURE
from agri_sim.economy.market import RandomSource

DEFAULT_CATALOG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data", "events.json",
)

CORRUPTION = "CORRUPTION"


# =============================================================================
# Effect variants
# =============================================================================

@dataclass(frozen=True)
class VisualHint:
    hint: str  # "drought", "rain", "sunshine", ...


@dataclass(frozen=True)
class HarvestMultipliers:
    crop_yield: Optional[float] = None
    sell_price: Optional[float] = None
    livestock: Optional[float] = None


@dataclass(frozen=True)
class CropFailure:
    """Only a failure flagged insurance-protected does anything."""

    crop_id: str
    insurance_protected: bool = False


@dataclass(frozen=True)
class AnimalLoss:
    animal_ids: tuple[str, ...]


@dataclass(frozen=True)
class SpecificMultipliers:
    multipliers: dict[str, float]


@dataclass(frozen=True)
class IntegrityDelta:
    delta: float


@dataclass(frozen=True)
class CashDelta:
    gain: float = 0.0
    loss: float = 0.0


@dataclass(frozen=True)
class TilesLost:
    count: int


@dataclass(frozen=True)
class MarketImpact:
    multipliers: dict[str, float]


@dataclass(frozen=True)
class CorruptionDemand:
    """A bribe the player pays or refuses after the turn."""

    pay_amount: float
    refuse_integrity_loss: float


Effect = Union[
    VisualHint, HarvestMultipliers, CropFailure, AnimalLoss, SpecificMultipliers,
    IntegrityDelta, CashDelta, TilesLost, MarketImpact, CorruptionDemand,
]

# Sub-effects of one event always apply in this order
EFFECT_ORDER: tuple[type, ...] = (
    VisualHint,
    HarvestMultipliers,
    CropFailure,
    AnimalLoss,
    SpecificMultipliers,
    IntegrityDelta,
    CashDelta,
    TilesLost,
    MarketImpact,
    CorruptionDemand,
)


@dataclass(frozen=True)
class GameEvent:
    """An immutable catalog entry."""

    id: str
    kind: str
    name: str
    description: str
    probability: float
    effects: tuple[Effect, ...] = ()

    def effect(self, effect_type: type) -> Optional[Effect]:
        for e in self.effects:
            if isinstance(e, effect_type):
                return e
        return None


@dataclass
class EventOutcome:
    """What an applied event actually did, for logs and reports."""

    event: GameEvent
    destroyed_tiles: list[str] = field(default_factory=list)
    protected_crops: list[str] = field(default_factory=list)
    cash_change: float = 0.0
    integrity_change: float = 0.0


# =============================================================================
# Catalog loading
# =============================================================================

_KNOWN_KEYS = {
    "visualFeedback", "cropYieldMultiplier", "sellPriceMultiplier", "livestockMultiplier",
    "cropFailure", "insuranceProtected", "animalLoss", "specificCropMultiplier",
    "integrity", "cashLoss", "cashGain", "tilesLost", "marketImpact",
    "payAmount", "refuseIntegrityLoss",
}


def _non_negative(key: str, value) -> float:
    amount = float(value)
    if amount < 0:
        raise CatalogError(f"Effect {key} must not be negative, got {value!r}")
    return amount


def _optional_multiplier(raw: dict, key: str) -> Optional[float]:
    return _non_negative(key, raw[key]) if raw.get(key) is not None else None


def parse_effects(raw: dict) -> tuple[Effect, ...]:
    """Turn the sparse JSON effect bag into ordered effect variants."""
    unknown = set(raw) - _KNOWN_KEYS
    if unknown:
        raise CatalogError(f"Unknown effect keys: {sorted(unknown)}")

    effects: list[Effect] = []
    if "visualFeedback" in raw:
        effects.append(VisualHint(hint=str(raw["visualFeedback"])))
    if any(k in raw for k in ("cropYieldMultiplier", "sellPriceMultiplier", "livestockMultiplier")):
        effects.append(HarvestMultipliers(
            crop_yield=_optional_multiplier(raw, "cropYieldMultiplier"),
            sell_price=_optional_multiplier(raw, "sellPriceMultiplier"),
            livestock=_optional_multiplier(raw, "livestockMultiplier"),
        ))
    if raw.get("cropFailure"):
        effects.append(CropFailure(
            crop_id=raw["cropFailure"],
            insurance_protected=bool(raw.get("insuranceProtected", False)),
        ))
    if raw.get("animalLoss"):
        effects.append(AnimalLoss(animal_ids=tuple(raw["animalLoss"])))
    if raw.get("specificCropMultiplier"):
        effects.append(SpecificMultipliers(multipliers={
            asset_id: _non_negative(f"specificCropMultiplier.{asset_id}", m)
            for asset_id, m in raw["specificCropMultiplier"].items()
        }))
    if raw.get("integrity"):
        effects.append(IntegrityDelta(delta=float(raw["integrity"])))
    if raw.get("cashGain") or raw.get("cashLoss"):
        effects.append(CashDelta(
            gain=_non_negative("cashGain", raw.get("cashGain", 0.0)),
            loss=_non_negative("cashLoss", raw.get("cashLoss", 0.0)),
        ))
    if raw.get("tilesLost"):
        count = int(raw["tilesLost"])
        if count < 0:
            raise CatalogError(f"Effect tilesLost must not be negative, got {count}")
        effects.append(TilesLost(count=count))
    if raw.get("marketImpact"):
        effects.append(MarketImpact(multipliers=dict(raw["marketImpact"])))
    if "payAmount" in raw or "refuseIntegrityLoss" in raw:
        effects.append(CorruptionDemand(
            pay_amount=_non_negative("payAmount", raw.get("payAmount", 0.0)),
            refuse_integrity_loss=float(raw.get("refuseIntegrityLoss", 0.0)),
        ))

    effects.sort(key=lambda e: EFFECT_ORDER.index(type(e)))
    return tuple(effects)


def build_catalog(entries: list[dict]) -> list[GameEvent]:
    catalog: list[GameEvent] = []
    for entry in entries:
        try:
            probability = float(entry["probability"])
            event = GameEvent(
                id=entry["id"],
                kind=entry.get("type", ""),
                name=entry.get("name", entry["id"]),
                description=entry.get("description", ""),
                probability=probability,
                effects=parse_effects(entry.get("effects", {})),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Bad event entry {entry!r}: {e}") from e
        if probability < 0:
            raise CatalogError(f"Event {event.id} has negative probability")
        if event.effect(CorruptionDemand) and event.kind != CORRUPTION:
            raise CatalogError(f"Event {event.id} demands a bribe but is not a {CORRUPTION} event")
        catalog.append(event)
    return catalog


def load_event_catalog(path: Optional[str] = None) -> list[GameEvent]:
    """Load an event catalog from JSON (a list, or an object with an "events" list)."""
    with open(path or DEFAULT_CATALOG_PATH, "r", encoding="utf-8") as f:
        data = json.load(f)
    entries = data["events"] if isinstance(data, dict) else data
    return build_catalog(entries)


# =============================================================================
# Event system
# =============================================================================

class EventSystem:
    """Draws at most one event per year from a weighted catalog."""

    def __init__(self, rng: RandomSource, catalog: Optional[list[GameEvent]] = None) -> None:
        self._rng = rng
        self.catalog: list[GameEvent] = catalog if catalog is not None else load_event_catalog()

    def draw(self) -> Optional[GameEvent]:
        """Walk the catalog accumulating probability. Probabilities need not sum to 1."""
        roll = float(self._rng.random())
        cumulative = 0.0
        for event in self.catalog:
            cumulative += event.probability
            if roll < cumulative:
                return event
        return None

    def apply(self, event: GameEvent, ctx: "SimulationContext") -> EventOutcome:  # noqa: F821
        """Apply every sub-effect of *event* to the context, in effect order."""
        outcome = EventOutcome(event=event)
        ledger = ctx.ledger
        grid = ctx.grid
        mods = ledger.modifiers

        for effect in sorted(event.effects, key=lambda e: EFFECT_ORDER.index(type(e))):
            if isinstance(effect, VisualHint):
                if effect.hint == "drought":
                    mods.drought = True
                elif effect.hint in ("rain", "sunshine"):
                    mods.drought = False

            elif isinstance(effect, HarvestMultipliers):
                if effect.crop_yield is not None:
                    mods.crop_yield = effect.crop_yield
                if effect.sell_price is not None:
                    mods.sell_price = effect.sell_price
                if effect.livestock is not None:
                    mods.livestock = effect.livestock

            elif isinstance(effect, CropFailure):
                if not effect.insurance_protected:
                    continue
                if ledger.has_active_insurance:
                    # Insured: the harvest of this crop is neutralised, not destroyed
                    mods.specific[effect.crop_id] = 1.0
                    outcome.protected_crops.append(effect.crop_id)
                else:
                    for tile in grid.tiles_of(CROP, effect.crop_id):
                        outcome.destroyed_tiles.append(tile.id)
                        grid.clear(tile)

            elif isinstance(effect, AnimalLoss):
                for tile in grid.tiles_of(LIVESTOCK):
                    if tile.content_id in effect.animal_ids:
                        outcome.destroyed_tiles.append(tile.id)
                        grid.clear(tile)

            elif isinstance(effect, SpecificMultipliers):
                mods.specific.update(effect.multipliers)

            elif isinstance(effect, IntegrityDelta):
                before = ledger.integrity
                ledger.adjust_integrity(effect.delta)
                outcome.integrity_change += ledger.integrity - before

            elif isinstance(effect, CashDelta):
                before = ledger.cash
                if effect.loss:
                    ledger.debit(effect.loss)
                if effect.gain:
                    ledger.credit(effect.gain)
                outcome.cash_change += ledger.cash - before

            elif isinstance(effect, TilesLost):
                for tile in grid.occupied_tiles()[: max(0, effect.count)]:
                    if tile.kind == STRUCTURE:
                        ledger.release_building_value(tile.base_value)
                    outcome.destroyed_tiles.append(tile.id)
                    grid.clear(tile)

            elif isinstance(effect, MarketImpact):
                ctx.market.apply_event_impacts(effect.multipliers)

            elif isinstance(effect, CorruptionDemand):
                ctx.pending_corruption = effect

        return outcome
