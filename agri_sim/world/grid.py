"""Square farm grid: one tile per (x, z), each holding at most one asset."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional

from agri_sim.core.config import (
    BASE_REFUND_RATE,
    INITIAL_GRID_SIZE,
    ROAD_REFUND_RATE,
    TILE_MAX_HEALTH,
)
from agri_sim.core.errors import LiquidationResult, Reason, RenovationQuote, Result
from agri_sim.economy.catalog import (
    EMPTY,
    LIVESTOCK,
    ROAD_CLASS,
    STRUCTURE,
    renovation_for,
    structure_class,
)


@dataclass
class Tile:
    """A single plot on the farm."""

    id: str
    x: int
    z: int
    kind: str = EMPTY  # EMPTY, CROP, LIVESTOCK, STRUCTURE
    content_id: Optional[str] = None
    health: int = TILE_MAX_HEALTH
    livestock_count: int = 0
    base_value: float = 0.0  # price paid plus renovation spend

    @property
    def is_empty(self) -> bool:
        return self.kind == EMPTY

    def reset(self) -> None:
        self.kind = EMPTY
        self.content_id = None
        self.health = TILE_MAX_HEALTH
        self.livestock_count = 0
        self.base_value = 0.0


class FarmGrid:
    """Tiles live in a flat list; ``(x, z)`` maps to a list index.

    Tiles are mutated in place. Expansion appends the new border tiles, so
    iteration order is creation order.
    """

    def __init__(self, size: int = INITIAL_GRID_SIZE) -> None:
        self.size = 0
        self._tiles: list[Tile] = []
        self._index: dict[tuple[int, int], int] = {}
        self._fill_to(size)

    def _fill_to(self, size: int) -> None:
        for x in range(size):
            for z in range(size):
                if (x, z) not in self._index:
                    self._index[(x, z)] = len(self._tiles)
                    self._tiles.append(Tile(id=f"tile-{x}-{z}", x=x, z=z))
        self.size = size

    @property
    def tiles(self) -> list[Tile]:
        return list(self._tiles)

    def __iter__(self):
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def tile(self, x: int, z: int) -> Optional[Tile]:
        idx = self._index.get((x, z))
        return None if idx is None else self._tiles[idx]

    def expand(self) -> int:
        """Grow by one row and one column. Returns the new size."""
        self._fill_to(self.size + 1)
        return self.size

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def has_structure(self, structure_id: str) -> bool:
        """True if any structure of this class stands anywhere on the grid."""
        wanted = structure_class(structure_id)
        return any(
            t.kind == STRUCTURE and structure_class(t.content_id) == wanted
            for t in self._tiles
        )

    def occupied_tiles(self) -> list[Tile]:
        return [t for t in self._tiles if not t.is_empty]

    def tiles_of(self, kind: str, content_id: Optional[str] = None) -> list[Tile]:
        return [
            t for t in self._tiles
            if t.kind == kind and (content_id is None or t.content_id == content_id)
        ]

    def count(self, kind: str) -> int:
        return sum(1 for t in self._tiles if t.kind == kind)

    def has_livestock(self) -> bool:
        return any(t.kind == LIVESTOCK and t.livestock_count > 0 for t in self._tiles)

    def refund_rate(self) -> float:
        return ROAD_REFUND_RATE if self.has_structure(ROAD_CLASS) else BASE_REFUND_RATE

    def snapshot(self) -> list[dict]:
        return [asdict(t) for t in self._tiles]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def place(self, x: int, z: int, asset_id: str, kind: str, price: float) -> Result:
        """Put an asset on an empty tile. Affordability and prerequisites are the caller's."""
        tile = self.tile(x, z)
        if tile is None:
            return Result.failure(Reason.UNKNOWN_TILE, f"No tile at ({x}, {z})")
        if not tile.is_empty:
            return Result.failure(Reason.TILE_OCCUPIED, f"Tile ({x}, {z}) holds {tile.content_id}")

        tile.kind = kind
        tile.content_id = asset_id
        tile.health = TILE_MAX_HEALTH
        tile.livestock_count = 1 if kind == LIVESTOCK else 0
        tile.base_value = price
        return Result.success(f"Placed {asset_id} at ({x}, {z})")

    def liquidate(self, x: int, z: int) -> LiquidationResult:
        """Sell whatever is on a tile at the current refund rate and clear it."""
        tile = self.tile(x, z)
        if tile is None:
            return LiquidationResult.failure(Reason.UNKNOWN_TILE, f"No tile at ({x}, {z})")
        if tile.is_empty:
            return LiquidationResult.failure(Reason.EMPTY_TILE, f"Tile ({x}, {z}) is empty")

        rate = self.refund_rate()
        refund = tile.base_value * rate
        released = refund / rate if tile.kind == STRUCTURE else 0.0
        content_id = tile.content_id
        tile.reset()
        return LiquidationResult(
            ok=True,
            message=f"Liquidated {content_id} for ${refund:.2f}",
            refund=refund,
            released_building_value=released,
            content_id=content_id,
        )

    def renovation_quote(self, x: int, z: int) -> RenovationQuote:
        tile = self.tile(x, z)
        if tile is None:
            return RenovationQuote.failure(Reason.UNKNOWN_TILE, f"No tile at ({x}, {z})")
        if tile.kind != STRUCTURE:
            return RenovationQuote.failure(Reason.NO_UPGRADE_PATH, "Only structures can be renovated")
        path = renovation_for(tile.content_id)
        if path is None:
            return RenovationQuote.failure(
                Reason.NO_UPGRADE_PATH, f"{tile.content_id} cannot be renovated",
            )
        to_id, cost = path
        return RenovationQuote(ok=True, from_id=tile.content_id, to_id=to_id, cost=cost)

    def renovate(self, x: int, z: int) -> RenovationQuote:
        """Upgrade a structure in place. Paying for it is the caller's job."""
        quote = self.renovation_quote(x, z)
        if quote.ok:
            tile = self.tile(x, z)
            tile.content_id = quote.to_id
            tile.health = TILE_MAX_HEALTH
            tile.base_value += quote.cost
        return quote

    def clear(self, tile: Tile) -> None:
        tile.reset()
