"""Scripted player used by the CLI and batch runs."""

from __future__ import annotations

from dataclasses import dataclass

from agri_sim.economy.catalog import CROP_DATA


@dataclass
class PlantingPolicy:
    """Replant every empty tile with one crop, keeping a cash reserve for tax."""

    crop: str = "paddyRice"
    reserve_years: float = 1.0     # keep this many years of property tax untouched
    bribe_cash_multiple: float = 2.0

    def act(self, game: "FarmGame") -> int:  # noqa: F821
        """Take the player's actions before a year end. Returns tiles planted."""
        if game.ctx.pending_corruption is not None:
            demand = game.ctx.pending_corruption
            game.resolve_corruption(game.ledger.cash >= demand.pay_amount * self.bribe_cash_multiple)

        cost = CROP_DATA[self.crop]["cost"]
        reserve = game.ledger.yearly_tax_liability * self.reserve_years
        planted = 0
        for tile in game.grid:
            if game.ledger.cash - cost < reserve:
                break
            if tile.is_empty and game.place(tile.x, tile.z, self.crop).ok:
                planted += 1
        return planted
