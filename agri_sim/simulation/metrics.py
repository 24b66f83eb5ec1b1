"""Year-end records, the append-only history and its exports."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass, field
from typing import Iterator, Optional

from agri_sim.economy.balance_sheet import BalanceSheet
from agri_sim.simulation.events import GameEvent


@dataclass(frozen=True)
class YearRecord:
    """Immutable snapshot of one completed year."""

    year: int
    balance_sheet: BalanceSheet
    event: Optional[GameEvent]
    revenue: float       # harvest income + interest
    expenses: float      # property tax + fuel
    integrity: float = 0.0
    market_prices: dict[str, float] = field(default_factory=dict)

    @property
    def net_worth(self) -> float:
        return self.balance_sheet.equity.net_worth

    @property
    def cash(self) -> float:
        return self.balance_sheet.assets.cash


class YearHistory:
    """Append-only ledger of YearRecords."""

    def __init__(self) -> None:
        self._records: list[YearRecord] = []

    def append(self, record: YearRecord) -> None:
        if self._records and record.year <= self._records[-1].year:
            raise ValueError(f"Year {record.year} already recorded")
        self._records.append(record)

    @property
    def records(self) -> tuple[YearRecord, ...]:
        return tuple(self._records)

    @property
    def latest(self) -> Optional[YearRecord]:
        return self._records[-1] if self._records else None

    def __iter__(self) -> Iterator[YearRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_csv(self, filepath: str) -> None:
        """Export one row per year."""
        if not self._records:
            return

        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)

        instruments = sorted({k for r in self._records for k in r.market_prices})
        fieldnames = [
            "year", "event", "revenue", "expenses", "cash", "stock_value", "land_value",
            "livestock_value", "building_value", "total_assets", "total_liabilities",
            "net_worth", "integrity",
        ] + [f"price_{i}" for i in instruments]

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for r in self._records:
                bs = r.balance_sheet
                row = {
                    "year": r.year,
                    "event": r.event.id if r.event else "",
                    "revenue": round(r.revenue, 2),
                    "expenses": round(r.expenses, 2),
                    "cash": round(bs.assets.cash, 2),
                    "stock_value": round(bs.assets.stock_value, 2),
                    "land_value": round(bs.assets.land_value, 2),
                    "livestock_value": round(bs.assets.livestock_value, 2),
                    "building_value": round(bs.assets.building_value, 2),
                    "total_assets": round(bs.assets.total, 2),
                    "total_liabilities": round(bs.liabilities.total, 2),
                    "net_worth": round(bs.equity.net_worth, 2),
                    "integrity": round(r.integrity, 2),
                }
                for i in instruments:
                    row[f"price_{i}"] = r.market_prices.get(i, "")
                writer.writerow(row)

    def summary_report(self) -> str:
        """Generate a human-readable summary of the whole run."""
        if not self._records:
            return "No years recorded."

        first = self._records[0]
        last = self._records[-1]
        total_revenue = sum(r.revenue for r in self._records)
        total_expenses = sum(r.expenses for r in self._records)
        best = max(self._records, key=lambda r: r.net_worth)
        events: dict[str, int] = {}
        for r in self._records:
            if r.event:
                events[r.event.name] = events.get(r.event.name, 0) + 1

        lines = [
            "=" * 60,
            "FARM ECONOMY SIMULATION SUMMARY",
            "=" * 60,
            f"Years played: {len(self._records)} (year {first.year} to {last.year})",
            "",
            "--- Finances ---",
            f"Final cash: ${last.cash:,.2f}",
            f"Final net worth: ${last.net_worth:,.2f}",
            f"Peak net worth: ${best.net_worth:,.2f} (year {best.year})",
            f"Total revenue: ${total_revenue:,.2f}",
            f"Total expenses: ${total_expenses:,.2f}",
            "",
            "--- Standing ---",
            f"Final integrity: {last.integrity:.1f}",
            "",
            "--- Events ---",
        ]
        if events:
            for name, count in sorted(events.items(), key=lambda x: -x[1]):
                lines.append(f"  {name}: {count}")
        else:
            lines.append("  (quiet years)")
        lines.append("=" * 60)
        return "\n".join(lines)
