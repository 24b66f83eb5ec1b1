"""Static matplotlib reports for a finished game."""

from __future__ import annotations

import os

import matplotlib
matplotlib.use("Agg")  # File output only
import matplotlib.pyplot as plt
import numpy as np


class Dashboard:
    """Year-by-year charts built from a YearHistory."""

    @staticmethod
    def year_report(history: "YearHistory", output_dir: str) -> list[str]:  # noqa: F821
        """Generate all plots and save to output directory. Returns the written paths."""
        os.makedirs(output_dir, exist_ok=True)

        records = history.records
        if not records:
            return []

        years = [r.year for r in records]
        written: list[str] = []

        def _save(fig, name: str) -> None:
            path = os.path.join(output_dir, name)
            fig.savefig(path, dpi=150, bbox_inches="tight")
            plt.close(fig)
            written.append(path)

        # Net worth and cash
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(years, [r.net_worth for r in records], "b-", linewidth=2, label="Net worth")
        ax.plot(years, [r.cash for r in records], "g--", linewidth=1.5, label="Cash")
        ax.set_title("Net Worth Over Time")
        ax.set_xlabel("Year")
        ax.set_ylabel("$")
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)
        _save(fig, "net_worth.png")

        # Revenue vs expenses
        fig, ax = plt.subplots(figsize=(10, 5))
        x = np.arange(len(years))
        ax.bar(x - 0.2, [r.revenue for r in records], width=0.4, color="#22c55e", label="Revenue")
        ax.bar(x + 0.2, [r.expenses for r in records], width=0.4, color="#ef4444", label="Expenses")
        ax.set_xticks(x)
        ax.set_xticklabels([str(y) for y in years])
        ax.set_title("Revenue vs Expenses")
        ax.set_xlabel("Year")
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3, axis="y")
        _save(fig, "revenue_expenses.png")

        # Integrity
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(years, [r.integrity for r in records], "m-", linewidth=2)
        ax.set_title("Integrity Over Time")
        ax.set_xlabel("Year")
        ax.set_ylabel("Integrity (0-100)")
        ax.set_ylim(0, 100)
        ax.grid(True, alpha=0.3)
        for r in records:
            if r.event:
                ax.annotate(r.event.name, (r.year, r.integrity), fontsize=6, rotation=45)
        _save(fig, "integrity.png")

        # Market prices, normalised to the first recorded year
        instruments = sorted({k for r in records for k in r.market_prices})
        if instruments:
            fig, ax = plt.subplots(figsize=(10, 5))
            for inst in instruments:
                prices = np.array([r.market_prices.get(inst, np.nan) for r in records], dtype=float)
                ax.plot(years, prices / prices[0] * 100, linewidth=1.5, label=inst)
            ax.axhline(y=100, color="k", linestyle="--", alpha=0.3)
            ax.set_title("Market Prices (first year = 100)")
            ax.set_xlabel("Year")
            ax.legend(fontsize=8)
            ax.grid(True, alpha=0.3)
            _save(fig, "market_prices.png")

        print(f"Reports saved to {output_dir}/")
        return written
