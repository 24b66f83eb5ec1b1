"""Monte Carlo analysis: play N games with different seeds, aggregate statistics."""

from __future__ import annotations

import csv
import os
import statistics
import time
from dataclasses import dataclass

import numpy as np


@dataclass
class RunResult:
    """Summary of a single game."""
    seed: int
    years_played: int
    game_over: bool
    final_cash: float
    final_net_worth: float
    peak_net_worth: float
    min_net_worth: float
    final_integrity: float
    total_revenue: float
    total_expenses: float
    events_fired: int
    most_common_event: str
    elapsed_seconds: float


def run_single(seed: int, years: int, crop: str = "paddyRice") -> RunResult:
    """Play one game with the scripted planting policy and return a summary."""
    from agri_sim.simulation.engine import FarmGame
    from agri_sim.simulation.policy import PlantingPolicy

    game = FarmGame(seed=seed)
    game.initialize()
    policy = PlantingPolicy(crop=crop)

    t0 = time.time()
    for _ in range(years):
        policy.act(game)
        if not game.end_turn().ok:
            break
    elapsed = time.time() - t0

    records = game.history.records
    last = records[-1] if records else None
    net_worths = [r.net_worth for r in records] or [game.balance_sheet().equity.net_worth]

    event_freq: dict[str, int] = {}
    for r in records:
        if r.event:
            event_freq[r.event.id] = event_freq.get(r.event.id, 0) + 1
    most_common = max(event_freq, key=event_freq.get) if event_freq else ""

    return RunResult(
        seed=seed,
        years_played=len(records),
        game_over=game.game_over,
        final_cash=game.ledger.cash,
        final_net_worth=last.net_worth if last else net_worths[0],
        peak_net_worth=max(net_worths),
        min_net_worth=min(net_worths),
        final_integrity=game.ledger.integrity,
        total_revenue=sum(r.revenue for r in records),
        total_expenses=sum(r.expenses for r in records),
        events_fired=sum(event_freq.values()),
        most_common_event=most_common,
        elapsed_seconds=elapsed,
    )


def stat_line(label: str, values: list[float], fmt: str = ".1f") -> str:
    if not values:
        return f"  {label}: no data"
    mn = min(values)
    mx = max(values)
    avg = statistics.mean(values)
    med = statistics.median(values)
    std = statistics.stdev(values) if len(values) > 1 else 0
    return f"  {label:<24s}  mean={avg:{fmt}}  median={med:{fmt}}  std={std:{fmt}}  min={mn:{fmt}}  max={mx:{fmt}}"


def monte_carlo(
    n_runs: int = 20,
    years: int = 20,
    crop: str = "paddyRice",
    output_dir: str = "results/monte_carlo",
) -> list[RunResult]:
    """Run N games with generated seeds and report aggregate stats."""

    os.makedirs(output_dir, exist_ok=True)
    results: list[RunResult] = []
    rng = np.random.default_rng(0)
    seeds = [int(s) for s in rng.integers(0, 100_000, size=n_runs)]

    print("=== Monte Carlo Farm Simulation ===")
    print(f"Runs: {n_runs} | Years/run: {years} | Crop: {crop}")
    print(f"Seeds: {seeds[:5]}{'...' if n_runs > 5 else ''}")
    print()

    total_t0 = time.time()

    for i, seed in enumerate(seeds):
        result = run_single(seed, years, crop)
        results.append(result)
        status = "GAME OVER" if result.game_over else "SURVIVED"
        print(
            f"  Run {i+1:>3}/{n_runs} | seed={seed:>5} | "
            f"years={result.years_played:>3} | "
            f"net worth=${result.final_net_worth:>12,.2f} | "
            f"integrity={result.final_integrity:>5.1f} | "
            f"{status}"
        )

    total_elapsed = time.time() - total_t0
    print(f"\nAll {n_runs} runs completed in {total_elapsed:.1f}s")

    # ── Aggregate Statistics ──────────────────────────────────────────
    print("\n" + "=" * 70)
    print("AGGREGATE RESULTS")
    print("=" * 70)

    print("\nFINANCES")
    print(stat_line("Final net worth", [r.final_net_worth for r in results], ",.0f"))
    print(stat_line("Peak net worth", [r.peak_net_worth for r in results], ",.0f"))
    print(stat_line("Final cash", [r.final_cash for r in results], ",.0f"))
    print(stat_line("Total revenue", [r.total_revenue for r in results], ",.0f"))
    print(stat_line("Total expenses", [r.total_expenses for r in results], ",.0f"))

    print("\nSTANDING")
    print(stat_line("Final integrity", [r.final_integrity for r in results]))
    print(stat_line("Years played", [r.years_played for r in results]))
    lost = sum(1 for r in results if r.game_over)
    print(f"  Game-over rate: {lost}/{n_runs} ({lost/n_runs*100:.0f}%)")

    print("\nMOST COMMON EVENT")
    event_freq: dict[str, int] = {}
    for r in results:
        if r.most_common_event:
            event_freq[r.most_common_event] = event_freq.get(r.most_common_event, 0) + 1
    for event_id, count in sorted(event_freq.items(), key=lambda x: -x[1]):
        print(f"  '{event_id}': {count}/{n_runs} runs ({count/n_runs*100:.0f}%)")

    # ── Export CSV ────────────────────────────────────────────────────
    csv_path = os.path.join(output_dir, "monte_carlo_results.csv")
    with open(csv_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "seed", "years_played", "game_over", "final_cash", "final_net_worth",
            "peak_net_worth", "min_net_worth", "final_integrity", "total_revenue",
            "total_expenses", "events_fired", "most_common_event", "elapsed_s",
        ])
        for r in results:
            writer.writerow([
                r.seed, r.years_played, int(r.game_over),
                f"{r.final_cash:.2f}", f"{r.final_net_worth:.2f}",
                f"{r.peak_net_worth:.2f}", f"{r.min_net_worth:.2f}",
                f"{r.final_integrity:.1f}", f"{r.total_revenue:.2f}",
                f"{r.total_expenses:.2f}", r.events_fired, r.most_common_event,
                f"{r.elapsed_seconds:.3f}",
            ])
    print(f"\nResults exported to {csv_path}")

    return results


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Monte Carlo farm simulation")
    parser.add_argument("--runs", type=int, default=20, help="Number of runs")
    parser.add_argument("--years", type=int, default=20, help="Years per run")
    parser.add_argument("--crop", type=str, default="paddyRice", help="Crop the scripted player plants")
    parser.add_argument("--output-dir", type=str, default="results/monte_carlo")
    args = parser.parse_args()

    monte_carlo(
        n_runs=args.runs,
        years=args.years,
        crop=args.crop,
        output_dir=args.output_dir,
    )
