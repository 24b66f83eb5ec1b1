"""
Farm Economy Simulation Runner
==============================
Play a scripted game, then save charts and print a summary at the end.

Usage:
    python run_simulation.py                          # defaults: 20 years, seed 42
    python run_simulation.py --years 50 --seed 7      # custom run
    python run_simulation.py --help                   # full options
"""

from __future__ import annotations

import argparse
import os
import sys
import time

# Ensure agri_sim package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def run() -> None:
    parser = argparse.ArgumentParser(
        description="Farm Economy Simulation: run and visualize",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--years", type=int, default=20, help="Number of years to simulate")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--crop", type=str, default="paddyRice", help="Crop the scripted player plants")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory")
    parser.add_argument("--verbosity", type=int, default=0, choices=[0, 1, 2, 3])
    args = parser.parse_args()

    from agri_sim.simulation.engine import FarmGame
    from agri_sim.simulation.policy import PlantingPolicy
    from agri_sim.viz.logger import SimLogger

    # ── Banner ──────────────────────────────────────────────────────────
    print("=" * 60)
    print("  Farm Economy Simulation")
    print("=" * 60)
    print(f"  Years      : {args.years}")
    print(f"  Seed       : {args.seed}")
    print(f"  Crop       : {args.crop}")
    print(f"  Output     : {args.output_dir}/")
    print("=" * 60)
    print()

    # ── Initialize ──────────────────────────────────────────────────────
    logger = SimLogger(
        verbosity=args.verbosity,
        log_file=os.path.join(args.output_dir, "simulation.log"),
        stdout=(args.verbosity > 0),
    )
    game = FarmGame(seed=args.seed, logger=logger)
    game.initialize()
    policy = PlantingPolicy(crop=args.crop)
    print(f"  Farm      : {game.grid.size}x{game.grid.size} grid")
    print(f"  Cash      : ${game.ledger.cash:,.2f}")
    print(f"  Events    : {len(game.ctx.events.catalog)} in catalog")
    print()

    # ── Run simulation with progress ────────────────────────────────────
    print(f"Simulating {args.years} years ...")
    t0 = time.time()

    for _ in range(args.years):
        policy.act(game)
        result = game.end_turn()
        if not result.ok:
            print(f"  GAME OVER in year {game.year}: {result.message}")
            break
        record = result.record
        event = record.event.name if record.event else "-"
        print(
            f"  Year {record.year:>3}  |  cash ${record.cash:>12,.2f}  |  "
            f"net worth ${record.net_worth:>12,.2f}  |  integrity {record.integrity:5.1f}  |  {event}"
        )

    print(f"\nSimulation finished in {time.time() - t0:.2f}s")
    print()

    # ── Export data ─────────────────────────────────────────────────────
    os.makedirs(args.output_dir, exist_ok=True)
    game.history.export_csv(os.path.join(args.output_dir, "years.csv"))
    logger.export_json(os.path.join(args.output_dir, "events.json"))
    logger.close()

    # ── Print summary report ────────────────────────────────────────────
    print(game.history.summary_report())

    # ── Save charts ─────────────────────────────────────────────────────
    try:
        from agri_sim.viz.dashboard import Dashboard
        Dashboard.year_report(game.history, args.output_dir)
    except ImportError as e:
        print(f"  (Could not save PNGs: {e})")


if __name__ == "__main__":
    run()
