"""Entry point for the farm economy simulation."""

from __future__ import annotations

import argparse
import os
import time


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Farm Economy Simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--years", type=int, default=20, help="Number of years to simulate")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--crop", type=str, default="paddyRice", help="Crop the scripted player plants")
    parser.add_argument("--insurance", type=str, default=None, choices=["oneTime", "annual"],
                        help="Crop insurance bought in the first year")
    parser.add_argument("--verbosity", type=int, default=0, choices=[0, 1, 2, 3], help="Log verbosity level")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory for results")
    parser.add_argument("--no-charts", action="store_true", help="Skip saving matplotlib charts")
    parser.add_argument("--log-file", type=str, default=None, help="Path to log file")

    args = parser.parse_args()

    # Import here to allow --help without loading everything
    from agri_sim.simulation.engine import FarmGame
    from agri_sim.simulation.policy import PlantingPolicy
    from agri_sim.viz.logger import SimLogger

    print("=== Farm Economy Simulation ===")
    print(f"Years: {args.years} | Seed: {args.seed} | Crop: {args.crop}")
    print(f"Output: {args.output_dir}")
    print()

    logger = SimLogger(
        verbosity=args.verbosity,
        log_file=args.log_file or os.path.join(args.output_dir, "simulation.log"),
        stdout=(args.verbosity > 0),
    )
    game = FarmGame(seed=args.seed, logger=logger)
    game.initialize()
    policy = PlantingPolicy(crop=args.crop)

    if args.insurance:
        result = game.buy_insurance(args.insurance)
        print(f"Insurance: {result.message}")

    t0 = time.time()
    try:
        for _ in range(args.years):
            policy.act(game)
            result = game.end_turn()
            if not result.ok:
                print(f"Year {game.year}: {result.message}")
                break
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")

    elapsed = time.time() - t0
    print(f"Simulation complete: {len(game.history)} years in {elapsed:.2f}s")

    os.makedirs(args.output_dir, exist_ok=True)
    csv_path = os.path.join(args.output_dir, "years.csv")
    game.history.export_csv(csv_path)
    print(f"Year records exported to {csv_path}")

    if not args.no_charts:
        try:
            from agri_sim.viz.dashboard import Dashboard
            Dashboard.year_report(game.history, args.output_dir)
        except ImportError as e:
            print(f"Could not generate plots: {e}")

    print()
    print(game.history.summary_report())

    logger.export_json(os.path.join(args.output_dir, "events.json"))
    logger.close()

    print(f"\nAll results saved to {args.output_dir}/")


if __name__ == "__main__":
    main()
