#!/usr/bin/env python3
"""
Rewrite Rule Demonstration Script

Grows the demo tile rules from a single red seed on a black board and logs
tile counts and a text preview of the result. Same seed, same board.
"""

import sys
import os
import json
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from gridrewrite.rules.engine import EngineConfig
from gridrewrite.rules.library import TILE_SYMBOLS, create_demo_engine, create_demo_grid, tile_counts


def run_rewrite_demo(size=64, steps=500, seed=None, allow_rotations=True, log_interval=100):
    """Run the demo rules and return summary metrics."""
    logger.info("=== REWRITE RULE DEMONSTRATION ===")
    logger.info(f"Board size: {size}x{size}")
    logger.info(f"Step limit: {steps}")
    logger.info(f"Seed: {seed}")

    grid = create_demo_grid(size)
    config = EngineConfig(seed=seed, max_steps=steps, allow_rotations=allow_rotations)
    engine = create_demo_engine(config=config)
    logger.info(f"Engine: {engine!r}")

    applied = engine.run(grid, log_interval=log_interval)
    counts = tile_counts(grid)

    logger.info("\n=== FINAL STATE ===")
    logger.info(f"Steps applied: {applied}")
    for tile, count in sorted(counts.items(), key=lambda item: item[0].value):
        logger.info(f"  {tile.name:<12} {count}")
    logger.info("Preview:\n" + grid.to_text(TILE_SYMBOLS))

    return {
        "size": size,
        "step_limit": steps,
        "seed": seed,
        "steps_applied": applied,
        "stalled": applied < steps,
        "tile_counts": {tile.name: count for tile, count in counts.items()},
    }


def save_demo_results(results, out_file="logs/rewrite_demo.json"):
    """Save demonstration results as JSON."""
    Path(out_file).parent.mkdir(parents=True, exist_ok=True)
    with open(out_file, 'w') as f:
        json.dump(results, f, indent=2)
    logger.info(f"Demonstration results saved to: {out_file}")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Rewrite Rule Demonstration")
    parser.add_argument("--size", type=int, default=64, help="Board size (square)")
    parser.add_argument("--steps", type=int, default=500, help="Step limit")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--no-rotations", action="store_true", help="Match rules only as authored")
    parser.add_argument("--save", metavar="PATH", help="Write summary JSON to PATH")
    parser.add_argument("--verbose", action="store_true", help="Log every rule firing")

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger("gridrewrite").setLevel(logging.DEBUG)

    try:
        results = run_rewrite_demo(size=args.size, steps=args.steps, seed=args.seed,
                                   allow_rotations=not args.no_rotations)
        if args.save:
            save_demo_results(results, args.save)
    except ValueError as e:
        logger.error(f"Demonstration failed: {e}")
        sys.exit(1)
