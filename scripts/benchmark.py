#!/usr/bin/env python
"""
Profile a tangle level and display a timing breakdown per marker.

Usage:
    python scripts/benchmark.py                          # 3x3 crossing level
    python scripts/benchmark.py <path_to_level.json>
    python scripts/benchmark.py --ropes 40 --iterations 20
    python scripts/benchmark.py --ropes 40 --drags 50 --verbose

Examples:
    python scripts/benchmark.py --ropes 60 --weave-style arch
    python scripts/benchmark.py levels/hard.json --iterations 100
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

# Add project paths for development
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))
sys.path.insert(0, str(PROJECT_ROOT / "src" / "tangle"))

from tangle_engine import PuzzleController, TangleConfig
from tangle_level import LevelBuilder
from tangle_move import MoveStateMachine
from tangle_parser import LevelParser
from tangle_types import Slot
from logging_config import setup_logging
from profiling import get_profile_results, reset_profile, _PROFILING_COMPILED_OUT


# ANSI colors for output
RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
CYAN = "\033[36m"


def random_level(rope_count: int, seed: int):
    """Ropes between uniformly scattered slots, plus as many spare slots."""
    rng = np.random.default_rng(seed)
    extent = max(5.0, rope_count ** 0.5 * 2.0)
    positions = rng.uniform(-extent, extent, size=(rope_count * 3, 2))
    slots = [Slot(i, tuple(p)) for i, p in enumerate(positions)]
    pairs = [(2 * r, 2 * r + 1) for r in range(rope_count)]
    return LevelBuilder.build(slots, pairs)


def load_level(args):
    if args.level:
        return LevelParser.parse(Path(args.level).read_text(encoding='utf-8'))
    if args.ropes:
        return random_level(args.ropes, args.seed)
    return LevelBuilder.crossing_level()


def run(args):
    config = TangleConfig(weave_style=args.weave_style, snap_radius=args.snap_radius, profile=True)
    controller = PuzzleController(config)
    controller.set_level(*load_level(args))
    machine = MoveStateMachine(controller)
    rng = np.random.default_rng(args.seed)

    reset_profile()
    for _ in range(args.iterations):
        controller.recompute()

    pins = controller.pins
    for i in range(args.drags):
        pin = pins[i % len(pins)]
        machine.begin_move(pin.id, pin.logic_position)
        for position in rng.uniform(-5, 5, size=(10, 2)):
            machine.update_move(tuple(position))
        machine.cancel_move()

    return controller, get_profile_results()


def print_results(controller, results):
    print(f"{BOLD}Level:{RESET} {len(controller.slots)} slots, {len(controller.pins)} pins, "
          f"{len(controller.ropes)} ropes, {controller.crossing_count} crossings")
    print()
    print(f"{BOLD}{'marker':<24}{'count':>8}{'total ms':>12}{'avg ms':>10}{'max ms':>10}{RESET}")
    for name, stats in sorted(results.items(), key=lambda kv: -kv[1]['total_ms']):
        color = YELLOW if stats['avg_ms'] > 1.0 else GREEN
        print(f"{CYAN}{name:<24}{RESET}{stats['count']:>8}{stats['total_ms']:>12.3f}"
              f"{color}{stats['avg_ms']:>10.3f}{RESET}{DIM}{stats['max_ms']:>10.3f}{RESET}")


def main():
    parser = argparse.ArgumentParser(description="Profile a tangle level")
    parser.add_argument("level", nargs="?", help="Path to a JSON level document")
    parser.add_argument("--ropes", type=int, default=0, help="Generate a random level with this many ropes")
    parser.add_argument("--iterations", type=int, default=10, help="Full recomputes to time")
    parser.add_argument("--drags", type=int, default=10, help="Simulated drags (10 updates each, then cancel)")
    parser.add_argument("--weave-style", choices=['helix', 'arch'], default='helix')
    parser.add_argument("--snap-radius", type=float, default=1.0)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--verbose", action="store_true", help="Log engine activity at DEBUG level")
    args = parser.parse_args()

    if _PROFILING_COMPILED_OUT:
        print("Profiling is compiled out (TANGLE_NO_PROFILING or -O); nothing to report.")
        return 1

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    controller, results = run(args)
    print_results(controller, results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
