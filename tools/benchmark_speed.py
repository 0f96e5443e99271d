"""
Performance Benchmark
=====================

Measures rock drop throughput with and without pruning and cycle detection.

Usage:
    python -m tools.benchmark_speed [--drops N] [--repeats R] [--input FILE]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional
import numpy as np

from pyroclastic.tower_core.config_loader import load_config
from pyroclastic.evaluation.run_sim import load_jet_pattern
from pyroclastic.tower_core.jets import JetDirection, JetPatternError, parse_jet_pattern
from pyroclastic.tower_core.simulator import TowerSimulator

SAMPLE_PATTERN = ">>><<><>><<<>><>>><<<>>><<<><<<>><>><<>>"


def benchmark_mode(
    jet_pattern: List[JetDirection],
    num_drops: int,
    detect_cycles: bool,
    prune_buried: bool,
    repeats: int = 3
) -> dict:
    """
    Benchmark one simulator mode.

    Args:
        jet_pattern: Parsed jet pattern.
        num_drops: Rocks to drop per repeat.
        detect_cycles: Enable cycle detection.
        prune_buried: Enable pruning of buried rows.
        repeats: Timed runs to average over.

    Returns:
        Dict with timing results.
    """
    timings = []
    height = 0
    simulated = 0
    for _ in range(repeats):
        simulator = TowerSimulator(
            jet_pattern,
            detect_cycles=detect_cycles,
            prune_buried=prune_buried
        )
        start = time.perf_counter()
        result = simulator.run(num_drops)
        timings.append(time.perf_counter() - start)
        height = result.height
        simulated = result.simulated_drops

    elapsed = float(np.mean(timings))
    mode = f"{'cycles' if detect_cycles else 'plain'}{'+prune' if prune_buried else ''}"
    return {
        "mode": mode,
        "num_drops": num_drops,
        "simulated_drops": simulated,
        "height": height,
        "elapsed_seconds": elapsed,
        "elapsed_std": float(np.std(timings)),
        "drops_per_second": simulated / elapsed if elapsed > 0 else float("inf"),
    }


def run_all_benchmarks(
    jet_pattern: List[JetDirection],
    num_drops: int = 2022,
    repeats: int = 3
) -> list:
    """Run comprehensive benchmarks."""
    results = []

    print("=" * 60)
    print("TOWER SIMULATOR PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    for detect_cycles, prune_buried in ((False, False), (False, True), (True, True)):
        result = benchmark_mode(
            jet_pattern,
            num_drops,
            detect_cycles=detect_cycles,
            prune_buried=prune_buried,
            repeats=repeats
        )
        results.append(result)
        print(f"Benchmarking {result['mode']}...")
        print(f"  Drops/sec: {result['drops_per_second']:.1f}")
        print(f"  Seconds:   {result['elapsed_seconds']:.3f} (+/- {result['elapsed_std']:.3f})")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<16} {'Simulated':>10} {'Height':>10} {'Drops/s':>12}")
    print("-" * 50)

    for r in results:
        print(f"{r['mode']:<16} {r['simulated_drops']:>10} {r['height']:>10} "
              f"{r['drops_per_second']:>12.1f}")

    return results


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Benchmark tower simulator performance")
    parser.add_argument("--drops", type=int, default=2022, help="Rocks to drop per run")
    parser.add_argument("--repeats", type=int, default=3, help="Timed runs per mode")
    parser.add_argument("--input", type=str, default=None,
                        help="Jet pattern file (uses the built-in sample if not specified)")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer drops)")

    args = parser.parse_args(argv)

    config = load_config()
    if args.input:
        try:
            jet_pattern = load_jet_pattern(args.input, config)
        except (FileNotFoundError, JetPatternError) as e:
            print(f"Error loading jet pattern: {e}", file=sys.stderr)
            return 1
    else:
        jet_pattern = parse_jet_pattern(SAMPLE_PATTERN, config)

    num_drops = 200 if args.quick else args.drops

    run_all_benchmarks(
        jet_pattern,
        num_drops=num_drops,
        repeats=1 if args.quick else args.repeats
    )

    return 0


if __name__ == "__main__":
    sys.exit(main())
