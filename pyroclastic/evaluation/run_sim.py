"""
Simulation Harness
==================

Loads a jet pattern file and reports the tower height for one or more targets.

Usage:
    python -m pyroclastic.evaluation.run_sim input.txt --target 2022 1000000000000
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from pyroclastic.tower_core.config_loader import TowerConfig, load_config
from pyroclastic.tower_core.jets import JetDirection, JetPatternError, parse_jet_pattern
from pyroclastic.tower_core.simulator import SimulationResult, TowerSimulator
from pyroclastic.tower_core.state_snapshot import TowerSnapshot


@dataclass
class TargetResult:
    """Result for a single target."""
    result: SimulationResult
    snapshot: TowerSnapshot
    elapsed_time: float

    @property
    def target(self) -> int:
        return self.result.target

    @property
    def height(self) -> int:
        return self.result.height


def load_jet_pattern(
    path: str,
    config: Optional[TowerConfig] = None
) -> List[JetDirection]:
    """
    Read and parse a jet pattern file.

    Args:
        path: Path to a file holding one line of jet symbols.
        config: Tower configuration. Uses default if None.

    Returns:
        Parsed jet pattern.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        JetPatternError: If the file holds anything but jet symbols.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with open(path, "r") as f:
        text = f.read()

    return parse_jet_pattern(text, config)


def evaluate_target(
    jet_pattern: List[JetDirection],
    target: int,
    config: Optional[TowerConfig] = None,
    detect_cycles: Optional[bool] = None,
    verbose: bool = False
) -> TargetResult:
    """
    Run a fresh simulation to one target.

    Args:
        jet_pattern: Parsed jet pattern.
        target: Number of rocks to drop.
        config: Tower configuration. Uses default if None.
        detect_cycles: Override config.cycle_detection.enabled.
        verbose: If True, print details to stderr.

    Returns:
        TargetResult for this target.
    """
    simulator = TowerSimulator(jet_pattern, config=config, detect_cycles=detect_cycles)

    start_time = time.time()
    result = simulator.run(target)
    elapsed = time.time() - start_time

    target_result = TargetResult(
        result=result,
        snapshot=simulator.snapshot(),
        elapsed_time=elapsed
    )

    if verbose:
        print(f"  Target {target}: height={result.height}, "
              f"simulated={result.simulated_drops}, time={elapsed:.2f}s",
              file=sys.stderr)
        jump = result.cycle_jump
        if jump is not None:
            print(f"    Cycle: drops {jump.first_drop}->{jump.repeat_drop} "
                  f"(length {jump.cycle_length}, +{jump.height_gain} height), "
                  f"skipped {jump.repeats} cycles",
                  file=sys.stderr)

    return target_result


def evaluate_targets(
    jet_pattern: List[JetDirection],
    targets: List[int],
    config: Optional[TowerConfig] = None,
    detect_cycles: Optional[bool] = None,
    verbose: bool = False
) -> List[TargetResult]:
    """
    Run one simulation per target.

    Args:
        jet_pattern: Parsed jet pattern.
        targets: Drop counts to evaluate.
        config: Tower configuration. Uses default if None.
        detect_cycles: Override config.cycle_detection.enabled.
        verbose: If True, print progress to stderr.

    Returns:
        TargetResult per target, in input order.
    """
    if verbose:
        print(f"Simulating {len(targets)} target(s) with a "
              f"{len(jet_pattern)}-jet pattern...", file=sys.stderr)

    return [
        evaluate_target(jet_pattern, target, config, detect_cycles, verbose)
        for target in targets
    ]


def _result_to_dict(target_result: TargetResult) -> Dict[str, Any]:
    result = target_result.result
    jump = result.cycle_jump
    return {
        "target": result.target,
        "height": result.height,
        "simulated_drops": result.simulated_drops,
        "elapsed_time": target_result.elapsed_time,
        "cycle": None if jump is None else {
            "first_drop": jump.first_drop,
            "repeat_drop": jump.repeat_drop,
            "cycle_length": jump.cycle_length,
            "height_gain": jump.height_gain,
            "repeats": jump.repeats,
            "leftover": jump.leftover,
        },
        "snapshot": target_result.snapshot.to_dict(),
    }


def save_results(
    results: List[TargetResult],
    input_name: str,
    output_path: str
) -> None:
    """Save simulation results to JSON."""
    data = {
        "input": input_name,
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        "results": [_result_to_dict(r) for r in results]
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Simulate a falling-rock tower")
    parser.add_argument(
        "input",
        type=str,
        help="Path to the jet pattern file"
    )
    parser.add_argument(
        "--target",
        type=int,
        nargs="+",
        default=None,
        help="Number of rocks to drop (uses config default if not specified)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to tower config YAML (uses default if not specified)"
    )
    parser.add_argument(
        "--no-cycle-detection",
        action="store_true",
        help="Simulate every drop instead of jumping over cycles"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Path to save results JSON"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print run details to stderr"
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)

    try:
        jet_pattern = load_jet_pattern(args.input, config)
    except (FileNotFoundError, JetPatternError) as e:
        print(f"Error loading jet pattern: {e}", file=sys.stderr)
        return 1

    targets = args.target if args.target is not None else [config.run.default_target]
    if any(t < 0 for t in targets):
        print("Error: targets must be non-negative", file=sys.stderr)
        return 1

    results = evaluate_targets(
        jet_pattern,
        targets,
        config=config,
        detect_cycles=False if args.no_cycle_detection else None,
        verbose=args.verbose
    )

    for target_result in results:
        print(target_result.height)

    if args.output:
        save_results(results, Path(args.input).name, args.output)
        if args.verbose:
            print(f"Results saved to {args.output}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
