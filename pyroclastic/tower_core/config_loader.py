"""
Configuration Loader
====================

Loads and validates tower_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


@dataclass(frozen=True)
class ChamberConfig:
    """Chamber geometry and spawn placement."""
    width: int       # Cells between the walls
    spawn_x: int     # Left edge of a new rock
    spawn_gap: int   # Empty rows between tower top and a new rock


@dataclass(frozen=True)
class RockShapeConfig:
    """Configuration for a single rock shape."""
    id: int
    name: str
    offsets: Tuple[Tuple[int, int], ...]

    @property
    def width(self) -> int:
        return max(dx for dx, _ in self.offsets) + 1

    @property
    def height(self) -> int:
        return max(dy for _, dy in self.offsets) + 1


@dataclass(frozen=True)
class JetConfig:
    """Characters used in jet pattern input."""
    left: str
    right: str


@dataclass(frozen=True)
class CycleDetectionConfig:
    """Cycle detection and chamber pruning switches."""
    enabled: bool
    prune_buried: bool


@dataclass(frozen=True)
class RunConfig:
    """Defaults for command line runs."""
    default_target: int


@dataclass(frozen=True)
class TowerConfig:
    """
    Complete tower configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    chamber: ChamberConfig
    rocks: Tuple[RockShapeConfig, ...]
    jets: JetConfig
    cycle_detection: CycleDetectionConfig
    run: RunConfig

    @property
    def num_rock_shapes(self) -> int:
        """Number of shapes in the rock cycle."""
        return len(self.rocks)

    def get_rock(self, rock_id: int) -> RockShapeConfig:
        """Get rock shape config by ID."""
        if 0 <= rock_id < len(self.rocks):
            return self.rocks[rock_id]
        raise ValueError(f"Invalid rock ID: {rock_id}")


def _parse_offsets(offsets_data: List) -> Tuple[Tuple[int, int], ...]:
    """Parse rock cell offsets from YAML."""
    offsets = []
    for offset in offsets_data:
        if len(offset) != 2:
            raise ValueError(f"Rock offset must have 2 values [dx, dy], got {offset}")
        offsets.append((int(offset[0]), int(offset[1])))
    if not offsets:
        raise ValueError("Rock shape must have at least one offset")
    return tuple(offsets)


def _parse_rock(rock_data: dict) -> RockShapeConfig:
    """Parse a single rock shape configuration from YAML."""
    return RockShapeConfig(
        id=int(rock_data["id"]),
        name=str(rock_data["name"]),
        offsets=_parse_offsets(rock_data["offsets"])
    )


def _validate_config(config: TowerConfig) -> None:
    """Validate configuration consistency."""
    chamber = config.chamber
    if chamber.width < 1:
        raise ValueError(f"chamber.width must be positive, got {chamber.width}")
    if chamber.spawn_x < 0:
        raise ValueError(f"chamber.spawn_x must be non-negative, got {chamber.spawn_x}")
    if chamber.spawn_gap < 0:
        raise ValueError(f"chamber.spawn_gap must be non-negative, got {chamber.spawn_gap}")

    if not config.rocks:
        raise ValueError("At least one rock shape is required")

    for i, rock in enumerate(config.rocks):
        # Validate rock IDs are sequential
        if rock.id != i:
            raise ValueError(f"Rock ID mismatch: expected {i}, got {rock.id}")

        # Anchor is the lowest-left corner
        min_dx = min(dx for dx, _ in rock.offsets)
        min_dy = min(dy for _, dy in rock.offsets)
        if (min_dx, min_dy) != (0, 0):
            raise ValueError(
                f"Rock '{rock.name}' offsets must start at dx=0 and dy=0, "
                f"got min ({min_dx}, {min_dy})"
            )

        if len(set(rock.offsets)) != len(rock.offsets):
            raise ValueError(f"Rock '{rock.name}' has duplicate offsets")

        if chamber.spawn_x + rock.width > chamber.width:
            raise ValueError(
                f"Rock '{rock.name}' (width {rock.width}) does not fit the chamber "
                f"when spawned at x={chamber.spawn_x}"
            )

    jets = config.jets
    for symbol in (jets.left, jets.right):
        if len(symbol) != 1:
            raise ValueError(f"Jet symbols must be single characters, got '{symbol}'")
    if jets.left == jets.right:
        raise ValueError(f"Jet symbols must differ, both are '{jets.left}'")

    if config.run.default_target < 0:
        raise ValueError(
            f"run.default_target must be non-negative, got {config.run.default_target}"
        )


def load_config(config_path: Optional[str] = None) -> TowerConfig:
    """
    Load and validate tower configuration from YAML.

    Args:
        config_path: Path to tower_config.yaml. If None, uses default location.

    Returns:
        Validated TowerConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "tower_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    chamber_data = raw["chamber"]
    chamber = ChamberConfig(
        width=int(chamber_data["width"]),
        spawn_x=int(chamber_data.get("spawn_x", 2)),
        spawn_gap=int(chamber_data.get("spawn_gap", 3))
    )

    rocks = tuple(_parse_rock(r) for r in raw["rocks"])

    jets_data = raw.get("jets", {})
    jets = JetConfig(
        left=str(jets_data.get("left", "<")),
        right=str(jets_data.get("right", ">"))
    )

    # Parse cycle detection (optional section)
    cd_data = raw.get("cycle_detection", {})
    cycle_detection = CycleDetectionConfig(
        enabled=bool(cd_data.get("enabled", True)),
        prune_buried=bool(cd_data.get("prune_buried", True))
    )

    run_data = raw.get("run", {})
    run = RunConfig(
        default_target=int(run_data.get("default_target", 2022))
    )

    config = TowerConfig(
        chamber=chamber,
        rocks=rocks,
        jets=jets,
        cycle_detection=cycle_detection,
        run=run
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[TowerConfig] = None


def get_config() -> TowerConfig:
    """Get the cached tower configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> TowerConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
