"""
Tower Core - The falling-rock simulation.

This module provides the chamber physics, the surface contour fingerprint,
cycle detection, and the driver that ties them together.

Main exports:
- TowerSimulator: Drops rocks to a target count, jumping over repeated cycles
- simulate_tower_height: One-call height computation
- parse_jet_pattern: Jet input parsing (raises JetPatternError)
- TowerConfig: Configuration loaded from tower_config.yaml
"""

from pyroclastic.tower_core.config_loader import TowerConfig, load_config
from pyroclastic.tower_core.rock_catalog import RockShape, RockCatalog
from pyroclastic.tower_core.rock_sequence import RockSequence
from pyroclastic.tower_core.jets import (
    JetDirection,
    JetPatternError,
    JetSequence,
    parse_jet_pattern,
)
from pyroclastic.tower_core.chamber import Chamber, TowerInvariantError
from pyroclastic.tower_core.physics import FallingRock, PhysicsResolver, StepOutcome
from pyroclastic.tower_core.contour import (
    ContourTraceError,
    SurfaceFingerprint,
    compute_fingerprint,
)
from pyroclastic.tower_core.cycle_detector import CycleDetector, CycleJump
from pyroclastic.tower_core.simulator import (
    SimulationResult,
    TowerSimulator,
    simulate_tower_height,
)

__all__ = [
    "TowerConfig",
    "load_config",
    "RockShape",
    "RockCatalog",
    "RockSequence",
    "JetDirection",
    "JetPatternError",
    "JetSequence",
    "parse_jet_pattern",
    "Chamber",
    "TowerInvariantError",
    "FallingRock",
    "PhysicsResolver",
    "StepOutcome",
    "ContourTraceError",
    "SurfaceFingerprint",
    "compute_fingerprint",
    "CycleDetector",
    "CycleJump",
    "SimulationResult",
    "TowerSimulator",
    "simulate_tower_height",
]
