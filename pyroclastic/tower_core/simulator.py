"""
Tower Simulator
===============

Main orchestrator combining the rock and jet sequences, chamber physics,
surface tracing and cycle detection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from pyroclastic.tower_core.config_loader import TowerConfig, get_config
from pyroclastic.tower_core.rock_catalog import RockCatalog
from pyroclastic.tower_core.rock_sequence import RockSequence
from pyroclastic.tower_core.jets import JetDirection, JetSequence
from pyroclastic.tower_core.chamber import Chamber
from pyroclastic.tower_core.physics import FallingRock, PhysicsResolver
from pyroclastic.tower_core.contour import SurfaceFingerprint, trace_surface
from pyroclastic.tower_core.cycle_detector import CycleDetector, CycleJump
from pyroclastic.tower_core.state_snapshot import SnapshotBuilder, TowerSnapshot


@dataclass
class DropResult:
    """Result of dropping one rock."""
    rock: FallingRock
    drops: int                          # Drop count after this rock (and any jump)
    height: int                         # Tower height including skipped cycles
    cycle_jump: Optional[CycleJump]     # Set on the drop that triggered the jump


@dataclass
class SimulationResult:
    """Result of running to a target drop count."""
    target: int
    height: int
    chamber_height: int
    height_bonus: int
    simulated_drops: int
    cycle_jump: Optional[CycleJump]


class TowerSimulator:
    """
    Drops rocks into the chamber until a target count is reached.

    One drop = spawn the next rock, push/fall it to rest. After each settle
    the exposed surface is traced; it is used to prune buried cells and, until
    the first repeat, as part of the cycle-detection key. At most one cycle
    jump is applied per run.
    """

    def __init__(
        self,
        jet_pattern: Sequence[JetDirection],
        config: Optional[TowerConfig] = None,
        detect_cycles: Optional[bool] = None,
        prune_buried: Optional[bool] = None
    ):
        """
        Initialize simulator.

        Args:
            jet_pattern: Parsed jet pattern, replayed cyclically.
            config: Tower configuration. Uses default if None.
            detect_cycles: Override config.cycle_detection.enabled.
            prune_buried: Override config.cycle_detection.prune_buried.
        """
        if config is None:
            config = get_config()
        if detect_cycles is None:
            detect_cycles = config.cycle_detection.enabled
        if prune_buried is None:
            prune_buried = config.cycle_detection.prune_buried

        self._config = config
        self._detect_cycles = detect_cycles
        self._prune_buried = prune_buried

        self._catalog = RockCatalog(config)
        self._rocks = RockSequence(config, self._catalog)
        self._jets = JetSequence(jet_pattern)
        self._chamber = Chamber(config.chamber.width)
        self._physics = PhysicsResolver(self._chamber, config)
        self._detector = CycleDetector(enabled=detect_cycles)
        self._snapshot_builder = SnapshotBuilder()

        # Run state
        self._drops: int = 0
        self._simulated_drops: int = 0
        self._height_bonus: int = 0

    @property
    def config(self) -> TowerConfig:
        return self._config

    @property
    def chamber(self) -> Chamber:
        return self._chamber

    @property
    def physics(self) -> PhysicsResolver:
        return self._physics

    @property
    def drops(self) -> int:
        """Rocks dropped so far, counting those covered by a cycle jump."""
        return self._drops

    @property
    def simulated_drops(self) -> int:
        """Rocks actually simulated."""
        return self._simulated_drops

    @property
    def height(self) -> int:
        """Tower height including skipped cycles."""
        return self._chamber.height + self._height_bonus

    @property
    def height_bonus(self) -> int:
        return self._height_bonus

    @property
    def rock_index(self) -> int:
        return self._rocks.index

    @property
    def jet_index(self) -> int:
        return self._jets.index

    @property
    def cycle_jump(self) -> Optional[CycleJump]:
        return self._detector.jump

    @property
    def detecting(self) -> bool:
        """True while cycle detection is still looking for a repeat."""
        return self._detector.active

    def reset(self) -> None:
        """Reset to an empty chamber at the start of both sequences."""
        self._rocks.reset()
        self._jets.reset()
        self._chamber.clear()
        self._detector.reset(enabled=self._detect_cycles)
        self._drops = 0
        self._simulated_drops = 0
        self._height_bonus = 0

    def drop_rock(self, target: Optional[int] = None) -> DropResult:
        """
        Drop one rock and let it settle.

        Args:
            target: Total drops the run is aiming for. Cycle detection only
                runs when a target is given, since the jump depends on it.

        Returns:
            DropResult for this rock.

        Raises:
            ValueError: If the target has already been reached.
        """
        if target is not None and target <= self._drops:
            raise ValueError(
                f"Target {target} already reached after {self._drops} rocks"
            )

        shape = self._rocks.advance()
        rock = self._physics.drop(shape, self._jets)
        self._drops += 1
        self._simulated_drops += 1

        jump = None
        detect = target is not None and self._detector.active
        if detect or self._prune_buried:
            surface = trace_surface(self._chamber)

            if self._prune_buried:
                self._chamber.prune_below(min(y for _, y in surface))

            if detect:
                jump = self._detector.observe(
                    rock_index=self._rocks.index,
                    jet_index=self._jets.index,
                    fingerprint=SurfaceFingerprint.from_cells(surface),
                    drop=self._drops,
                    height=self._chamber.height,
                    target=target
                )
                if jump is not None:
                    self._height_bonus += jump.height_bonus
                    self._drops = jump.resume_drop

        return DropResult(
            rock=rock,
            drops=self._drops,
            height=self.height,
            cycle_jump=jump
        )

    def run(self, target: int) -> SimulationResult:
        """
        Drop rocks until the drop count reaches the target.

        Args:
            target: Total number of rocks to drop.

        Returns:
            SimulationResult with the final tower height.
        """
        if target < 0:
            raise ValueError(f"Target must be non-negative, got {target}")
        if target < self._drops:
            raise ValueError(
                f"Target {target} is below the {self._drops} rocks already dropped"
            )

        while self._drops < target:
            self.drop_rock(target)

        return SimulationResult(
            target=target,
            height=self.height,
            chamber_height=self._chamber.height,
            height_bonus=self._height_bonus,
            simulated_drops=self._simulated_drops,
            cycle_jump=self._detector.jump
        )

    def snapshot(self) -> TowerSnapshot:
        """Summary of the current state."""
        return self._snapshot_builder.build(
            chamber=self._chamber,
            drops=self._drops,
            height_bonus=self._height_bonus,
            rock_index=self._rocks.index,
            jet_index=self._jets.index
        )


def simulate_tower_height(
    jet_pattern: Sequence[JetDirection],
    target: int,
    config: Optional[TowerConfig] = None,
    detect_cycles: Optional[bool] = None
) -> int:
    """
    Height of the tower after target rocks have fallen.

    Args:
        jet_pattern: Parsed jet pattern.
        target: Number of rocks to drop.
        config: Tower configuration. Uses default if None.
        detect_cycles: Override config.cycle_detection.enabled.

    Returns:
        Final tower height.
    """
    simulator = TowerSimulator(jet_pattern, config=config, detect_cycles=detect_cycles)
    return simulator.run(target).height
