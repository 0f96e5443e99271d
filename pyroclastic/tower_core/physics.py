"""
Physics Resolver
================

Drives a single rock from spawn to rest with alternating jet pushes and falls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pyroclastic.tower_core.config_loader import TowerConfig, get_config
from pyroclastic.tower_core.rock_catalog import RockShape
from pyroclastic.tower_core.chamber import Chamber, TowerInvariantError
from pyroclastic.tower_core.jets import JetDirection, JetSequence

Cell = Tuple[int, int]


class StepOutcome(Enum):
    """Result of one push-then-fall sub-step."""
    FALLING = "falling"
    SETTLED = "settled"


@dataclass
class FallingRock:
    """
    The single rock currently in motion.

    Exists only for one drop; its cells are merged into the chamber on settle.
    """
    shape: RockShape
    cells: List[Cell]
    steps: int = 0
    settled: bool = False

    @property
    def lowest_y(self) -> int:
        return min(y for _, y in self.cells)

    @property
    def leftmost_x(self) -> int:
        return min(x for x, _ in self.cells)

    def shifted(self, dx: int, dy: int) -> List[Cell]:
        """Cells displaced by (dx, dy), without moving the rock."""
        return [(x + dx, y + dy) for x, y in self.cells]


class PhysicsResolver:
    """
    Moves falling rocks against a chamber.

    Each sub-step is a jet push (rejected when blocked by a wall or a rock)
    followed by a one-row fall (rejected when blocked by the floor or a rock).
    A rejected fall is the rest condition.
    """

    def __init__(self, chamber: Chamber, config: Optional[TowerConfig] = None):
        """
        Initialize resolver.

        Args:
            chamber: Chamber the rocks settle into.
            config: Tower configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._chamber = chamber
        self._spawn_x = config.chamber.spawn_x
        self._spawn_gap = config.chamber.spawn_gap

    @property
    def chamber(self) -> Chamber:
        return self._chamber

    def spawn(self, shape: RockShape) -> FallingRock:
        """
        Create a rock with its lowest-left corner at (spawn_x, height + spawn_gap).

        Args:
            shape: Shape of the new rock.

        Returns:
            The falling rock.
        """
        anchor_y = self._chamber.height + self._spawn_gap
        return FallingRock(shape=shape, cells=shape.place(self._spawn_x, anchor_y))

    def fits(self, cells: List[Cell]) -> bool:
        """True if every cell is inside the walls, above the floor and free."""
        width = self._chamber.width
        chamber = self._chamber
        for cell in cells:
            x, y = cell
            if x < 0 or x >= width or y < 0:
                return False
            if cell in chamber:
                return False
        return True

    def step(self, rock: FallingRock, direction: JetDirection) -> StepOutcome:
        """
        Apply one push-then-fall sub-step.

        Args:
            rock: The rock in motion.
            direction: Jet consumed by this sub-step.

        Returns:
            SETTLED if the rock came to rest (its cells are now in the
            chamber), FALLING otherwise.
        """
        if rock.settled:
            raise TowerInvariantError("Rock has already settled")

        rock.steps += 1

        pushed = rock.shifted(int(direction), 0)
        if self.fits(pushed):
            rock.cells = pushed

        dropped = rock.shifted(0, -1)
        if self.fits(dropped):
            rock.cells = dropped
            return StepOutcome.FALLING

        self._chamber.commit(rock.cells)
        rock.settled = True
        return StepOutcome.SETTLED

    def drop(self, shape: RockShape, jets: JetSequence) -> FallingRock:
        """
        Spawn a rock and step it until it rests.

        Args:
            shape: Shape of the rock to drop.
            jets: Jet sequence; one jet is consumed per sub-step.

        Returns:
            The settled rock.
        """
        rock = self.spawn(shape)
        while self.step(rock, jets.advance()) is StepOutcome.FALLING:
            pass
        return rock
