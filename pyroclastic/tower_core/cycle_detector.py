"""
Cycle Detector
==============

Spots a repeating tower state and computes how far the simulation can jump.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from pyroclastic.tower_core.contour import SurfaceFingerprint

CycleKey = Tuple[int, int, SurfaceFingerprint]


@dataclass(frozen=True)
class CycleJump:
    """Extrapolation derived from the first repeated state."""
    first_drop: int       # Drop count when the state was first seen
    repeat_drop: int      # Drop count when it was seen again
    height_gain: int      # Tower growth over one cycle
    repeats: int          # Whole cycles skipped
    leftover: int         # Drops still to simulate after the jump

    @property
    def cycle_length(self) -> int:
        return self.repeat_drop - self.first_drop

    @property
    def height_bonus(self) -> int:
        """Height added by the skipped cycles."""
        return self.repeats * self.height_gain

    @property
    def skipped_drops(self) -> int:
        return self.repeats * self.cycle_length

    @property
    def resume_drop(self) -> int:
        """Drop count to continue from; equals target - leftover."""
        return self.repeat_drop + self.skipped_drops


class CycleDetector:
    """
    Records (rock index, jet index, fingerprint) -> (drop, height) until a
    key repeats, then switches itself off for the rest of the run.
    """

    def __init__(self, enabled: bool = True):
        self._enabled = enabled
        self._seen: Dict[CycleKey, Tuple[int, int]] = {}
        self._jump: Optional[CycleJump] = None

    @property
    def active(self) -> bool:
        """True while the detector is still looking for a cycle."""
        return self._enabled and self._jump is None

    @property
    def jump(self) -> Optional[CycleJump]:
        """The jump found, if any."""
        return self._jump

    @property
    def states_seen(self) -> int:
        return len(self._seen)

    def observe(
        self,
        rock_index: int,
        jet_index: int,
        fingerprint: SurfaceFingerprint,
        drop: int,
        height: int,
        target: int
    ) -> Optional[CycleJump]:
        """
        Record the state after a settle.

        Args:
            rock_index: Index of the next rock in the rock cycle.
            jet_index: Index of the next jet in the jet pattern.
            fingerprint: Surface fingerprint after the settle.
            drop: Number of rocks dropped so far.
            height: Chamber height after the settle.
            target: Total number of drops the run is aiming for.

        Returns:
            The jump on the first repeated state, otherwise None.

        Raises:
            ValueError: If the run has already passed the target.
        """
        if not self.active:
            return None
        if drop > target:
            raise ValueError(f"Drop {drop} is past the target {target}")

        key = (rock_index, jet_index, fingerprint)
        previous = self._seen.get(key)
        if previous is None:
            self._seen[key] = (drop, height)
            return None

        prev_drop, prev_height = previous
        cycle_length = drop - prev_drop
        remaining = target - drop
        repeats, leftover = divmod(remaining, cycle_length)

        self._jump = CycleJump(
            first_drop=prev_drop,
            repeat_drop=drop,
            height_gain=height - prev_height,
            repeats=repeats,
            leftover=leftover
        )
        # Nothing is needed once the jump is known
        self._seen.clear()
        return self._jump

    def reset(self, enabled: Optional[bool] = None) -> None:
        if enabled is not None:
            self._enabled = enabled
        self._seen = {}
        self._jump = None
