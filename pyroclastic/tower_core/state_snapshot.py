"""
State Snapshot
==============

Summarizes the tower state, including a per-column height map, for reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from pyroclastic.tower_core.chamber import Chamber


@dataclass
class TowerSnapshot:
    """Tower state after some number of drops."""
    drops: int
    height: int                 # Tower height including skipped cycles
    chamber_height: int         # Height of the simulated chamber alone
    height_bonus: int           # Height contributed by skipped cycles
    rock_index: int             # Next rock in the rock cycle
    jet_index: int              # Next jet in the pattern
    cell_count: int             # Cells currently stored in the chamber

    height_map: np.ndarray      # (width,) int64, column tops relative to the floor
    surface_roughness: float    # Std dev of non-zero column heights
    surface_depth: int          # Highest minus lowest column top

    def to_dict(self) -> Dict[str, Any]:
        """Plain-Python representation for JSON output."""
        return {
            "drops": self.drops,
            "height": self.height,
            "chamber_height": self.chamber_height,
            "height_bonus": self.height_bonus,
            "rock_index": self.rock_index,
            "jet_index": self.jet_index,
            "cell_count": self.cell_count,
            "height_map": [int(h) for h in self.height_map],
            "surface_roughness": self.surface_roughness,
            "surface_depth": self.surface_depth,
        }


class SnapshotBuilder:
    """Builds TowerSnapshot instances from a chamber and run counters."""

    def build(
        self,
        chamber: Chamber,
        drops: int,
        height_bonus: int,
        rock_index: int,
        jet_index: int
    ) -> TowerSnapshot:
        height_map = chamber.height_map()
        return TowerSnapshot(
            drops=drops,
            height=chamber.height + height_bonus,
            chamber_height=chamber.height,
            height_bonus=height_bonus,
            rock_index=rock_index,
            jet_index=jet_index,
            cell_count=chamber.cell_count,
            height_map=height_map,
            surface_roughness=self._compute_surface_roughness(height_map),
            surface_depth=int(height_map.max() - height_map.min()),
        )

    def _compute_surface_roughness(self, height_map: np.ndarray) -> float:
        """Compute standard deviation of non-zero heights."""
        non_zero = height_map[height_map > 0]
        if len(non_zero) < 2:
            return 0.0
        return float(np.std(non_zero))
