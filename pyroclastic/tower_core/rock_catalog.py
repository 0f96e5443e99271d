"""
Rock Catalog
============

Provides convenient access to rock shape definitions loaded from config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Optional

from pyroclastic.tower_core.config_loader import (
    TowerConfig,
    RockShapeConfig,
    get_config
)

Cell = Tuple[int, int]


@dataclass
class RockShape:
    """
    Runtime representation of a rock shape.

    Wraps RockShapeConfig with placement helpers.
    """
    config: RockShapeConfig

    @property
    def id(self) -> int:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def offsets(self) -> Tuple[Cell, ...]:
        return self.config.offsets

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def cell_count(self) -> int:
        return len(self.config.offsets)

    def place(self, anchor_x: int, anchor_y: int) -> List[Cell]:
        """Absolute cells of this shape with its lowest-left corner at the anchor."""
        return [(anchor_x + dx, anchor_y + dy) for dx, dy in self.offsets]

    def __repr__(self) -> str:
        return f"RockShape({self.id}: {self.name})"


class RockCatalog:
    """
    Collection of all rock shapes in falling order.
    """

    def __init__(self, config: Optional[TowerConfig] = None):
        """
        Initialize catalog from tower config.

        Args:
            config: TowerConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._shapes: Tuple[RockShape, ...] = tuple(
            RockShape(rock_config) for rock_config in config.rocks
        )

    def __len__(self) -> int:
        """Total number of rock shapes."""
        return len(self._shapes)

    def __getitem__(self, rock_id: int) -> RockShape:
        """Get rock shape by ID."""
        if 0 <= rock_id < len(self._shapes):
            return self._shapes[rock_id]
        raise IndexError(f"Rock ID {rock_id} out of range [0, {len(self._shapes)})")

    def __iter__(self):
        """Iterate over all rock shapes."""
        return iter(self._shapes)

    def get_by_name(self, name: str) -> Optional[RockShape]:
        """Get rock shape by name (case-insensitive)."""
        name_lower = name.lower()
        for shape in self._shapes:
            if shape.name.lower() == name_lower:
                return shape
        return None


# Module-level singleton
_cached_catalog: Optional[RockCatalog] = None


def get_catalog(config: Optional[TowerConfig] = None) -> RockCatalog:
    """
    Get the rock catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        RockCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = RockCatalog(config)
    return _cached_catalog
