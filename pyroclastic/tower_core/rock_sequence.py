"""
Rock Sequence
=============

Deterministic, endlessly repeating order in which rock shapes fall.
"""

from __future__ import annotations

from typing import List, Optional

from pyroclastic.tower_core.config_loader import TowerConfig, get_config
from pyroclastic.tower_core.rock_catalog import RockCatalog, RockShape, get_catalog


class RockSequence:
    """
    Cyclic queue over the catalog's rock shapes.

    The sequence is an index counter taken modulo the number of shapes, so it
    never runs out and can be rewound by resetting the counter.
    """

    def __init__(
        self,
        config: Optional[TowerConfig] = None,
        catalog: Optional[RockCatalog] = None
    ):
        """
        Initialize rock sequence.

        Args:
            config: Tower configuration. Uses default if None.
            catalog: Rock catalog. Built from config if None.
        """
        if config is None:
            config = get_config()
        if catalog is None:
            catalog = get_catalog(config)

        self._catalog = catalog
        self._index: int = 0

    def __len__(self) -> int:
        """Number of shapes in one full cycle."""
        return len(self._catalog)

    @property
    def index(self) -> int:
        """Position in the cycle of the rock that will fall next."""
        return self._index

    @property
    def current_rock(self) -> RockShape:
        """The rock that will fall next."""
        return self._catalog[self._index]

    def advance(self) -> RockShape:
        """
        Advance the sequence and return the rock that was consumed.

        Returns:
            The rock shape that was current (now consumed).
        """
        consumed = self._catalog[self._index]
        self._index = (self._index + 1) % len(self._catalog)
        return consumed

    def peek(self, count: int = 2) -> List[RockShape]:
        """
        Peek at upcoming rock shapes without consuming.

        Args:
            count: Number of upcoming rocks to peek.

        Returns:
            List of upcoming rock shapes.
        """
        n = len(self._catalog)
        return [self._catalog[(self._index + i) % n] for i in range(count)]

    def reset(self) -> None:
        """Rewind to the first shape."""
        self._index = 0
