"""
Chamber
=======

Occupancy store for rocks at rest.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, Optional, Set, Tuple

import numpy as np

Cell = Tuple[int, int]


class TowerInvariantError(RuntimeError):
    """A broken internal invariant; indicates a bug, never recovered from."""


class Chamber:
    """
    Set of occupied cells between two walls, above a floor at y = -1.

    Cells are only ever added by commit(). prune_below() may discard rows
    sealed beneath the exposed surface; it never changes the height.
    """

    def __init__(self, width: int):
        """
        Initialize an empty chamber.

        Args:
            width: Number of columns between the walls.
        """
        if width < 1:
            raise ValueError(f"Chamber width must be positive, got {width}")
        self._width = width
        self._cells: Set[Cell] = set()
        self._height: int = 0
        self._lowest_y: Optional[int] = None

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        """1 + highest occupied row, or 0 when empty."""
        return self._height

    @property
    def cells(self) -> AbstractSet[Cell]:
        """Occupied cells (read-only view)."""
        return frozenset(self._cells)

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    @property
    def is_empty(self) -> bool:
        return not self._cells

    @property
    def lowest_y(self) -> Optional[int]:
        """Lowest occupied row, or None when empty."""
        return self._lowest_y

    def __contains__(self, cell: Cell) -> bool:
        return cell in self._cells

    def commit(self, cells: Iterable[Cell]) -> None:
        """
        Merge the cells of a rock that came to rest.

        Raises:
            TowerInvariantError: If a cell is outside the walls, below the
                floor, or already occupied.
        """
        cells = list(cells)
        for x, y in cells:
            if not 0 <= x < self._width or y < 0:
                raise TowerInvariantError(f"Cell {(x, y)} is outside the chamber")
            if (x, y) in self._cells:
                raise TowerInvariantError(f"Cell {(x, y)} is already occupied")

        self._cells.update(cells)
        top = max(y for _, y in cells) + 1
        if top > self._height:
            self._height = top
        bottom = min(y for _, y in cells)
        if self._lowest_y is None or bottom < self._lowest_y:
            self._lowest_y = bottom

    def prune_below(self, min_y: int) -> int:
        """
        Discard every cell below a row.

        Only safe for rows sealed off beneath the exposed surface.

        Args:
            min_y: Lowest row to keep.

        Returns:
            Number of cells discarded.
        """
        if min_y >= self._height:
            raise TowerInvariantError(
                f"Pruning below row {min_y} would remove the top of the tower"
            )

        kept = {cell for cell in self._cells if cell[1] >= min_y}
        removed = len(self._cells) - len(kept)
        self._cells = kept
        if self._lowest_y is not None and self._lowest_y < min_y:
            self._lowest_y = min((y for _, y in kept), default=None)
        return removed

    def height_map(self) -> np.ndarray:
        """
        Per-column height of the highest occupied cell.

        Returns:
            Array of shape (width,), 0 for empty columns.
        """
        height_map = np.zeros(self._width, dtype=np.int64)
        for x, y in self._cells:
            if y + 1 > height_map[x]:
                height_map[x] = y + 1
        return height_map

    def clear(self) -> None:
        self._cells = set()
        self._height = 0
        self._lowest_y = None
