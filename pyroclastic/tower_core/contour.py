"""
Surface Contour
===============

Traces the exposed silhouette of the tower and packs it into a bounded,
translation-invariant fingerprint.

The chamber is framed by synthetic walls and a floor so rocks, walls and
floor form one 8-connected blob. A Moore-neighbourhood walk around the
outside of that blob visits every rock cell a falling rock could ever touch;
cells sealed beneath it are unreachable and do not influence the future.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Set, Tuple

import numpy as np

from pyroclastic.tower_core.chamber import Chamber, TowerInvariantError

Cell = Tuple[int, int]

# Clockwise, starting north
MOORE_OFFSETS: Tuple[Cell, ...] = (
    (0, 1), (1, 1), (1, 0), (1, -1),
    (0, -1), (-1, -1), (-1, 0), (-1, 1),
)
_OFFSET_INDEX = {offset: i for i, offset in enumerate(MOORE_OFFSETS)}

FINGERPRINT_DTYPE = np.int64


class ContourTraceError(TowerInvariantError):
    """The contour walk did not close on its start cell."""


@dataclass(frozen=True)
class Frame:
    """
    Synthetic walls and floor enclosing the chamber.

    Walls sit at x = -1 and x = width from floor_y up to top_y; the floor
    spans 0 <= x < width at floor_y. Membership is tested arithmetically so
    the frame costs nothing to build however tall the tower is.
    """
    width: int
    floor_y: int
    top_y: int

    def __contains__(self, cell: Cell) -> bool:
        x, y = cell
        if y < self.floor_y or y > self.top_y:
            return False
        if x == -1 or x == self.width:
            return True
        return y == self.floor_y and 0 <= x < self.width

    def __len__(self) -> int:
        return 2 * (self.top_y - self.floor_y + 1) + self.width

    @property
    def start(self) -> Cell:
        """Foot of the right wall: the solid cell with max x, then min y."""
        return (self.width, self.floor_y)


def _next_contour_cell(
    is_solid: Callable[[Cell], bool],
    cell: Cell,
    backtrack: Cell
) -> Tuple[Cell, Cell]:
    """
    Scan the neighbours of a cell clockwise, starting just past the backtrack.

    Returns:
        (next boundary cell, new backtrack cell).
    """
    x, y = cell
    first = _OFFSET_INDEX.get((backtrack[0] - x, backtrack[1] - y))
    if first is None:
        raise ContourTraceError(f"Backtrack {backtrack} is not adjacent to {cell}")

    previous = backtrack
    for k in range(1, 8):
        dx, dy = MOORE_OFFSETS[(first + k) % 8]
        candidate = (x + dx, y + dy)
        if is_solid(candidate):
            return candidate, previous
        previous = candidate

    raise ContourTraceError(f"Cell {cell} has no occupied neighbours")


def trace_contour(
    is_solid: Callable[[Cell], bool],
    start: Cell,
    backtrack: Cell,
    max_steps: int
) -> Set[Cell]:
    """
    Moore-neighbour boundary walk.

    The walk ends when it re-enters the start cell from the starting
    backtrack cell.

    Args:
        is_solid: Membership test for occupied cells.
        start: Occupied cell on the outer boundary.
        backtrack: Empty neighbour of start lying outside the blob.
        max_steps: Upper bound on walk length.

    Returns:
        Every cell visited, start included.

    Raises:
        ContourTraceError: If the walk does not close within max_steps.
    """
    boundary = {start}
    current, came_from = start, backtrack

    for _ in range(max_steps):
        current, came_from = _next_contour_cell(is_solid, current, came_from)
        if current == start and came_from == backtrack:
            return boundary
        boundary.add(current)

    raise ContourTraceError(
        f"Contour from {start} did not close after {max_steps} steps"
    )


def trace_surface(chamber: Chamber) -> Set[Cell]:
    """
    Rock cells on the outer contour of the chamber.

    The floor is placed one row under the lowest occupied cell. For an
    unpruned chamber that is the real floor; for a pruned one everything
    below the kept cells is sealed anyway.

    The walk reads the chamber through membership tests only, so its cost
    follows the contour length rather than the number of stored cells.

    Returns:
        Absolute coordinates of exposed rock cells; empty for an empty chamber.
    """
    if chamber.is_empty:
        return set()

    frame = Frame(chamber.width, chamber.lowest_y - 1, chamber.height - 1)

    def is_solid(cell: Cell) -> bool:
        return cell in chamber or cell in frame

    start = frame.start
    backtrack = (start[0] + 1, start[1])

    max_steps = 8 * (chamber.cell_count + len(frame)) + 8
    boundary = trace_contour(is_solid, start, backtrack, max_steps)

    return {cell for cell in boundary if cell not in frame}


@dataclass(frozen=True)
class SurfaceFingerprint:
    """
    Normalized surface contour.

    Holds the raw bytes of an (N, 2) array of (x, y) cells shifted so the
    minimum x and y are zero and sorted by (y, x). Equality is byte equality.
    """
    data: bytes

    @classmethod
    def from_cells(cls, cells: Iterable[Cell]) -> "SurfaceFingerprint":
        """Normalize and pack a set of absolute cells."""
        cells = list(cells)
        if not cells:
            return cls(b"")

        arr = np.array(cells, dtype=FINGERPRINT_DTYPE)
        arr -= arr.min(axis=0)
        order = np.lexsort((arr[:, 0], arr[:, 1]))
        return cls(np.ascontiguousarray(arr[order]).tobytes())

    def to_array(self) -> np.ndarray:
        """Cells as an (N, 2) array."""
        return np.frombuffer(self.data, dtype=FINGERPRINT_DTYPE).reshape(-1, 2)

    @property
    def cells(self) -> Tuple[Cell, ...]:
        return tuple((int(x), int(y)) for x, y in self.to_array())

    @property
    def cell_count(self) -> int:
        return len(self.data) // (2 * np.dtype(FINGERPRINT_DTYPE).itemsize)

    @property
    def depth(self) -> int:
        """Rows spanned by the surface."""
        if not self.data:
            return 0
        return int(self.to_array()[:, 1].max()) + 1


def compute_fingerprint(chamber: Chamber) -> SurfaceFingerprint:
    """Fingerprint of the chamber's exposed surface."""
    return SurfaceFingerprint.from_cells(trace_surface(chamber))
