"""
Jets
====

Parses the jet pattern and replays it cyclically, one push per sub-step.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

from pyroclastic.tower_core.config_loader import TowerConfig, get_config


class JetDirection(IntEnum):
    """Lateral push; the value is the x displacement."""
    LEFT = -1
    RIGHT = 1


class JetPatternError(ValueError):
    """Raised when jet input contains a character that is not a jet symbol."""

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


def parse_jet_pattern(
    text: str,
    config: Optional[TowerConfig] = None
) -> List[JetDirection]:
    """
    Parse a line of jet symbols.

    Surrounding whitespace (such as a trailing newline) is ignored.

    Args:
        text: Raw pattern text, e.g. ">>><<><>".
        config: Tower configuration. Uses default if None.

    Returns:
        List of jet directions in input order.

    Raises:
        JetPatternError: On an unknown symbol or an empty pattern.
    """
    if config is None:
        config = get_config()

    symbols = {
        config.jets.left: JetDirection.LEFT,
        config.jets.right: JetDirection.RIGHT,
    }

    pattern = []
    for position, char in enumerate(text.strip()):
        direction = symbols.get(char)
        if direction is None:
            raise JetPatternError(
                f"Unrecognized jet symbol {char!r} at position {position}",
                position=position
            )
        pattern.append(direction)

    if not pattern:
        raise JetPatternError("Jet pattern is empty")

    return pattern


class JetSequence:
    """
    Endless cyclic replay of a jet pattern.

    The index of the next token is exposed so it can take part in the
    cycle-detection key.
    """

    def __init__(self, pattern: Sequence[JetDirection]):
        if len(pattern) == 0:
            raise ValueError("JetSequence requires a non-empty pattern")
        self._pattern: Tuple[JetDirection, ...] = tuple(pattern)
        self._index: int = 0

    def __len__(self) -> int:
        return len(self._pattern)

    @property
    def pattern(self) -> Tuple[JetDirection, ...]:
        return self._pattern

    @property
    def index(self) -> int:
        """Position (mod pattern length) of the next jet to be consumed."""
        return self._index

    def advance(self) -> JetDirection:
        """Consume and return the next jet."""
        direction = self._pattern[self._index]
        self._index = (self._index + 1) % len(self._pattern)
        return direction

    def reset(self) -> None:
        self._index = 0
