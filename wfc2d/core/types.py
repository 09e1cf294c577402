"""Foundational types for wfc2d.

This module defines the core types used throughout the system:
- Direction: Cardinal directions in grid (row, col) space
- TileId / Mask: Aliases for tile identifiers and possibility bit sets
"""

from __future__ import annotations

from enum import Enum
from typing import TypeAlias

# A tile is identified by a small non-negative integer.
TileId: TypeAlias = int

# A set of tile IDs packed into an int: bit n set <=> tile n is included.
Mask: TypeAlias = int


class Direction(Enum):
    """Cardinal directions for adjacency rules.

    The declaration order is the fixed neighbor order used everywhere:
    UP, DOWN, LEFT, RIGHT. The value doubles as the slot index used by
    the rule file format and by precomputed per-direction tables.
    """

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def offset(self) -> tuple[int, int]:
        """Get the (d_row, d_col) offset for this direction.

        Coordinate system: row grows downwards, col grows to the right.
        """
        return _DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction."""
        return _DIRECTION_OPPOSITES[self]

    @property
    def key(self) -> str:
        """Lowercase name as used in rule files ("up", "down", ...)."""
        return self.name.lower()

    @classmethod
    def from_key(cls, key: str) -> Direction:
        """Parse a rule-file key. Raises KeyError for unknown keys."""
        return _DIRECTION_KEYS[key.strip().lower()]


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_DIRECTION_KEYS: dict[str, Direction] = {d.key: d for d in Direction}

# Fixed iteration order, as a tuple for cheap repeated loops
DIRECTIONS: tuple[Direction, ...] = tuple(Direction)
