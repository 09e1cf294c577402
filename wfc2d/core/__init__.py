"""Core types for wfc2d.

This module contains the small building blocks shared by the solver,
the rule loader and the renderers: directions, bit-set helpers and the
error taxonomy.

Usage:
    from wfc2d.core import Direction, popcount, Contradiction
"""

from .types import Direction, TileId, Mask, DIRECTIONS
from .bitset import (
    popcount,
    iter_bits,
    lowest_bit,
    mask_of,
    has_bit,
)
from .constants import MAX_TILES, UNRESOLVED
from .errors import (
    WFCError,
    InvalidDimensions,
    EmptyRuleset,
    TooManyTiles,
    DuplicateTile,
    Contradiction,
    IndexOutOfRange,
    NotInitialized,
    SolverStateError,
)

__all__ = [
    "Direction",
    "TileId",
    "Mask",
    "DIRECTIONS",
    "popcount",
    "iter_bits",
    "lowest_bit",
    "mask_of",
    "has_bit",
    "MAX_TILES",
    "UNRESOLVED",
    "WFCError",
    "InvalidDimensions",
    "EmptyRuleset",
    "TooManyTiles",
    "DuplicateTile",
    "Contradiction",
    "IndexOutOfRange",
    "NotInitialized",
    "SolverStateError",
]
