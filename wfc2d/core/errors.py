"""Error taxonomy for wfc2d.

Caller errors (bad dimensions, empty rulesets, out-of-range access) are
raised straight to the caller. ``Contradiction`` is the one failure of the
algorithm itself: the solver catches it and reports a failed run.
"""

from __future__ import annotations


class WFCError(Exception):
    """Base exception for wfc2d errors."""

    pass


class InvalidDimensions(WFCError):
    """Grid has zero (or negative) rows or columns."""

    def __init__(self, rows: int, cols: int):
        super().__init__(f"Invalid grid dimensions {rows}x{cols}: both must be positive")
        self.rows = rows
        self.cols = cols


class EmptyRuleset(WFCError):
    """No tiles were supplied, or a run was requested before loading any."""

    def __init__(self, message: str = "Ruleset contains no tiles"):
        super().__init__(message)


class TooManyTiles(WFCError):
    """Ruleset does not fit in the configured bit-set capacity."""

    def __init__(self, count: int, capacity: int):
        super().__init__(f"Ruleset needs {count} tile slots, capacity is {capacity}")
        self.count = count
        self.capacity = capacity


class DuplicateTile(WFCError):
    """The same tile ID was defined twice."""

    def __init__(self, tile_id: int):
        super().__init__(f"Tile {tile_id} is defined more than once")
        self.tile_id = tile_id


class Contradiction(WFCError):
    """A cell's possibility set became empty during propagation."""

    def __init__(self, index: int):
        super().__init__(f"Contradiction at cell {index}: no tile options left")
        self.index = index


class IndexOutOfRange(WFCError, IndexError):
    """Bounds-checked access outside the grid."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Index {index} out of range for grid of {size} cells")
        self.index = index
        self.size = size


class NotInitialized(WFCError):
    """A run was requested before the grid dimensions were set."""

    def __init__(self, message: str = "Grid not initialized - call initialize() first"):
        super().__init__(message)


class SolverStateError(WFCError):
    """Operation not valid in the solver's current state."""

    pass
