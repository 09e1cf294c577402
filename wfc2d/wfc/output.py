"""
Resolved tile assignments, one per cell.

The OutputGrid is what callers render. Entries go from UNRESOLVED to a
concrete tile ID the moment a cell collapses, so a run can be observed
while it is still in progress.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..core.constants import UNRESOLVED
from ..core.errors import IndexOutOfRange, WFCError
from ..core.types import TileId


class OutputGrid:
    """Row-major array of resolved tile IDs (or UNRESOLVED).

    Usage:
        tile = output.at(5)        # bounds-checked, raises IndexOutOfRange
        tile = output[5]           # unchecked, for hot paths
        for tile in output: ...    # row-major
    """

    def __init__(self, cols: int = 0, size: int = 0):
        self.cols = cols
        self._values: list[TileId] = [UNRESOLVED] * size

    def reset(self, cols: int, size: int):
        """Set every entry back to UNRESOLVED."""
        self.cols = cols
        self._values = [UNRESOLVED] * size

    def assign(self, index: int, tile_id: TileId):
        """Record the tile a cell collapsed to. Entries are write-once."""
        current = self._values[index]
        if current == tile_id:
            return
        if current != UNRESOLVED:
            raise WFCError(f"Cell {index} already resolved to {current}, cannot set {tile_id}")
        self._values[index] = tile_id

    def values(self) -> tuple[TileId, ...]:
        """Immutable copy of all entries."""
        return tuple(self._values)

    def restore(self, values: Iterable[TileId]):
        """Rewind to a copy from values() (backtracking only)."""
        values = list(values)
        if len(values) != len(self._values):
            raise ValueError("Output snapshot does not match grid size")
        self._values = values

    def at(self, index: int) -> TileId:
        """Bounds-checked access."""
        if not 0 <= index < len(self._values):
            raise IndexOutOfRange(index, len(self._values))
        return self._values[index]

    def __getitem__(self, index: int) -> TileId:
        """Unchecked access. Out-of-range input is undefined behavior."""
        return self._values[index]

    def is_resolved(self, index: int) -> bool:
        return self.at(index) != UNRESOLVED

    @property
    def resolved_count(self) -> int:
        return sum(1 for value in self._values if value != UNRESOLVED)

    def rows(self) -> list[list[TileId]]:
        """Materialize as a list of rows (for rendering)."""
        cols = self.cols
        if not cols:
            return []
        return [self._values[start:start + cols] for start in range(0, len(self._values), cols)]

    def __iter__(self) -> Iterator[TileId]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"OutputGrid(size={len(self._values)}, resolved={self.resolved_count})"
