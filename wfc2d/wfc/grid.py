"""
Grid representation for Wave Function Collapse.

The WaveGrid is the "wave function" - a flat, row-major array of cells
where each cell is in superposition (a bit set of admissible tiles) until
it collapses to a single definite tile.

Cells are addressed by index = row * cols + col. Possibility sets only
ever lose bits between initialize() and the next initialize()/restore().
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ..core.bitset import lowest_bit, popcount
from ..core.errors import IndexOutOfRange, InvalidDimensions
from ..core.types import DIRECTIONS, Direction, Mask, TileId


@dataclass(frozen=True)
class Cell:
    """
    Read-only view of a single grid cell.

    Before collapse: possibilities holds every tile still admissible.
    After collapse: possibilities holds exactly one tile, collapsed is True.

    The "entropy" of a cell is how uncertain we are about it: the number
    of tiles left. 0 means contradiction, 1 means ready to finalize.
    """
    index: int
    row: int
    col: int
    possibilities: Mask
    collapsed: bool

    @property
    def entropy(self) -> int:
        return popcount(self.possibilities)

    @property
    def tile_id(self) -> TileId | None:
        """The committed tile ID, or None if not yet collapsed."""
        if self.collapsed:
            return lowest_bit(self.possibilities)
        return None


@dataclass(frozen=True)
class GridSnapshot:
    """Immutable copy of a WaveGrid's mutable state, for backtracking."""
    possibilities: tuple[Mask, ...]
    collapsed: bytes


class WaveGrid:
    """
    The 2D grid of cells representing the wave function.

    Initially all cells can be any tile (maximum superposition).
    As the solver runs, cells collapse and constrain their neighbors
    until every cell holds exactly one tile.
    """

    def __init__(self):
        self.rows = 0
        self.cols = 0
        self.universe: Mask = 0
        self._possibilities: list[Mask] = []
        self._entropy: list[int] = []
        self._collapsed = bytearray()
        self._uncollapsed = 0

    def initialize(self, rows: int, cols: int, universe: Mask):
        """
        Reset the grid to maximum superposition.

        Args:
            rows: Number of rows (height)
            cols: Number of columns (width)
            universe: Mask of every tile in the loaded ruleset

        Raises:
            InvalidDimensions: If rows or cols is not positive. The grid
                is left untouched in that case.
        """
        if rows <= 0 or cols <= 0:
            raise InvalidDimensions(rows, cols)

        size = rows * cols
        self.rows = rows
        self.cols = cols
        self.universe = universe
        self._possibilities = [universe] * size
        self._entropy = [popcount(universe)] * size
        self._collapsed = bytearray(size)
        self._uncollapsed = size

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return len(self._possibilities)

    def __len__(self) -> int:
        return len(self._possibilities)

    def _check(self, index: int):
        if not 0 <= index < len(self._possibilities):
            raise IndexOutOfRange(index, len(self._possibilities))

    def index_of(self, row: int, col: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexOutOfRange(row * self.cols + col, self.size)
        return row * self.cols + col

    def position_of(self, index: int) -> tuple[int, int]:
        """(row, col) of a cell index."""
        self._check(index)
        return divmod(index, self.cols)

    def neighbors_with_direction(self, index: int) -> Iterator[tuple[int, Direction]]:
        """
        Yield all in-bounds neighbors of a cell with their directions.

        Direction is FROM the input cell TO the neighbor, in the fixed
        order UP, DOWN, LEFT, RIGHT.
        """
        cols = self.cols
        row, col = divmod(index, cols)
        for direction in DIRECTIONS:
            d_row, d_col = direction.offset
            n_row = row + d_row
            n_col = col + d_col
            if 0 <= n_row < self.rows and 0 <= n_col < cols:
                yield n_row * cols + n_col, direction

    def neighbors_of(self, index: int) -> list[int]:
        """Indices of the in-bounds neighbors of a cell, UP/DOWN/LEFT/RIGHT."""
        self._check(index)
        return [neighbor for neighbor, _ in self.neighbors_with_direction(index)]

    # -------------------------------------------------------------------------
    # Cell state
    # -------------------------------------------------------------------------

    def possibilities(self, index: int) -> Mask:
        return self._possibilities[index]

    def entropy(self, index: int) -> int:
        return self._entropy[index]

    def is_collapsed(self, index: int) -> bool:
        return bool(self._collapsed[index])

    def cell(self, index: int) -> Cell:
        """Get a read-only view of the cell at index."""
        self._check(index)
        row, col = divmod(index, self.cols)
        return Cell(
            index=index,
            row=row,
            col=col,
            possibilities=self._possibilities[index],
            collapsed=bool(self._collapsed[index]),
        )

    def cells(self) -> Iterator[Cell]:
        """Iterate over all cells in row-major order."""
        for index in range(len(self._possibilities)):
            yield self.cell(index)

    def restrict(self, index: int, allowed: Mask) -> bool:
        """
        Intersect a cell's possibilities with allowed.

        Returns True if the cell changed (lost possibilities). The cell may
        end up empty; detecting that is the caller's job.
        """
        old = self._possibilities[index]
        new = old & allowed
        if new == old:
            return False
        self._possibilities[index] = new
        self._entropy[index] = popcount(new)
        return True

    def mark_collapsed(self, index: int, tile_id: TileId):
        """Commit a cell to tile_id. The tile must still be possible."""
        if not self._possibilities[index] >> tile_id & 1:
            raise ValueError(f"Tile {tile_id} is not possible at cell {index}")
        self._possibilities[index] = 1 << tile_id
        self._entropy[index] = 1
        if not self._collapsed[index]:
            self._collapsed[index] = 1
            self._uncollapsed -= 1

    @property
    def uncollapsed_count(self) -> int:
        return self._uncollapsed

    def is_complete(self) -> bool:
        """Check if all cells have collapsed."""
        return self._uncollapsed == 0

    def min_entropy_cells(self) -> list[int]:
        """
        Find the uncollapsed cells with minimum entropy > 0.

        Returns the tied indices in ascending order (empty if none).
        Cells with entropy 0 are skipped: they are contradictions and
        should already have been reported by propagation.
        """
        best = None
        candidates: list[int] = []
        entropy = self._entropy
        collapsed = self._collapsed

        for index in range(len(entropy)):
            if collapsed[index]:
                continue
            value = entropy[index]
            if value == 0:
                continue
            if best is None or value < best:
                best = value
                candidates = [index]
            elif value == best:
                candidates.append(index)

        return candidates

    # -------------------------------------------------------------------------
    # Backtracking
    # -------------------------------------------------------------------------

    def snapshot(self) -> GridSnapshot:
        """Capture current state for backtracking."""
        return GridSnapshot(
            possibilities=tuple(self._possibilities),
            collapsed=bytes(self._collapsed),
        )

    def restore(self, snapshot: GridSnapshot):
        """Rewind to a snapshot taken from this grid."""
        if len(snapshot.possibilities) != len(self._possibilities):
            raise ValueError("Snapshot does not match grid size")
        self._possibilities = list(snapshot.possibilities)
        self._entropy = [popcount(mask) for mask in self._possibilities]
        self._collapsed = bytearray(snapshot.collapsed)
        self._uncollapsed = self._collapsed.count(0)
