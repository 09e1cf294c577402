"""
Wave Function Collapse solver.

This is the heart of WFC - the loop that observes (collapses) cells
and propagates constraints until the entire grid is determined.

The algorithm:
1. Find the uncollapsed cell with lowest entropy (ties: lowest index)
2. Collapse it to one tile (lowest ID, random, or best-supported)
3. Propagate: update neighbors based on adjacency rules
4. Repeat until complete or contradiction

Without backtracking every iteration collapses exactly one new cell, so
an R x C grid finishes in at most R * C iterations.
"""

from __future__ import annotations

import logging
import random
import time
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, auto

from pydantic import BaseModel, ConfigDict

from ..config import CollapseMode, SolverConfig
from ..core.bitset import iter_bits, lowest_bit
from ..core.constants import DEFAULT_SEED
from ..core.errors import (
    Contradiction,
    EmptyRuleset,
    InvalidDimensions,
    NotInitialized,
    SolverStateError,
    TooManyTiles,
)
from ..core.types import TileId
from ..logging_config import (
    log_backtrack,
    log_contradiction,
    log_ruleset,
    log_run,
    log_step,
)
from .grid import GridSnapshot, WaveGrid
from .output import OutputGrid
from .propagation import PropagationEngine
from .ruleset import TileRuleset
from .tile import Tile

logger = logging.getLogger(__name__)


class SolverState(Enum):
    """The current state of the WFC solver."""
    UNINITIALIZED = auto()  # Missing grid dimensions or ruleset
    READY = auto()          # Fresh grid, nothing collapsed yet
    RUNNING = auto()        # Still solving, more steps needed
    SOLVED = auto()         # All cells collapsed successfully
    FAILED = auto()         # Hit an impossible state (some cell has 0 possibilities)


@dataclass(frozen=True)
class StepEvent:
    """What happened in one solver iteration (for observers/visualization).

    contradiction_index is set when the collapse emptied a cell; changed
    is then empty.
    """
    iteration: int
    index: int
    tile_id: TileId
    changed: frozenset[int]
    contradiction_index: int | None = None


@dataclass(frozen=True)
class _Checkpoint:
    """State before a collapse, plus the choice that was made from it."""
    grid: GridSnapshot
    output: tuple[TileId, ...]
    index: int
    tile_id: TileId


class SolveResult(BaseModel):
    """Outcome of Solver.run().

    A contradiction is a normal outcome, not an exception: the result
    carries the index of the cell that ran out of options.
    """

    model_config = ConfigDict(frozen=True)

    state: SolverState
    iterations: int = 0
    backtracks: int = 0
    contradiction_index: int | None = None
    message: str = ""

    @property
    def solved(self) -> bool:
        return self.state == SolverState.SOLVED

    @classmethod
    def ok(cls, iterations: int, backtracks: int = 0) -> SolveResult:
        """Create a successful result."""
        return cls(
            state=SolverState.SOLVED,
            iterations=iterations,
            backtracks=backtracks,
            message="Solved",
        )

    @classmethod
    def fail(
        cls,
        contradiction_index: int | None,
        iterations: int,
        backtracks: int = 0,
        message: str = "",
    ) -> SolveResult:
        """Create a failed result."""
        return cls(
            state=SolverState.FAILED,
            iterations=iterations,
            backtracks=backtracks,
            contradiction_index=contradiction_index,
            message=message or f"Contradiction at cell {contradiction_index}",
        )


class Solver:
    """
    The WFC algorithm implementation.

    Usage:
        solver = Solver()
        solver.load_ruleset(tiles)
        solver.initialize(rows, cols)
        result = solver.run()            # deterministic
        result = solver.run(seed=42)     # reproducible random choices

    Or step by step (e.g. for visualization):
        while solver.step() == SolverState.RUNNING:
            draw(solver.output)

    The solver owns its WaveGrid and OutputGrid exclusively. Only the
    ruleset may be shared between solvers.
    """

    def __init__(self, config: SolverConfig | None = None):
        """
        Initialize the solver.

        Args:
            config: Solver settings (defaults: deterministic, no backtracking)
        """
        self.config = config or SolverConfig()
        self.grid = WaveGrid()
        self.output = OutputGrid()
        self.state = SolverState.UNINITIALIZED

        self._ruleset: TileRuleset | None = None
        self._engine: PropagationEngine | None = None
        self._rows = 0
        self._cols = 0

        self.iterations = 0
        self.backtracks = 0
        self.contradiction_index: int | None = None

        # Track the last collapse and the cells it narrowed (for visualization/debugging)
        self.last_collapsed: int | None = None
        self.last_propagated: set[int] = set()

        self._rng: random.Random | None = None
        self._on_step: Callable[[StepEvent], None] | None = None
        self._checkpoints: deque[_Checkpoint] = deque(maxlen=self.config.max_snapshots)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def ruleset(self) -> TileRuleset | None:
        return self._ruleset

    @property
    def collapsed_count(self) -> int:
        """Number of cells that have been collapsed."""
        return self.grid.size - self.grid.uncollapsed_count

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def load_ruleset(self, tiles: TileRuleset | Iterable[Tile]) -> TileRuleset:
        """
        Load the tiles the grid is solved over.

        Args:
            tiles: A prepared TileRuleset, or tiles to build one from

        Returns:
            The ruleset in use

        Raises:
            EmptyRuleset: No tiles supplied
            TooManyTiles: Tiles exceed config.max_tiles
        """
        if isinstance(tiles, TileRuleset):
            ruleset = tiles
            if ruleset.tile_ids[-1] >= self.config.max_tiles:
                raise TooManyTiles(ruleset.tile_ids[-1] + 1, self.config.max_tiles)
        else:
            ruleset = TileRuleset.from_tiles(tiles, max_tiles=self.config.max_tiles)

        self._ruleset = ruleset
        self._engine = PropagationEngine(self.grid, ruleset)
        log_ruleset(logger, ruleset.tile_count, len(ruleset.asymmetries()))

        if self._rows:
            # Cell universes must match the new ruleset
            self._reset()
        return ruleset

    def initialize(self, rows: int, cols: int):
        """
        Set grid dimensions and reset every cell to full superposition.

        Safe to call again to start a fresh solve.

        Raises:
            InvalidDimensions: rows or cols is not positive (no state changes)
        """
        if rows <= 0 or cols <= 0:
            raise InvalidDimensions(rows, cols)
        self._rows = rows
        self._cols = cols
        self._reset()

    def _reset(self):
        universe = self._ruleset.universe if self._ruleset is not None else 0
        self.grid.initialize(self._rows, self._cols, universe)
        self.output.reset(self._cols, self._rows * self._cols)
        self.iterations = 0
        self.backtracks = 0
        self.contradiction_index = None
        self.last_collapsed = None
        self.last_propagated = set()
        self._checkpoints.clear()
        self.state = SolverState.READY if self._ruleset is not None else SolverState.UNINITIALIZED
        logger.debug(f"Grid reset | {self._rows}x{self._cols} | state={self.state.name}")

    # -------------------------------------------------------------------------
    # Running
    # -------------------------------------------------------------------------

    def start(self, seed: int | None = None, rng: random.Random | None = None):
        """
        Prepare a run: pick the random source and enter RUNNING.

        A finished run (SOLVED/FAILED) is reset first. run() calls this;
        call it directly only when driving the solver with step().

        Args:
            seed: Builds random.Random(seed) when no rng is given
            rng: Explicit random source (wins over seed)
        """
        if self._ruleset is None:
            raise EmptyRuleset("No ruleset loaded - call load_ruleset() first")
        if not self._rows:
            raise NotInitialized()

        if self.state in (SolverState.SOLVED, SolverState.FAILED):
            self._reset()

        if rng is not None:
            self._rng = rng
        elif seed is not None:
            self._rng = random.Random(seed)
        else:
            self._rng = None

        if self.state == SolverState.READY:
            self.state = SolverState.RUNNING

    def run(
        self,
        seed: int | None = None,
        rng: random.Random | None = None,
        on_step: Callable[[StepEvent], None] | None = None,
    ) -> SolveResult:
        """
        Run the solver to completion.

        Args:
            seed: Seed for reproducible random tie-breaks and tile choices
            rng: Explicit random source (wins over seed)
            on_step: Called with a StepEvent after every iteration

        Returns:
            SolveResult: SOLVED, or FAILED with the contradiction index

        Raises:
            EmptyRuleset: No ruleset loaded
            NotInitialized: initialize() was never called
        """
        self.start(seed=seed, rng=rng)
        self._on_step = on_step
        started = time.perf_counter()
        log_run(logger, "START", self._rows, self._cols, self.iterations,
                details=f"mode={self.config.collapse_mode.value} seeded={self._rng is not None}")

        try:
            state = self.state
            while state == SolverState.RUNNING:
                state = self.step()
        finally:
            self._on_step = None

        duration_ms = int((time.perf_counter() - started) * 1000)
        log_run(logger, state.name, self._rows, self._cols, self.iterations, duration_ms,
                details=f"backtracks={self.backtracks}")

        if state == SolverState.SOLVED:
            return SolveResult.ok(self.iterations, self.backtracks)
        return SolveResult.fail(self.contradiction_index, self.iterations, self.backtracks)

    def step(self) -> SolverState:
        """
        Perform one iteration: select a cell, collapse it, propagate.

        Returns the solver state after this step.

        Raises:
            SolverStateError: Solver is not initialized or already finished
        """
        if self.state == SolverState.UNINITIALIZED:
            raise SolverStateError("Solver needs a ruleset and grid dimensions before stepping")
        if self.state in (SolverState.SOLVED, SolverState.FAILED):
            raise SolverStateError(
                f"Run already finished ({self.state.name}) - call initialize() or run() to start over"
            )
        if self.state == SolverState.READY:
            self.state = SolverState.RUNNING

        if self.grid.is_complete():
            self.state = SolverState.SOLVED
            return self.state

        # 1. Select
        index = self.select_cell()
        if index is None:
            # Only empty cells are left uncollapsed; propagation should have
            # reported them already.
            empty = next(i for i in range(self.grid.size) if not self.grid.is_collapsed(i))
            logger.error(f"No selectable cell but cell {empty} is uncollapsed and empty")
            return self._fail(empty)

        # 2. Collapse
        tile_id = self._choose_tile(index)
        if self.config.max_backtracks:
            self._checkpoints.append(_Checkpoint(
                grid=self.grid.snapshot(),
                output=self.output.values(),
                index=index,
                tile_id=tile_id,
            ))
        self._collapse(index, tile_id)
        self.iterations += 1

        # 3. Propagate
        try:
            self.last_propagated = self._engine.propagate(index)
        except Contradiction as exc:
            self.last_propagated = set()
            self._emit_step(index, tile_id, contradiction_index=exc.index)
            return self._handle_contradiction(exc.index)

        self._emit_step(index, tile_id)

        every = self.config.log_progress_every
        if every and self.iterations % every == 0:
            logger.info(f"Progress | {self.collapsed_count}/{self.grid.size} cells collapsed")

        # 4. Check termination
        if self.grid.is_complete():
            self.state = SolverState.SOLVED
        return self.state

    def select_cell(self) -> int | None:
        """
        Index of the next cell to collapse, or None if no cell qualifies.

        Picks the uncollapsed cell with the lowest entropy above zero. Ties
        go to the lowest index, or to a random pick when the run has a
        random source.
        """
        candidates = self.grid.min_entropy_cells()
        if not candidates:
            return None
        if self._rng is not None and len(candidates) > 1:
            return self._rng.choice(candidates)
        return candidates[0]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _choose_tile(self, index: int) -> TileId:
        """Pick the tile a cell collapses to, according to collapse_mode."""
        mask = self.grid.possibilities(index)
        mode = self.config.collapse_mode

        if mode == CollapseMode.SUPPORTED:
            return self._best_supported(index, mask)
        if mode == CollapseMode.LOWEST:
            return lowest_bit(mask)
        if mode == CollapseMode.RANDOM:
            if self._rng is None:
                self._rng = random.Random(DEFAULT_SEED)
            return self._rng.choice(list(iter_bits(mask)))

        # AUTO
        if self._rng is None:
            return lowest_bit(mask)
        return self._rng.choice(list(iter_bits(mask)))

    def _best_supported(self, index: int, mask: int) -> TileId:
        """
        Tile that keeps the most options alive around the cell.

        Score = sum over neighbors of how many of the neighbor's remaining
        tiles stay compatible. Ties go to the lowest tile ID.
        """
        neighbors = list(self.grid.neighbors_with_direction(index))
        best_tile = lowest_bit(mask)
        best_score = -1
        for tile_id in iter_bits(mask):
            score = sum(
                self._ruleset.support(tile_id, direction, self.grid.possibilities(neighbor))
                for neighbor, direction in neighbors
            )
            if score > best_score:
                best_tile = tile_id
                best_score = score
        return best_tile

    def _emit_step(self, index: int, tile_id: TileId, contradiction_index: int | None = None):
        if self._on_step is not None:
            self._on_step(StepEvent(
                iteration=self.iterations,
                index=index,
                tile_id=tile_id,
                changed=frozenset(self.last_propagated),
                contradiction_index=contradiction_index,
            ))

    def _collapse(self, index: int, tile_id: TileId):
        self.grid.mark_collapsed(index, tile_id)
        self.output.assign(index, tile_id)
        self.last_collapsed = index
        log_step(logger, self.iterations + 1, index, tile_id)

    def _handle_contradiction(self, index: int) -> SolverState:
        """Handle a contradiction by backtracking or giving up."""
        self.contradiction_index = index
        log_contradiction(logger, index, self.iterations)

        limit = self.config.max_backtracks
        while limit and self._checkpoints and self.backtracks < limit:
            checkpoint = self._checkpoints.pop()
            self.grid.restore(checkpoint.grid)
            self.output.restore(checkpoint.output)
            self.backtracks += 1
            log_backtrack(logger, checkpoint.index, checkpoint.tile_id, self.backtracks, limit)

            # The choice made from this state failed: rule it out and retry.
            self.grid.restrict(checkpoint.index, ~(1 << checkpoint.tile_id))
            if self.grid.entropy(checkpoint.index) == 0:
                # Every option at this cell failed, so this state is dead too
                self.contradiction_index = checkpoint.index
                continue
            try:
                self._engine.propagate(checkpoint.index)
            except Contradiction as exc:
                self.contradiction_index = exc.index
                continue

            self.contradiction_index = None
            return self.state

        return self._fail(self.contradiction_index)

    def _fail(self, index: int | None) -> SolverState:
        self.contradiction_index = index
        self.state = SolverState.FAILED
        if self.config.max_backtracks:
            logger.warning(
                f"Solve failed at cell {index} after {self.backtracks}/{self.config.max_backtracks} backtracks"
            )
        return self.state

    # -------------------------------------------------------------------------
    # Output access
    # -------------------------------------------------------------------------

    def output_at(self, index: int) -> TileId:
        """Resolved tile at index, or UNRESOLVED. Raises IndexOutOfRange."""
        return self.output.at(index)

    def __iter__(self) -> Iterator[TileId]:
        """Iterate over the output grid in row-major order."""
        return iter(self.output)

    def __len__(self) -> int:
        return len(self.output)
