"""
Constraint propagation for Wave Function Collapse.

After a cell's possibility set shrinks, every neighbor may have lost the
tiles that supported some of its own options. The engine walks outwards
from the changed cells with a FIFO worklist, intersecting each neighbor
with what the current cell still allows, until nothing changes
(fixpoint) or a cell runs out of options (contradiction).

Termination: sets only shrink, so each cell can be re-queued at most
once per lost tile. Total work is O(cells * tiles * directions).
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from ..core.errors import Contradiction
from ..logging_config import log_propagation
from .grid import WaveGrid
from .ruleset import TileRuleset

logger = logging.getLogger(__name__)


class PropagationEngine:
    """
    Worklist propagation over a WaveGrid.

    Usage:
        engine = PropagationEngine(grid, ruleset)
        changed = engine.propagate(index)   # raises Contradiction
    """

    def __init__(self, grid: WaveGrid, ruleset: TileRuleset):
        self.grid = grid
        self.ruleset = ruleset
        # Stats for the last propagate() call
        self.processed = 0
        self.restrictions = 0

    def propagate(self, seeds: int | Iterable[int]) -> set[int]:
        """
        Propagate constraints from one or more changed cells.

        Multiple seeds share a single worklist, so their wavefronts merge
        naturally when they meet.

        Args:
            seeds: Index, or indices, of cells whose possibilities changed

        Returns:
            Indices of cells whose possibility sets shrank.

        Raises:
            Contradiction: A cell's possibility set became empty. The grid
                is left as it was at that instant; the caller must abort.
        """
        seeds = (seeds,) if isinstance(seeds, int) else tuple(seeds)

        grid = self.grid
        allowed_from = self.ruleset.allowed_from
        queued = bytearray(grid.size)
        queue: deque[int] = deque()
        for seed in seeds:
            if not queued[seed]:
                queue.append(seed)
                queued[seed] = 1

        changed: set[int] = set()
        self.processed = 0
        self.restrictions = 0

        while queue:
            index = queue.popleft()
            queued[index] = 0
            self.processed += 1
            current = grid.possibilities(index)

            for neighbor, direction in grid.neighbors_with_direction(index):
                allowed = allowed_from(current, direction)
                if not grid.restrict(neighbor, allowed):
                    continue

                self.restrictions += 1
                changed.add(neighbor)

                if grid.entropy(neighbor) == 0:
                    log_propagation(logger, seeds, self.processed, len(changed), failed_at=neighbor)
                    raise Contradiction(neighbor)

                if not queued[neighbor]:
                    queue.append(neighbor)
                    queued[neighbor] = 1

        log_propagation(logger, seeds, self.processed, len(changed))
        return changed
