"""Wave Function Collapse engine over a 2D grid."""

from .tile import Tile, make_bidirectional_rule
from .ruleset import TileRuleset
from .grid import WaveGrid, Cell, GridSnapshot
from .output import OutputGrid
from .propagation import PropagationEngine
from .solver import Solver, SolverState, SolveResult, StepEvent

__all__ = [
    "Tile",
    "make_bidirectional_rule",
    "TileRuleset",
    "WaveGrid",
    "Cell",
    "GridSnapshot",
    "OutputGrid",
    "PropagationEngine",
    "Solver",
    "SolverState",
    "SolveResult",
    "StepEvent",
]
