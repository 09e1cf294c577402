"""wfc2d - Wave Function Collapse over a 2D grid."""

__version__ = "0.1.0"

from .config import CollapseMode, SolverConfig, load_config
from .core import (
    Direction,
    UNRESOLVED,
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
from .wfc import (
    Tile,
    make_bidirectional_rule,
    TileRuleset,
    WaveGrid,
    OutputGrid,
    PropagationEngine,
    Solver,
    SolverState,
    SolveResult,
    StepEvent,
)
from .rules import parse_rules, load_rules, dump_rules, create_terrain_tileset

__all__ = [
    "__version__",
    "CollapseMode",
    "SolverConfig",
    "load_config",
    "Direction",
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
    "Tile",
    "make_bidirectional_rule",
    "TileRuleset",
    "WaveGrid",
    "OutputGrid",
    "PropagationEngine",
    "Solver",
    "SolverState",
    "SolveResult",
    "StepEvent",
    "parse_rules",
    "load_rules",
    "dump_rules",
    "create_terrain_tileset",
]
