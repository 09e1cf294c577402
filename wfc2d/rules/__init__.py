"""Rule sources for the solver: the text rule format and preset tilesets."""

from .loader import parse_rules, load_rules, dump_rules
from .tilesets import create_terrain_tileset, TERRAIN_NAMES, TERRAIN_SYMBOLS

__all__ = [
    "parse_rules",
    "load_rules",
    "dump_rules",
    "create_terrain_tileset",
    "TERRAIN_NAMES",
    "TERRAIN_SYMBOLS",
]
