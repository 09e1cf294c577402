"""
Terrain tileset for Wave Function Collapse.

Defines 7 terrain types with adjacency rules that create natural gradients:
    water -> coast -> sand -> grass -> forest/hill -> stone

By only allowing certain tiles to neighbor each other, we get emergent
large-scale structure (coastlines, mountain ranges, forests) from purely
local rules.
"""

from ..wfc.tile import Tile, make_bidirectional_rule

WATER, COAST, SAND, GRASS, FOREST, HILL, STONE = range(7)

TERRAIN_NAMES: dict[int, str] = {
    WATER: "water",
    COAST: "coast",
    SAND: "sand",
    GRASS: "grass",
    FOREST: "forest",
    HILL: "hill",
    STONE: "stone",
}

# (symbol, rich color) per tile, used by the renderers
TERRAIN_SYMBOLS: dict[int, tuple[str, str]] = {
    WATER: ("≈", "blue"),
    COAST: ("~", "bright_blue"),
    SAND: (":", "yellow"),
    GRASS: (".", "green"),
    FOREST: ("♣", "bright_green"),
    HILL: ("^", "rgb(160,64,0)"),
    STONE: ("▲", "bright_black"),
}


def create_terrain_tileset() -> list[Tile]:
    """
    Create the terrain tileset with all adjacency rules defined.

    Returns tiles ordered by ID (0 = water ... 6 = stone).
    """
    tiles = {tile_id: Tile(id=tile_id) for tile_id in TERRAIN_NAMES}

    # Adjacency graph:
    #
    #   water <-> coast <-> sand <-> grass <-> forest
    #                                  |        |
    #                                  +-----> hill <-> stone
    #
    # Every tile may also sit next to itself.
    for tile_id in tiles:
        make_bidirectional_rule(tiles, tile_id, tile_id)

    # Water gradient
    make_bidirectional_rule(tiles, WATER, COAST)
    make_bidirectional_rule(tiles, COAST, SAND)
    make_bidirectional_rule(tiles, SAND, GRASS)

    # Land: grass is the hub
    make_bidirectional_rule(tiles, GRASS, FOREST)
    make_bidirectional_rule(tiles, GRASS, HILL)
    make_bidirectional_rule(tiles, FOREST, HILL)

    # Elevation
    make_bidirectional_rule(tiles, HILL, STONE)

    return [tiles[tile_id] for tile_id in sorted(tiles)]
