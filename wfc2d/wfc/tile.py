"""
Tile definition for Wave Function Collapse.

A Tile is a discrete unit that can occupy a cell in the grid.
Each tile knows what other tiles can be adjacent to it in each direction,
stored as one bit mask per direction. This is the core data that drives
the constraint propagation.
"""

from dataclasses import dataclass, field

from ..core.bitset import has_bit, iter_bits
from ..core.types import Direction, Mask, TileId


@dataclass
class Tile:
    """
    A tile type that can appear in the generated output.

    Attributes:
        id: Small non-negative integer identifying this tile.
        allowed: For each direction, a bit mask of tile IDs that may sit
                 next to this tile on that side. allowed[RIGHT] having bit 3
                 set means tile 3 may be placed to the right of this tile.
    """
    id: TileId
    allowed: dict[Direction, Mask] = field(default_factory=dict)

    def __post_init__(self):
        if self.id < 0:
            raise ValueError(f"Tile id must be non-negative, got {self.id}")
        # Own copy; missing directions allow nothing
        self.allowed = dict(self.allowed)
        for direction in Direction:
            self.allowed.setdefault(direction, 0)

    def allow_neighbor(self, direction: Direction, neighbor_id: TileId):
        """Allow a specific tile to be adjacent in the given direction."""
        self.allowed[direction] |= 1 << neighbor_id

    def allows(self, direction: Direction, neighbor_id: TileId) -> bool:
        return has_bit(self.allowed[direction], neighbor_id)

    def allowed_ids(self, direction: Direction) -> list[TileId]:
        """Get all tile IDs allowed in the given direction, ascending."""
        return list(iter_bits(self.allowed[direction]))


def make_bidirectional_rule(tiles: dict[TileId, Tile], tile_a_id: TileId, tile_b_id: TileId):
    """
    Create a bidirectional adjacency rule: A and B can be neighbors in all directions.

    If A can have B above it, then B can have A below it, etc.
    """
    tile_a = tiles[tile_a_id]
    tile_b = tiles[tile_b_id]

    for direction in Direction:
        tile_a.allow_neighbor(direction, tile_b_id)
        tile_b.allow_neighbor(direction.opposite, tile_a_id)
