"""
Immutable tileset with precomputed directional compatibility.

The ruleset is the only state a solver shares with anything else: it is
built once, never mutated, and may be read by any number of solvers.
Compatibility is stored per tile and per direction as bit masks so that
propagation reduces to OR-ing masks together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..core.bitset import iter_bits, mask_of, popcount
from ..core.constants import MAX_TILES
from ..core.errors import DuplicateTile, EmptyRuleset, TooManyTiles
from ..core.types import DIRECTIONS, Direction, Mask, TileId
from .tile import Tile

logger = logging.getLogger(__name__)


class TileRuleset:
    """Read-only view over a set of tiles and their adjacency rules.

    Adjacency is expected to be mutually consistent (if A allows B to its
    right, B allows A to its left). That is the loader's job; asymmetric
    pairs are reported by asymmetries() and logged, not rejected.

    Usage:
        ruleset = TileRuleset.from_tiles(load_rules("tiles.rules"))
        allowed = ruleset.allowed_from(cell_mask, Direction.RIGHT)
    """

    __slots__ = ("_tiles", "_tile_ids", "_universe", "_rules", "_capacity")

    def __init__(self, tiles: Iterable[Tile], max_tiles: int = MAX_TILES):
        """
        Build the ruleset.

        Args:
            tiles: Tiles to include. IDs must be unique and below max_tiles.
            max_tiles: Bit-set capacity (largest supported tile count).

        Raises:
            EmptyRuleset: No tiles supplied
            TooManyTiles: Count or an ID exceeds max_tiles
            DuplicateTile: Two tiles share an ID
        """
        tile_list = list(tiles)
        if not tile_list:
            raise EmptyRuleset()
        if len(tile_list) > max_tiles:
            raise TooManyTiles(len(tile_list), max_tiles)

        by_id: dict[TileId, Tile] = {}
        for tile in tile_list:
            if tile.id >= max_tiles:
                raise TooManyTiles(tile.id + 1, max_tiles)
            if tile.id in by_id:
                raise DuplicateTile(tile.id)
            by_id[tile.id] = tile

        self._capacity = max_tiles
        self._tile_ids: tuple[TileId, ...] = tuple(sorted(by_id))
        self._universe: Mask = mask_of(self._tile_ids)

        # _rules[direction.value][tile_id] -> mask of allowed neighbors.
        # Bits naming unknown tiles are dropped here so nothing downstream
        # can ever resurrect a tile outside the universe.
        size = self._tile_ids[-1] + 1
        self._rules: tuple[tuple[Mask, ...], ...] = tuple(
            tuple(
                self._clean_mask(by_id[tile_id], direction) if tile_id in by_id else 0
                for tile_id in range(size)
            )
            for direction in DIRECTIONS
        )
        self._tiles: dict[TileId, Tile] = {
            tile_id: Tile(
                id=tile_id,
                allowed={d: self._rules[d.value][tile_id] for d in DIRECTIONS},
            )
            for tile_id in self._tile_ids
        }

        asymmetries = self.asymmetries()
        if asymmetries:
            logger.warning(
                f"Ruleset has {len(asymmetries)} asymmetric adjacency rule(s), "
                f"first: tile {asymmetries[0][0]} allows {asymmetries[0][2]} "
                f"{asymmetries[0][1].key} but not the reverse"
            )
        logger.debug(f"Ruleset built | tiles={len(self._tile_ids)} | capacity={max_tiles}")

    def _clean_mask(self, tile: Tile, direction: Direction) -> Mask:
        mask = tile.allowed.get(direction, 0)
        unknown = mask & ~self._universe
        if unknown:
            logger.warning(
                f"Tile {tile.id} {direction.key} rule references unknown tile(s) "
                f"{list(iter_bits(unknown))}, ignoring them"
            )
        return mask & self._universe

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile], max_tiles: int = MAX_TILES) -> TileRuleset:
        """Create a ruleset from an iterable of tiles (e.g. loader output)."""
        return cls(tiles, max_tiles=max_tiles)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def tile_ids(self) -> tuple[TileId, ...]:
        """All tile IDs, ascending."""
        return self._tile_ids

    @property
    def tile_count(self) -> int:
        return len(self._tile_ids)

    @property
    def universe(self) -> Mask:
        """Mask containing every tile in the ruleset (initial cell state)."""
        return self._universe

    @property
    def capacity(self) -> int:
        return self._capacity

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def tile(self, tile_id: TileId) -> Tile:
        """Get a copy-safe Tile for an ID. Raises KeyError if unknown."""
        tile = self._tiles[tile_id]
        return Tile(id=tile.id, allowed=dict(tile.allowed))

    def allowed_mask(self, tile_id: TileId, direction: Direction) -> Mask:
        """Tiles that may sit next to tile_id in the given direction."""
        return self._rules[direction.value][tile_id]

    def allowed_from(self, mask: Mask, direction: Direction) -> Mask:
        """
        Union of allowed neighbors, in direction, over every tile in mask.

        This is what a neighbor in that direction may still be, given
        that the source cell can only be one of the tiles in mask.
        """
        rules = self._rules[direction.value]
        allowed = 0
        while mask:
            low = mask & -mask
            allowed |= rules[low.bit_length() - 1]
            mask ^= low
        return allowed

    def support(self, tile_id: TileId, direction: Direction, neighbor_mask: Mask) -> int:
        """How many options in neighbor_mask stay compatible with tile_id."""
        return popcount(self._rules[direction.value][tile_id] & neighbor_mask)

    def asymmetries(self) -> list[tuple[TileId, Direction, TileId]]:
        """
        List rules that are not mirrored by the neighbor.

        Each entry (a, d, b) means tile a allows b in direction d, but
        tile b does not allow a in the opposite direction.
        """
        found: list[tuple[TileId, Direction, TileId]] = []
        for tile_a in self._tile_ids:
            for direction in DIRECTIONS:
                for tile_b in iter_bits(self._rules[direction.value][tile_a]):
                    back = self._rules[direction.opposite.value][tile_b]
                    if not back >> tile_a & 1:
                        found.append((tile_a, direction, tile_b))
        return found

    def is_symmetric(self) -> bool:
        return not self.asymmetries()

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._tile_ids)

    def __iter__(self) -> Iterator[Tile]:
        for tile_id in self._tile_ids:
            yield self.tile(tile_id)

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._tiles

    def __repr__(self) -> str:
        return f"TileRuleset(tiles={list(self._tile_ids)})"
