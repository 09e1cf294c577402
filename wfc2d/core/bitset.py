"""Bit-set helpers for possibility masks.

Possibility sets and per-direction compatibility sets are plain Python
ints used as fixed-width bit vectors: bit ``n`` set means tile ``n`` is
included. Union is ``|``, intersection is ``&``, cardinality is popcount.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .types import Mask, TileId


def popcount(mask: Mask) -> int:
    """Count the number of set bits (the entropy of a possibility set)."""
    return mask.bit_count()


def iter_bits(mask: Mask) -> Iterator[TileId]:
    """Yield the tile IDs contained in mask, lowest first."""
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


def lowest_bit(mask: Mask) -> TileId:
    """Return the lowest tile ID in a non-empty mask."""
    if not mask:
        raise ValueError("lowest_bit() of an empty mask")
    return (mask & -mask).bit_length() - 1


def has_bit(mask: Mask, tile_id: TileId) -> bool:
    return bool(mask >> tile_id & 1)


def mask_of(tile_ids: Iterable[TileId]) -> Mask:
    """Pack tile IDs into a mask."""
    mask = 0
    for tile_id in tile_ids:
        mask |= 1 << tile_id
    return mask
