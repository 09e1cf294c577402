"""
Loader for the text rule format.

A file is a list of tile sections:

    [TILE_0]
    up=0 1
    down=0 1
    left=0
    right=0 1

    [TILE_1]
    ...

A section ends at a blank line or at the next line starting with "[".
Keys are up/down/left/right; values are whitespace-separated tile IDs.
Lines starting with "#" or ";" are comments.

Malformed input never raises: the offending line (or token) is skipped
and a warning names the line number. Tile IDs at or above MAX_TILES count
as malformed. The solver only ever sees a clean list of tiles, possibly
empty.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from ..core.constants import MAX_TILES
from ..core.types import DIRECTIONS, Direction
from ..wfc.tile import Tile

logger = logging.getLogger(__name__)

# Pattern for section headers
HEADER_PATTERN = re.compile(r"^\[TILE_(\d+)\]$")

COMMENT_PREFIXES = ("#", ";")


def parse_rules(text: str, source: str = "<string>") -> list[Tile]:
    """
    Parse rule text into tiles, in order of appearance.

    Args:
        text: Rule file contents
        source: Name used in warnings (e.g. the file path)

    Returns:
        Parsed tiles. Duplicated tile IDs keep the first definition.
    """
    tiles: list[Tile] = []
    seen: set[int] = set()
    current: Tile | None = None

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()

        if not line:
            current = None
            continue
        if line.startswith(COMMENT_PREFIXES):
            continue

        if line.startswith("["):
            current = None
            match = HEADER_PATTERN.match(line)
            if match is None:
                logger.warning(f"{source}:{line_no}: malformed section header {line!r}, skipping section")
                continue
            tile_id = int(match.group(1))
            if tile_id >= MAX_TILES:
                logger.warning(f"{source}:{line_no}: tile id {tile_id} exceeds the {MAX_TILES}-tile limit, skipping section")
                continue
            if tile_id in seen:
                logger.warning(f"{source}:{line_no}: tile {tile_id} defined again, skipping duplicate")
                continue
            seen.add(tile_id)
            current = Tile(id=tile_id)
            tiles.append(current)
            continue

        if current is None:
            logger.warning(f"{source}:{line_no}: rule outside a tile section, skipping {line!r}")
            continue

        key, sep, value = line.partition("=")
        if not sep:
            logger.warning(f"{source}:{line_no}: expected key=value, skipping {line!r}")
            continue
        try:
            direction = Direction.from_key(key)
        except KeyError:
            logger.warning(f"{source}:{line_no}: unknown direction {key.strip()!r}, skipping")
            continue

        for token in value.split():
            try:
                neighbor_id = int(token)
            except ValueError:
                neighbor_id = -1
            if not 0 <= neighbor_id < MAX_TILES:
                logger.warning(f"{source}:{line_no}: ignoring invalid tile id {token!r}")
                continue
            current.allow_neighbor(direction, neighbor_id)

    logger.debug(f"Parsed {len(tiles)} tile(s) from {source}")
    return tiles


def load_rules(path: Path | str) -> list[Tile]:
    """
    Load tiles from a rule file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    rules_path = Path(path)
    with open(rules_path, encoding="utf-8") as f:
        text = f.read()
    return parse_rules(text, source=str(rules_path))


def dump_rules(tiles: Iterable[Tile]) -> str:
    """Write tiles back out in the rule format (round-trips parse_rules)."""
    sections = []
    for tile in tiles:
        lines = [f"[TILE_{tile.id}]"]
        for direction in DIRECTIONS:
            ids = " ".join(str(i) for i in tile.allowed_ids(direction))
            lines.append(f"{direction.key}={ids}")
        sections.append("\n".join(lines))
    return "\n\n".join(sections) + "\n"
