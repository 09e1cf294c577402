"""Text rendering of solved (or partially solved) output grids.

Renders one character per cell, one line per row. Symbols come from a
mapping of tile ID -> (symbol, rich color); tiles without an entry are
drawn as their decimal ID.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from rich.text import Text

from .core.constants import UNRESOLVED

Symbols = Mapping[int, tuple[str, str]]


def _rows(output: Iterable[int], cols: int) -> list[list[int]]:
    values = list(output)
    return [values[start:start + cols] for start in range(0, len(values), cols)]


def get_tile_render(tile_id: int, symbols: Symbols | None, unresolved: str = "?") -> tuple[str, str]:
    """Get (symbol, color) for a tile ID."""
    if tile_id == UNRESOLVED:
        return (unresolved, "bright_black")
    if symbols and tile_id in symbols:
        return symbols[tile_id]
    return (str(tile_id), "white")


def render_text(
    output: Iterable[int],
    cols: int,
    symbols: Symbols | None = None,
    unresolved: str = "?",
) -> str:
    """Render as plain text. Cells are separated by spaces when any symbol is wider than one char."""
    rows = _rows(output, cols)
    cells = [[get_tile_render(tile_id, symbols, unresolved)[0] for tile_id in row] for row in rows]
    sep = " " if any(len(cell) > 1 for row in cells for cell in row) else ""
    return "\n".join(sep.join(row) for row in cells)


def render_rich(
    output: Iterable[int],
    cols: int,
    symbols: Symbols | None = None,
    unresolved: str = "?",
) -> Text:
    """Render as a rich Text with a color per tile."""
    text = Text()
    rows = _rows(output, cols)
    wide = any(len(get_tile_render(t, symbols, unresolved)[0]) > 1 for row in rows for t in row)
    for row_no, row in enumerate(rows):
        if row_no:
            text.append("\n")
        for col_no, tile_id in enumerate(row):
            if wide and col_no:
                text.append(" ")
            symbol, color = get_tile_render(tile_id, symbols, unresolved)
            text.append(symbol, style=color)
    return text
