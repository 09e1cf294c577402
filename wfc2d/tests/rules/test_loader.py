"""Tests for the text rule format."""

import logging
from pathlib import Path

import pytest

from wfc2d.core.types import Direction
from wfc2d.rules import create_terrain_tileset, dump_rules, load_rules, parse_rules
from wfc2d.wfc import Tile, TileRuleset


BUNDLED_RULES = Path(__file__).parents[2] / "config" / "terrain.rules"

SIMPLE_RULES = """\
[TILE_0]
up=0 1
down=0 1
left=0
right=0 1

[TILE_1]
up=0 1
down=0 1
left=0 1
right=1
"""


class TestParseRules:
    """Test parsing well-formed rule text."""

    def test_parse_sections(self):
        tiles = parse_rules(SIMPLE_RULES)
        assert [tile.id for tile in tiles] == [0, 1]
        assert tiles[0].allowed[Direction.UP] == 0b11
        assert tiles[0].allowed[Direction.LEFT] == 0b01
        assert tiles[1].allowed[Direction.RIGHT] == 0b10

    def test_order_of_appearance(self):
        tiles = parse_rules("[TILE_4]\nup=4\n\n[TILE_2]\nup=2\n")
        assert [tile.id for tile in tiles] == [4, 2]

    def test_missing_direction_allows_nothing(self):
        tiles = parse_rules("[TILE_0]\nup=0\n")
        assert tiles[0].allowed[Direction.DOWN] == 0
        assert tiles[0].allowed[Direction.LEFT] == 0

    def test_empty_value(self):
        tiles = parse_rules("[TILE_0]\nup=\n")
        assert tiles[0].allowed[Direction.UP] == 0

    def test_whitespace_tolerated(self):
        tiles = parse_rules("  [TILE_3]  \n  Up =  3   1 \n")
        assert tiles[0].id == 3
        assert tiles[0].allowed[Direction.UP] == 0b1010

    def test_comments_skipped(self):
        text = "# header comment\n[TILE_0]\n; a note\nup=0\n# another\ndown=0\n"
        tiles = parse_rules(text)
        assert tiles[0].allowed[Direction.UP] == 1
        assert tiles[0].allowed[Direction.DOWN] == 1

    def test_header_ends_section_without_blank_line(self):
        tiles = parse_rules("[TILE_0]\nup=0\n[TILE_1]\nup=1\n")
        assert [tile.id for tile in tiles] == [0, 1]
        assert tiles[1].allowed[Direction.UP] == 0b10

    def test_empty_text(self):
        assert parse_rules("") == []
        assert parse_rules("\n\n# nothing here\n") == []


class TestMalformedInput:
    """Malformed lines are skipped with a warning, never raised."""

    def test_blank_line_ends_section(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            tiles = parse_rules("[TILE_0]\nup=0\n\ndown=0\n")
        assert tiles[0].allowed[Direction.DOWN] == 0
        assert "outside a tile section" in caplog.text

    def test_bad_header_skips_section(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            tiles = parse_rules("[TILE_x]\nup=0\n\n[TILE_1]\nup=1\n")
        assert [tile.id for tile in tiles] == [1]
        assert "malformed section header" in caplog.text

    def test_duplicate_keeps_first(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            tiles = parse_rules("[TILE_0]\nup=0\n\n[TILE_0]\nup=1\n")
        assert len(tiles) == 1
        assert tiles[0].allowed[Direction.UP] == 0b01
        assert "defined again" in caplog.text

    def test_missing_equals(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            tiles = parse_rules("[TILE_0]\nup 0 1\ndown=0\n")
        assert tiles[0].allowed[Direction.UP] == 0
        assert tiles[0].allowed[Direction.DOWN] == 1
        assert "expected key=value" in caplog.text

    def test_unknown_direction(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            tiles = parse_rules("[TILE_0]\nnorth=0\nup=0\n")
        assert tiles[0].allowed[Direction.UP] == 1
        assert "unknown direction 'north'" in caplog.text

    def test_bad_tokens_skipped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            tiles = parse_rules("[TILE_0]\nup=0 x -1 2\n")
        assert tiles[0].allowed[Direction.UP] == 0b101
        assert "'x'" in caplog.text
        assert "'-1'" in caplog.text

    def test_tile_id_above_limit_skipped(self, caplog):
        """Huge IDs are rejected before any mask is built."""
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            tiles = parse_rules("[TILE_0]\nup=0 64 9223372036854775808 63\n")
        assert tiles[0].allowed[Direction.UP] == 1 | 1 << 63
        assert "'64'" in caplog.text
        assert "'9223372036854775808'" in caplog.text

    def test_header_id_above_limit_skipped(self, caplog):
        text = "[TILE_9223372036854775808]\nup=0\n\n[TILE_64]\nup=0\n\n[TILE_1]\nup=1\n"
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            tiles = parse_rules(text)
        assert [tile.id for tile in tiles] == [1]
        assert "exceeds the 64-tile limit" in caplog.text

    def test_warning_names_source_and_line(self, caplog):
        with caplog.at_level(logging.WARNING, logger="wfc2d.rules.loader"):
            parse_rules("[TILE_0]\nbogus\n", source="tiles.rules")
        assert "tiles.rules:2" in caplog.text


class TestDumpRules:
    """Test writing rules back out."""

    def test_format(self):
        tiles = [Tile(id=0, allowed={Direction.UP: 0b11, Direction.RIGHT: 0b01})]
        assert dump_rules(tiles) == "[TILE_0]\nup=0 1\ndown=\nleft=\nright=0\n"

    def test_parse_inverts_dump(self):
        tiles = create_terrain_tileset()
        parsed = parse_rules(dump_rules(tiles))
        assert [tile.id for tile in parsed] == [tile.id for tile in tiles]
        assert [tile.allowed for tile in parsed] == [tile.allowed for tile in tiles]

    def test_sections_separated_by_blank_line(self):
        text = dump_rules([Tile(id=0), Tile(id=1)])
        assert "right=\n\n[TILE_1]" in text
        assert text.endswith("\n")


class TestLoadRules:
    """Test loading rule files."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "simple.rules"
        path.write_text(SIMPLE_RULES, encoding="utf-8")
        tiles = load_rules(path)
        assert len(tiles) == 2
        assert TileRuleset.from_tiles(tiles).tile_count == 2

    def test_accepts_str_path(self, tmp_path):
        path = tmp_path / "simple.rules"
        path.write_text(SIMPLE_RULES, encoding="utf-8")
        assert len(load_rules(str(path))) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "nope.rules")

    def test_bundled_terrain_matches_preset(self):
        """config/terrain.rules describes the same tileset as the preset."""
        from_file = load_rules(BUNDLED_RULES)
        preset = create_terrain_tileset()
        assert [tile.id for tile in from_file] == [tile.id for tile in preset]
        for loaded, expected in zip(from_file, preset):
            assert loaded.allowed == expected.allowed, f"tile {loaded.id} differs"
