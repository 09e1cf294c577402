"""Shared test fixtures for wfc2d."""

import logging
import tempfile
from pathlib import Path

import pytest

from wfc2d.core.types import Direction
from wfc2d.wfc import Tile, TileRuleset, make_bidirectional_rule


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def reset_wfc2d_logging():
    """Drop handlers installed by setup_logging() so tests stay isolated."""
    yield
    root_logger = logging.getLogger("wfc2d")
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="wfc2d_test_") as tmpdir:
        yield Path(tmpdir)


# -----------------------------------------------------------------------------
# Rulesets
# -----------------------------------------------------------------------------


def make_chain_tiles() -> list[Tile]:
    """
    Three tiles forming a gradient: A(0) <-> B(1) <-> C(2).

    A and C can never touch. Every rule is symmetric, and this tileset
    can never hit a contradiction on any grid.
    """
    tiles = {tile_id: Tile(id=tile_id) for tile_id in range(3)}
    make_bidirectional_rule(tiles, 0, 0)
    make_bidirectional_rule(tiles, 0, 1)
    make_bidirectional_rule(tiles, 1, 1)
    make_bidirectional_rule(tiles, 1, 2)
    make_bidirectional_rule(tiles, 2, 2)
    return [tiles[i] for i in range(3)]


def make_no_horizontal_pair_tiles() -> list[Tile]:
    """Two tiles that may never sit side by side (left/right), in any combination."""
    return [
        Tile(id=0, allowed={Direction.UP: 0b11, Direction.DOWN: 0b11}),
        Tile(id=1, allowed={Direction.UP: 0b11, Direction.DOWN: 0b11}),
    ]


def make_ordered_pair_tiles() -> list[Tile]:
    """
    Two tiles where only "1 then 0" works left-to-right.

    The lowest-ID choice (0 first) is a dead end on a 1x2 grid, so this
    needs exactly one backtrack.
    """
    return [
        Tile(id=0, allowed={Direction.LEFT: 0b10}),
        Tile(id=1, allowed={Direction.RIGHT: 0b01}),
    ]


@pytest.fixture
def chain_tiles() -> list[Tile]:
    return make_chain_tiles()


@pytest.fixture
def chain_ruleset() -> TileRuleset:
    return TileRuleset.from_tiles(make_chain_tiles())


@pytest.fixture
def single_tile() -> list[Tile]:
    """One tile compatible with itself in every direction."""
    tiles = {0: Tile(id=0)}
    make_bidirectional_rule(tiles, 0, 0)
    return [tiles[0]]


@pytest.fixture
def no_horizontal_pair_tiles() -> list[Tile]:
    return make_no_horizontal_pair_tiles()


@pytest.fixture
def ordered_pair_tiles() -> list[Tile]:
    return make_ordered_pair_tiles()
