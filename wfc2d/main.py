"""wfc2d - generate a tile grid with Wave Function Collapse."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .config import CollapseMode, load_config
from .core.errors import WFCError
from .logging_config import setup_logging
from .render import render_rich, render_text
from .rules import TERRAIN_SYMBOLS, create_terrain_tileset, dump_rules, load_rules
from .wfc import Solver

logger = logging.getLogger("wfc2d.main")

EXIT_SOLVED = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wfc2d",
        description="wfc2d - Wave Function Collapse over a 2D grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wfc2d --rows 20 --cols 40               # Preset terrain, deterministic
  wfc2d --rules tiles.rules --seed 7      # Own rules, reproducible random run
  wfc2d --dump-rules > terrain.rules      # Write the preset in rule format
        """,
    )
    parser.add_argument(
        "--rules",
        type=Path,
        help="Rule file in [TILE_n] format (default: built-in terrain tileset)",
    )
    parser.add_argument("--rows", type=int, default=16, help="Grid rows (default: 16)")
    parser.add_argument("--cols", type=int, default=32, help="Grid columns (default: 32)")
    parser.add_argument(
        "--seed",
        type=int,
        default=_env_int("WFC2D_SEED"),
        help="Random seed (default: $WFC2D_SEED, or deterministic when unset)",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in CollapseMode],
        help="Collapse mode (overrides config)",
    )
    parser.add_argument(
        "--backtracks",
        type=int,
        metavar="N",
        help="Allow up to N backtracks on contradiction (overrides config)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(os.environ["WFC2D_CONFIG"]) if os.environ.get("WFC2D_CONFIG") else None,
        help="Solver YAML config (default: $WFC2D_CONFIG or bundled solver.yaml)",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=Path("data"),
        help="Log directory (default: data/)",
    )
    parser.add_argument(
        "--dump-rules",
        action="store_true",
        help="Print the active rules in rule-file format and exit",
    )
    parser.add_argument("--plain", action="store_true", help="Print without colors")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging to console")
    return parser


def _env_int(name: str) -> int | None:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        return None


def main(argv: list[str] | None = None) -> int:
    """Main entry point for wfc2d."""
    # Load environment variables first so they feed argument defaults
    load_dotenv()

    args = build_parser().parse_args(argv)

    console_level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(args.data, console_level=console_level)

    try:
        config = load_config(args.config)
    except ValidationError as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return EXIT_USAGE

    overrides = {}
    if args.mode is not None:
        overrides["collapse_mode"] = CollapseMode(args.mode)
    if args.backtracks is not None:
        overrides["max_backtracks"] = args.backtracks
    if overrides:
        config = config.model_copy(update=overrides)

    if args.rules is not None:
        try:
            tiles = load_rules(args.rules)
        except OSError as exc:
            print(f"Cannot read rules: {exc}", file=sys.stderr)
            return EXIT_USAGE
        symbols = None
    else:
        tiles = create_terrain_tileset()
        symbols = TERRAIN_SYMBOLS

    if args.dump_rules:
        sys.stdout.write(dump_rules(tiles))
        return EXIT_SOLVED

    solver = Solver(config)
    try:
        solver.load_ruleset(tiles)
        solver.initialize(args.rows, args.cols)
    except WFCError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    result = solver.run(seed=args.seed)

    if args.plain:
        print(render_text(solver.output, solver.cols, symbols))
    else:
        Console().print(render_rich(solver.output, solver.cols, symbols))

    print(
        f"wfc2d v{__version__} | {result.state.name} | iterations={result.iterations} "
        f"| backtracks={result.backtracks}",
        file=sys.stderr,
    )
    if not result.solved:
        print(result.message, file=sys.stderr)
        return EXIT_FAILED
    return EXIT_SOLVED


if __name__ == "__main__":
    sys.exit(main())
