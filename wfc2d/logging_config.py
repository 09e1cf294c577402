"""
Centralized logging configuration for wfc2d.

Library code only creates loggers (logging.getLogger(__name__)); nothing
is printed unless an application calls setup_logging(). The CLI does.
Log file: <data_root>/wfc2d.log (with rotation)

Usage:
    from wfc2d.logging_config import setup_logging
    setup_logging(data_root)  # Call once at startup

All wfc2d.* loggers will write DEBUG to file, WARNING+ to console.
"""

import logging
import sys
from collections.abc import Iterable
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path


# Global configuration
LOG_FILE_NAME = "wfc2d.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5  # Keep 5 backup files

_logging_initialized = False


def setup_logging(
    data_root: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Configure the logging system for wfc2d.

    Args:
        data_root: Directory for the log file (created if missing)
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file
    """
    global _logging_initialized

    data_path = Path(data_root)
    data_path.mkdir(parents=True, exist_ok=True)
    log_path = data_path / LOG_FILE_NAME

    root_logger = logging.getLogger("wfc2d")
    root_logger.setLevel(logging.DEBUG)  # Capture all levels

    # Clear any existing handlers (for re-initialization)
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()

    file_formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-28s | %(funcName)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    # Console handler (less verbose)
    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s | %(name)-22s | %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if not _logging_initialized:
        root_logger.info("=" * 80)
        root_logger.info(f"wfc2d logging initialized at {datetime.now().isoformat()}")
        root_logger.info(f"Log file: {log_path.absolute()}")
        root_logger.info("=" * 80)
        _logging_initialized = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger configured as child of the wfc2d logger
    """
    if name == "wfc2d" or name.startswith("wfc2d."):
        return logging.getLogger(name)
    return logging.getLogger(f"wfc2d.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_step(
    logger: logging.Logger,
    iteration: int,
    index: int,
    tile_id: int,
    details: str | None = None,
) -> None:
    """Log one select/collapse iteration."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STEP {iteration:06d} | COLLAPSE | cell={index} | tile={tile_id}{details_str}")


def log_propagation(
    logger: logging.Logger,
    seeds: Iterable[int],
    processed: int,
    changed: int,
    failed_at: int | None = None,
) -> None:
    """Log the outcome of a propagation pass."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    status = "OK" if failed_at is None else f"CONTRADICTION at {failed_at}"
    logger.debug(
        f"PROPAGATE | seeds={list(seeds)} | processed={processed} | changed={changed} | {status}"
    )


def log_contradiction(
    logger: logging.Logger,
    index: int,
    iteration: int,
    details: str | None = None,
) -> None:
    """Log a contradiction that ends (or rewinds) a run."""
    details_str = f" | {details}" if details else ""
    logger.info(f"STEP {iteration:06d} | CONTRADICTION | cell={index}{details_str}")


def log_backtrack(
    logger: logging.Logger,
    index: int,
    banned_tile: int,
    count: int,
    limit: int,
) -> None:
    """Log a restore from the snapshot stack."""
    logger.info(f"BACKTRACK {count}/{limit} | cell={index} | banned tile={banned_tile}")


def log_ruleset(
    logger: logging.Logger,
    tile_count: int,
    asymmetries: int = 0,
    source: Path | str | None = None,
) -> None:
    """Log a ruleset being loaded."""
    source_str = f" | {source}" if source else ""
    logger.info(f"RULESET | tiles={tile_count} | asymmetric={asymmetries}{source_str}")


def log_run(
    logger: logging.Logger,
    status: str,
    rows: int,
    cols: int,
    iterations: int,
    duration_ms: int | None = None,
    details: str | None = None,
) -> None:
    """Log the start or end of a solve."""
    duration_str = f" | {duration_ms}ms" if duration_ms is not None else ""
    details_str = f" | {details}" if details else ""
    logger.info(f"RUN | {status} | {rows}x{cols} | iterations={iterations}{duration_str}{details_str}")
