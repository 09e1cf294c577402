"""Solver configuration for wfc2d.

Settings are a frozen pydantic model so they can be shared between
solvers and validated once. They can be loaded from YAML:

    solver:
      collapse_mode: supported
      max_backtracks: 20
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .core.constants import DEFAULT_CONFIG_NAME, MAX_TILES


class CollapseMode(str, Enum):
    """How a selected cell picks its tile."""

    AUTO = "auto"            # LOWEST without a random source, RANDOM with one
    LOWEST = "lowest"        # Lowest remaining tile ID
    RANDOM = "random"        # Uniform among remaining, from the run's random source
    SUPPORTED = "supported"  # Keeps the most options alive in the neighbors


class SolverConfig(BaseModel):
    """Tunable solver settings.

    max_backtracks=0 is the baseline algorithm: the first contradiction
    ends the run as failed.
    """

    model_config = ConfigDict(frozen=True)

    max_tiles: int = Field(default=MAX_TILES, ge=1, le=MAX_TILES)
    collapse_mode: CollapseMode = CollapseMode.AUTO
    max_backtracks: int = Field(default=0, ge=0)
    max_snapshots: int = Field(default=256, ge=1)
    log_progress_every: int = Field(default=0, ge=0)  # 0 = no progress lines

    @classmethod
    def from_dict(cls, data: dict) -> SolverConfig:
        """Create a SolverConfig from a dictionary (YAML data).

        Accepts either the settings themselves or a mapping with the
        settings nested under a "solver" key.
        """
        if "solver" in data and isinstance(data["solver"], dict):
            data = data["solver"]
        return cls(**data)


def default_config_path() -> Path:
    """Bundled config/solver.yaml next to this package."""
    return Path(__file__).parent / "config" / DEFAULT_CONFIG_NAME


def load_config(path: Path | str | None = None) -> SolverConfig:
    """
    Load solver settings from YAML.

    Args:
        path: YAML file. None loads the bundled default.

    Returns:
        SolverConfig; defaults if the file does not exist or is empty.

    Raises:
        pydantic.ValidationError: If a setting has an invalid value
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        return SolverConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data:
        return SolverConfig()
    return SolverConfig.from_dict(data)
