"""Shared constants for wfc2d.

Centralizes values used across multiple modules to ensure consistency.
"""

# Bit-set capacity: the largest number of distinct tiles a ruleset may hold
MAX_TILES = 64

# OutputGrid value for a cell that has not collapsed yet
UNRESOLVED = -1

# Default location of bundled configuration
DEFAULT_CONFIG_NAME = "solver.yaml"

# Seed for RANDOM collapse when the caller supplies no random source
DEFAULT_SEED = 0
