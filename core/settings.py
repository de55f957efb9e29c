"""
Engine configuration.

Defaults live on the EngineConfig dataclass; an optional JSON file and the
SUDOKU_* environment variables override them, in that order.
"""
import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Optional

SOLVER_ENV_VAR = "SUDOKU_SOLVER"
SEED_ENV_VAR = "SUDOKU_SEED"
LOG_LEVEL_ENV_VAR = "SUDOKU_LOG_LEVEL"
MAX_TRIES_ENV_VAR = "SUDOKU_MAX_GENERATE_TRIES"

SOLVER_CHOICES = ("lp", "backtracking")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EngineConfig:
    """Configuration for the game engine and the console application"""

    default_block_rows: int = 3
    default_block_cols: int = 3
    max_generate_tries: int = 1000
    solver: str = "lp"  # "lp" or "backtracking"
    seed: Optional[int] = None  # None seeds from OS entropy
    mark_errors: bool = True
    max_line_length: int = 256
    log_level: str = "WARNING"

    def validate(self) -> None:
        """
        Check field values.

        Raises:
            ValueError: On the first invalid field
        """
        if self.default_block_rows <= 0 or self.default_block_cols <= 0:
            raise ValueError(
                f"Block dimensions must be positive: {self.default_block_rows}x{self.default_block_cols}"
            )
        if self.max_generate_tries <= 0:
            raise ValueError(f"max_generate_tries must be positive: {self.max_generate_tries}")
        if self.solver not in SOLVER_CHOICES:
            raise ValueError(f"solver must be one of {SOLVER_CHOICES}: {self.solver!r}")
        if self.max_line_length <= 0:
            raise ValueError(f"max_line_length must be positive: {self.max_line_length}")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}: {self.log_level!r}")

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer: {raw!r}") from e


def apply_env_overrides(config: EngineConfig, environ=None) -> EngineConfig:
    """Apply SUDOKU_* environment variables on top of config (in place)."""
    environ = os.environ if environ is None else environ
    if environ.get(SOLVER_ENV_VAR):
        config.solver = environ[SOLVER_ENV_VAR].strip().lower()
    if environ.get(SEED_ENV_VAR):
        config.seed = _parse_int(SEED_ENV_VAR, environ[SEED_ENV_VAR])
    if environ.get(LOG_LEVEL_ENV_VAR):
        config.log_level = environ[LOG_LEVEL_ENV_VAR].strip().upper()
    if environ.get(MAX_TRIES_ENV_VAR):
        config.max_generate_tries = _parse_int(MAX_TRIES_ENV_VAR, environ[MAX_TRIES_ENV_VAR])
    return config


def load_config(config_path: Optional[str] = None, environ=None) -> EngineConfig:
    """
    Load the configuration.

    Args:
        config_path: Optional JSON file whose keys are EngineConfig field names
        environ: Mapping used for overrides (os.environ by default)

    Raises:
        ValueError: On unknown keys, unreadable files or invalid values
    """
    config = EngineConfig()
    if config_path:
        try:
            with open(config_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid configuration file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration file {config_path}: expected an object")

        known = {f.name for f in fields(EngineConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        config = EngineConfig(**data)

    apply_env_overrides(config, environ)
    config.validate()
    return config
