"""
tokenvest Configuration

All settings come from TOKENVEST_* environment variables and are read once at
import time. Vesting constants are protocol values and live in
tokenvest.core.constants instead.
"""

from __future__ import annotations

import logging
import os

from tokenvest.core.constants import DEFAULT_MAX_BALLOT_OPTIONS
from tokenvest.core.contract_exceptions import ConfigurationError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_int_env(env_var: str, default: int, minimum: int | None = None) -> int:
    """Read an integer environment variable.

    Raises ConfigurationError if the value is not an integer or is below
    ``minimum``.
    """
    raw = os.getenv(env_var, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{env_var} must be an integer, got {raw!r}",
            details={"env_var": env_var, "value": raw},
        ) from exc
    if minimum is not None and value < minimum:
        raise ConfigurationError(
            f"{env_var} must be at least {minimum}, got {value}",
            details={"env_var": env_var, "value": value, "minimum": minimum},
        )
    return value


def get_log_level_env(env_var: str, default: str = "INFO") -> str:
    """Read a logging level name, normalized to upper case."""
    level = os.getenv(env_var, "").strip().upper() or default
    if level not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"{env_var} must be one of {', '.join(VALID_LOG_LEVELS)}, got {level!r}",
            details={"env_var": env_var, "value": level},
        )
    return level


ENVIRONMENT = os.getenv("TOKENVEST_ENVIRONMENT", "development").strip() or "development"

LOG_LEVEL = get_log_level_env("TOKENVEST_LOG_LEVEL")
LOG_FILE = os.getenv("TOKENVEST_LOG_FILE", "").strip()

MAX_BALLOT_OPTIONS = get_int_env(
    "TOKENVEST_MAX_BALLOT_OPTIONS", DEFAULT_MAX_BALLOT_OPTIONS, minimum=1
)
