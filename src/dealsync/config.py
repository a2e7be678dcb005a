"""Runtime configuration for dealsync.

Loaded from environment variables once at process start and passed to
the factory that builds the synchronization mediator.

Environment variables:
    DEALSYNC_JOURNAL_PATH: JSONL sync journal, replayed at start (default: unset, no journal)
    DEALSYNC_ANALYSIS_ENABLED: "1"/"0" to install the default insight engine (default: 1)
    DEALSYNC_INSIGHT_HISTORY: Number of insights retained by the engine (default: 100)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

ENV_JOURNAL_PATH: Final[str] = "DEALSYNC_JOURNAL_PATH"
ENV_ANALYSIS_ENABLED: Final[str] = "DEALSYNC_ANALYSIS_ENABLED"
ENV_INSIGHT_HISTORY: Final[str] = "DEALSYNC_INSIGHT_HISTORY"

DEFAULT_ANALYSIS_ENABLED: Final[bool] = True
DEFAULT_INSIGHT_HISTORY: Final[int] = 100

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class ConfigError(Exception):
    """Raised when configuration values are invalid."""


@dataclass(frozen=True)
class SyncConfig:
    """Synchronization layer configuration (immutable).

    Attributes:
        journal_path: Path of the JSONL sync journal, or None to disable it.
        analysis_enabled: Whether updates with ai_analysis reach the insight engine.
        insight_history: Maximum number of insights kept in memory.
    """

    journal_path: str | None = None
    analysis_enabled: bool = DEFAULT_ANALYSIS_ENABLED
    insight_history: int = DEFAULT_INSIGHT_HISTORY

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.insight_history <= 0:
            raise ConfigError(
                f"{ENV_INSIGHT_HISTORY} must be a positive integer, got {self.insight_history}"
            )
        if self.journal_path is not None and not self.journal_path.strip():
            raise ConfigError(f"{ENV_JOURNAL_PATH} must not be blank")


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.environ.get(env_var)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{env_var} must be a boolean flag, got '{raw}'")


def _parse_positive_int(env_var: str, default: int) -> int:
    """Parse a positive integer from an environment variable.

    Raises:
        ConfigError: If the value is set but not a positive integer.
    """
    raw = os.environ.get(env_var)
    if raw is None:
        return default

    raw = raw.strip()
    if not raw:
        return default

    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{env_var} must be a positive integer, got '{raw}'") from e

    if value <= 0:
        raise ConfigError(f"{env_var} must be a positive integer, got {value}")

    return value


def load_config() -> SyncConfig:
    """Load configuration from environment variables.

    Returns:
        SyncConfig with validated values.

    Raises:
        ConfigError: If any value is invalid.
    """
    journal_path = os.environ.get(ENV_JOURNAL_PATH, "").strip() or None
    return SyncConfig(
        journal_path=journal_path,
        analysis_enabled=_parse_bool(ENV_ANALYSIS_ENABLED, DEFAULT_ANALYSIS_ENABLED),
        insight_history=_parse_positive_int(ENV_INSIGHT_HISTORY, DEFAULT_INSIGHT_HISTORY),
    )
