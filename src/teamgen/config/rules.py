"""Business-rule configuration for team generation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace


logger = logging.getLogger(__name__)

_MIN_PER_TEAM_ENV = "TEAMGEN_MIN_PLAYERS_PER_TEAM"
_MAX_PER_TEAM_ENV = "TEAMGEN_MAX_PLAYERS_PER_TEAM"
_OPTIMAL_MIN_ENV = "TEAMGEN_OPTIMAL_MIN_PER_TEAM"
_OPTIMAL_MAX_ENV = "TEAMGEN_OPTIMAL_MAX_PER_TEAM"
_SKILL_GAP_ENV = "TEAMGEN_SKILL_GAP_THRESHOLD"
_MAX_ATTEMPTS_ENV = "TEAMGEN_MAX_ATTEMPTS"
_RETRY_BACKOFF_ENV = "TEAMGEN_RETRY_BACKOFF"


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class GenerationRules:
    """Thresholds the orchestrator applies around the balance engine."""

    min_players_per_team: int = 2
    max_players_per_team: int = 8
    optimal_min_per_team: int = 4
    optimal_max_per_team: int = 6
    skill_gap_threshold: float = 3.0
    max_attempts: int = 3
    retry_backoff: float = 0.1

    def __post_init__(self) -> None:
        if self.min_players_per_team < 1:
            raise ValueError("min_players_per_team must be at least 1")
        if self.max_players_per_team < self.min_players_per_team:
            raise ValueError("max_players_per_team cannot be below min_players_per_team")
        if self.optimal_max_per_team < self.optimal_min_per_team:
            raise ValueError("optimal_max_per_team cannot be below optimal_min_per_team")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.retry_backoff < 0:
            raise ValueError("retry_backoff cannot be negative")
        if self.skill_gap_threshold < 0:
            raise ValueError("skill_gap_threshold cannot be negative")

    @classmethod
    def from_env(cls) -> "GenerationRules":
        """Build rules from defaults, honouring ``TEAMGEN_*`` overrides."""

        defaults = cls()
        min_per_team = _env_int(_MIN_PER_TEAM_ENV, defaults.min_players_per_team, min_value=1)
        max_per_team = _env_int(_MAX_PER_TEAM_ENV, defaults.max_players_per_team, min_value=min_per_team)
        optimal_min = _env_int(_OPTIMAL_MIN_ENV, defaults.optimal_min_per_team, min_value=1)
        optimal_max = _env_int(_OPTIMAL_MAX_ENV, defaults.optimal_max_per_team, min_value=optimal_min)
        return cls(
            min_players_per_team=min_per_team,
            max_players_per_team=max_per_team,
            optimal_min_per_team=optimal_min,
            optimal_max_per_team=optimal_max,
            skill_gap_threshold=_env_float(_SKILL_GAP_ENV, defaults.skill_gap_threshold, clamp_min=0.0),
            max_attempts=_env_int(_MAX_ATTEMPTS_ENV, defaults.max_attempts, min_value=1),
            retry_backoff=_env_float(_RETRY_BACKOFF_ENV, defaults.retry_backoff, clamp_min=0.0),
        )

    def with_overrides(self, **changes: object) -> "GenerationRules":
        return replace(self, **changes)
