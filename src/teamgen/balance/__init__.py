"""Balance engine that partitions players into teams."""

from .engine import (
    MIN_TEAM_COUNT,
    BalanceEngine,
    GenerationCheck,
    GenerationMode,
    TeamBalanceMetrics,
    score_from_spread,
    score_from_std_dev,
    team_sizes,
    validate_generation,
)

__all__ = [
    "MIN_TEAM_COUNT",
    "BalanceEngine",
    "GenerationCheck",
    "GenerationMode",
    "TeamBalanceMetrics",
    "score_from_spread",
    "score_from_std_dev",
    "team_sizes",
    "validate_generation",
]
