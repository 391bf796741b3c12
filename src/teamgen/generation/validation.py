"""Feasibility checks, advisory warnings and previews for a generation request."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from statistics import fmean, pstdev
from typing import List, Optional, Sequence

from teamgen.balance import (
    MIN_TEAM_COUNT,
    GenerationMode,
    score_from_spread,
    score_from_std_dev,
    team_sizes,
    validate_generation,
)
from teamgen.config import GenerationRules
from teamgen.errors import GenerationFailed, InvalidTeamCount, TeamGenerationError
from teamgen.models import MAX_SKILL, Player


RANDOM_MODE_ESTIMATE = 0.5


class WarningKind(str, Enum):
    UNEVEN_DISTRIBUTION = "uneven_distribution"
    SIGNIFICANT_SKILL_GAP = "significant_skill_gap"
    SMALL_TEAM_SIZE = "small_team_size"
    LARGE_TEAM_SIZE = "large_team_size"


class RecommendationKind(str, Enum):
    ADJUST_TEAM_COUNT = "adjust_team_count"
    ADD_MORE_PLAYERS = "add_more_players"
    USE_FAIR_MODE = "use_fair_mode"


@dataclass(frozen=True)
class GenerationWarning:
    kind: WarningKind
    value: float
    message: str


@dataclass(frozen=True)
class GenerationRecommendation:
    kind: RecommendationKind
    message: str
    suggested: Optional[int] = None


@dataclass
class GenerationValidation:
    """
    Feasibility of a request plus non-blocking guidance.

    Attributes:
        is_valid: False only for the hard checks (team count, empty or short pool).
        warnings: Advisory issues; never block generation.
        recommendations: Suggested adjustments to the request.
        estimated_balance: Expected balance score before generation runs.
        error: The typed error a hard failure maps to.
    """

    is_valid: bool
    warnings: List[GenerationWarning] = field(default_factory=list)
    recommendations: List[GenerationRecommendation] = field(default_factory=list)
    estimated_balance: float = 0.0
    error: Optional[TeamGenerationError] = None


@dataclass(frozen=True)
class DistributionPreview:
    team_count: int
    players_per_team: List[int]
    estimated_balance: float
    skill_distribution: List[float]


def estimate_balance(players: Sequence[Player], mode: GenerationMode) -> float:
    if mode is GenerationMode.RANDOM or not players:
        return RANDOM_MODE_ESTIMATE
    return score_from_std_dev(pstdev(p.overall for p in players))


def assess_pool(
    players: Sequence[Player],
    team_count: int,
    mode: GenerationMode,
    rules: GenerationRules,
) -> GenerationValidation:
    """Run the hard checks, then collect warnings and recommendations."""

    # team count is checked before the pool is looked at
    if team_count < MIN_TEAM_COUNT:
        return GenerationValidation(is_valid=False, error=InvalidTeamCount(team_count))
    check = validate_generation(len(players), team_count)
    if check.error is not None:
        return GenerationValidation(is_valid=False, error=check.error)

    pool_size = len(players)
    warnings: List[GenerationWarning] = []
    recommendations: List[GenerationRecommendation] = []

    players_per_team, remainder = divmod(pool_size, team_count)
    if remainder > 0:
        warnings.append(
            GenerationWarning(
                kind=WarningKind.UNEVEN_DISTRIBUTION,
                value=1,
                message="Some teams will have 1 more player than others",
            )
        )

    if players_per_team < rules.min_players_per_team:
        warnings.append(
            GenerationWarning(
                kind=WarningKind.SMALL_TEAM_SIZE,
                value=players_per_team,
                message=f"Teams will be very small ({players_per_team} player(s) each)",
            )
        )
        suggested = max(2, pool_size // rules.min_players_per_team)
        recommendations.append(
            GenerationRecommendation(
                kind=RecommendationKind.ADJUST_TEAM_COUNT,
                suggested=suggested,
                message=f"Consider {suggested} teams: ensures minimum {rules.min_players_per_team} players per team",
            )
        )

    if players_per_team > rules.max_players_per_team:
        warnings.append(
            GenerationWarning(
                kind=WarningKind.LARGE_TEAM_SIZE,
                value=players_per_team,
                message=f"Teams will be very large ({players_per_team}+ players each)",
            )
        )
        suggested = -(-pool_size // rules.max_players_per_team)
        recommendations.append(
            GenerationRecommendation(
                kind=RecommendationKind.ADJUST_TEAM_COUNT,
                suggested=suggested,
                message=f"Consider {suggested} teams: keeps teams manageable (max {rules.max_players_per_team} players)",
            )
        )

    overall = [p.overall for p in players]
    skill_gap = max(overall) - min(overall)
    if skill_gap > rules.skill_gap_threshold:
        warnings.append(
            GenerationWarning(
                kind=WarningKind.SIGNIFICANT_SKILL_GAP,
                value=skill_gap,
                message=f"Large skill difference detected (up to {skill_gap:.1f} points)",
            )
        )
        if mode is GenerationMode.RANDOM:
            recommendations.append(
                GenerationRecommendation(
                    kind=RecommendationKind.USE_FAIR_MODE,
                    message="Use Fair mode for better skill balance",
                )
            )

    optimal_pool = team_count * rules.optimal_min_per_team
    if pool_size < optimal_pool:
        missing = optimal_pool - pool_size
        recommendations.append(
            GenerationRecommendation(
                kind=RecommendationKind.ADD_MORE_PLAYERS,
                suggested=missing,
                message=f"Add at least {missing} more players for better balance",
            )
        )

    return GenerationValidation(
        is_valid=True,
        warnings=warnings,
        recommendations=recommendations,
        estimated_balance=estimate_balance(players, mode),
    )


def check_player_integrity(players: Sequence[Player]) -> None:
    """Raise ``GenerationFailed`` for the first corrupted player record."""

    for player in players:
        if not player.name.strip():
            raise GenerationFailed(f"Invalid player data: empty name (player {player.id})")
        if not 0 < player.overall <= MAX_SKILL:
            raise GenerationFailed(f"Invalid player data: skill out of range for {player.name}")


def preview_distribution(players: Sequence[Player], team_count: int) -> DistributionPreview:
    """Cheap size/skill estimate from contiguous slices of the pool sorted by skill.

    This does not run the balance engine; its per-team estimates can differ
    from what fair mode actually produces.
    """

    sizes = team_sizes(len(players), team_count)
    ranked = sorted((p.overall for p in players), reverse=True)

    skill_distribution: List[float] = []
    cursor = 0
    for size in sizes:
        chunk = ranked[cursor:cursor + size]
        skill_distribution.append(fmean(chunk) if chunk else 0.0)
        cursor += size

    return DistributionPreview(
        team_count=team_count,
        players_per_team=sizes,
        estimated_balance=_chunk_balance(skill_distribution),
        skill_distribution=skill_distribution,
    )


def _chunk_balance(skill_distribution: Sequence[float]) -> float:
    if len(skill_distribution) < 2:
        return 1.0
    mean = fmean(skill_distribution)
    max_deviation = max(abs(value - mean) for value in skill_distribution)
    if max_deviation <= 0:
        return 1.0
    return score_from_spread(max_deviation)
