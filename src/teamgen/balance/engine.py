"""Partition a rated player pool into skill-balanced teams."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from statistics import fmean
from typing import List, Optional, Sequence

from teamgen.errors import EmptyPlayerList, InsufficientPlayers, InvalidTeamCount, TeamGenerationError
from teamgen.models import Player, Team


logger = logging.getLogger(__name__)

MIN_TEAM_COUNT = 2
STD_DEV_FOR_ZERO_SCORE = 5.0
WELL_BALANCED_SCORE = 0.8


class GenerationMode(str, Enum):
    FAIR = "fair"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: "str | GenerationMode") -> "GenerationMode":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for mode in cls:
            if mode.value == key:
                return mode
        raise ValueError(f"Unsupported generation mode {value!r}")


@dataclass(frozen=True)
class GenerationCheck:
    is_valid: bool
    error: Optional[TeamGenerationError] = None


@dataclass(frozen=True)
class TeamBalanceMetrics:
    """Balance across teams, as opposed to the per-team ``balance_score``."""

    average_skill_deviation: float
    max_skill_difference: float
    balance_score: float

    @property
    def is_well_balanced(self) -> bool:
        return self.balance_score >= WELL_BALANCED_SCORE

    @property
    def description(self) -> str:
        if self.balance_score >= 0.9:
            return "Perfectly balanced"
        if self.balance_score >= 0.7:
            return "Well balanced"
        if self.balance_score >= 0.5:
            return "Moderately balanced"
        return "Poorly balanced"


def score_from_std_dev(std_dev: float) -> float:
    """Map a standard deviation onto [0, 1]: 0 -> 1.0, 5 or more -> 0.0."""

    return max(0.0, 1.0 - std_dev / STD_DEV_FOR_ZERO_SCORE)


def score_from_spread(spread: float) -> float:
    """Map a gap between team averages onto [0, 1] on the same 0..5 scale."""

    return max(0.0, 1.0 - spread / STD_DEV_FOR_ZERO_SCORE)


def team_sizes(player_count: int, team_count: int) -> List[int]:
    """Split ``player_count`` evenly; the first ``player_count % team_count`` teams get one extra."""

    if team_count <= 0:
        return []
    base, remainder = divmod(max(0, player_count), team_count)
    return [base + 1 if idx < remainder else base for idx in range(team_count)]


def validate_generation(player_count: int, team_count: int) -> GenerationCheck:
    if player_count <= 0:
        return GenerationCheck(False, EmptyPlayerList())
    if team_count < MIN_TEAM_COUNT:
        return GenerationCheck(False, InvalidTeamCount(team_count))
    if player_count < team_count:
        return GenerationCheck(False, InsufficientPlayers(required=team_count, available=player_count))
    return GenerationCheck(True)


class BalanceEngine:
    """Pure, synchronous team builder.

    ``rng`` only drives random mode; fair mode is deterministic for a given
    pool order.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def validate_generation(self, player_count: int, team_count: int) -> GenerationCheck:
        return validate_generation(player_count, team_count)

    def generate_teams(
        self,
        players: Sequence[Player],
        team_count: int,
        mode: GenerationMode | str,
    ) -> List[Team]:
        check = validate_generation(len(players), team_count)
        if check.error is not None:
            raise check.error

        resolved = GenerationMode.parse(mode)
        start = time.perf_counter()
        if resolved is GenerationMode.FAIR:
            groups = self._assign_fair(players, team_count)
        else:
            groups = self._assign_random(players, team_count)

        teams = [Team(group) for group in groups]
        logger.info(
            "Generated %s %s teams from %s players – sizes %s, averages %s (%.4fs)",
            len(teams),
            resolved.value,
            len(players),
            [team.total_players for team in teams],
            ", ".join(f"{team.average_rank:.2f}" for team in teams),
            time.perf_counter() - start,
        )
        return teams

    def _assign_fair(self, players: Sequence[Player], team_count: int) -> List[List[Player]]:
        capacities = team_sizes(len(players), team_count)
        groups: List[List[Player]] = [[] for _ in range(team_count)]
        totals = [0.0] * team_count

        ranked = sorted(players, key=lambda p: p.overall, reverse=True)
        for player in ranked:
            target: Optional[int] = None
            for idx in range(team_count):
                if len(groups[idx]) >= capacities[idx]:
                    continue
                if target is None or totals[idx] < totals[target]:
                    target = idx
            if target is None:  # pragma: no cover - capacities always sum to the pool size
                raise RuntimeError("No team with remaining capacity")
            groups[target].append(player)
            totals[target] += player.overall
            logger.debug("Assigned %s (%.2f) to team %s (total %.2f)", player.name, player.overall, target, totals[target])
        return groups

    def _assign_random(self, players: Sequence[Player], team_count: int) -> List[List[Player]]:
        shuffled = list(players)
        self._rng.shuffle(shuffled)
        groups: List[List[Player]] = [[] for _ in range(team_count)]
        for idx, player in enumerate(shuffled):
            groups[idx % team_count].append(player)
        return groups

    def calculate_balance_scores(self, teams: Sequence[Team]) -> List[Team]:
        """Score each team by its internal spread and refresh its strength level."""

        for team in teams:
            team.assign_balance_score(score_from_std_dev(team.skill_std_dev))
            team.recalculate()
        return list(teams)

    def measure_balance(self, teams: Sequence[Team]) -> TeamBalanceMetrics:
        if len(teams) < 2:
            return TeamBalanceMetrics(average_skill_deviation=0.0, max_skill_difference=0.0, balance_score=1.0)
        averages = [team.average_rank for team in teams]
        mean = fmean(averages)
        max_difference = max(averages) - min(averages)
        return TeamBalanceMetrics(
            average_skill_deviation=fmean(abs(value - mean) for value in averages),
            max_skill_difference=max_difference,
            balance_score=score_from_spread(max_difference),
        )
