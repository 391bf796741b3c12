"""Team aggregate with derived skill metrics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from statistics import pstdev, pvariance
from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from .player import Player, SkillLevel


LARGE_SKILL_RANGE = 6.0
HIGH_STD_DEV = 2.5
WELL_BALANCED_DIFFERENCE = 1.0
REBALANCE_DIFFERENCE = 2.0


class TeamStrengthLevel(str, Enum):
    WEAK = "weak"
    AVERAGE = "average"
    STRONG = "strong"
    ELITE = "elite"

    @classmethod
    def from_average(cls, average_rank: float) -> "TeamStrengthLevel":
        """Classify on half-open intervals: 4.0 is average, 8.0 is elite."""

        if average_rank < 4.0:
            return cls.WEAK
        if average_rank < 6.0:
            return cls.AVERAGE
        if average_rank < 8.0:
            return cls.STRONG
        return cls.ELITE


class BalanceQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    VERY_POOR = "very_poor"

    @classmethod
    def from_score(cls, score: float) -> "BalanceQuality":
        if score >= 0.9:
            return cls.EXCELLENT
        if score >= 0.8:
            return cls.GOOD
        if score >= 0.6:
            return cls.FAIR
        if score >= 0.4:
            return cls.POOR
        return cls.VERY_POOR


class TeamMembershipError(ValueError):
    """Raised when a player is added twice or removed while absent."""

    def __init__(self, message: str, player_id: str):
        super().__init__(message)
        self.message = message
        self.player_id = player_id


@dataclass(frozen=True)
class SkillBreakdown:
    technical: float
    agility: float
    endurance: float
    teamwork: float


@dataclass(frozen=True)
class TeamComposition:
    beginners: int = 0
    novices: int = 0
    intermediates: int = 0
    advanced: int = 0
    experts: int = 0

    @property
    def total(self) -> int:
        return self.beginners + self.novices + self.intermediates + self.advanced + self.experts


@dataclass(frozen=True)
class TeamCompositionIssue:
    code: str
    message: str


@dataclass
class TeamCompositionReport:
    """
    Outcome of checking a team against composition rules.

    Attributes:
        is_valid: False when any blocking issue was found.
        issues: Blocking problems (empty team, duplicate players).
        warnings: Advisory findings (single player, wide skill spread).
    """

    is_valid: bool
    issues: List[TeamCompositionIssue] = field(default_factory=list)
    warnings: List[TeamCompositionIssue] = field(default_factory=list)


@dataclass(frozen=True)
class TeamSummary:
    team_id: str
    player_count: int
    average_skill: float
    strength_level: TeamStrengthLevel
    balance_score: float
    balance_quality: BalanceQuality
    skill_range: float
    created_at: datetime


@dataclass(frozen=True)
class TeamComparison:
    skill_difference: float
    balance_difference: float
    is_well_balanced: bool
    needs_rebalance: bool


class Team:
    """A generated team whose metrics always reflect its current players.

    Players change only through :meth:`add_player` and :meth:`remove_player`;
    both run :meth:`recalculate`, so ``average_rank`` and ``strength_level``
    never go stale. ``balance_score`` is assigned by the balance engine.
    """

    def __init__(
        self,
        players: Iterable[Player] = (),
        *,
        team_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = team_id or uuid4().hex
        self.created_at = created_at or datetime.now(timezone.utc)
        self._players: List[Player] = []
        self._average_rank = 0.0
        self._strength_level = TeamStrengthLevel.WEAK
        self._balance_score = 0.0
        for player in players:
            self._append(player)
        self.recalculate()

    def __repr__(self) -> str:
        return f"Team(id={self.id!r}, players={len(self._players)}, average_rank={self._average_rank:.2f})"

    # -- membership -----------------------------------------------------

    @property
    def players(self) -> Tuple[Player, ...]:
        return tuple(self._players)

    @property
    def player_ids(self) -> Tuple[str, ...]:
        return tuple(player.id for player in self._players)

    @property
    def total_players(self) -> int:
        return len(self._players)

    def get_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self._players if p.id == player_id), None)

    def _append(self, player: Player) -> None:
        if self.get_player(player.id) is not None:
            raise TeamMembershipError(f"{player.name} is already in this team", player.id)
        self._players.append(player)

    def add_player(self, player: Player) -> None:
        self._append(player)
        self.recalculate()

    def remove_player(self, player_id: str) -> Player:
        player = self.get_player(player_id)
        if player is None:
            raise TeamMembershipError(f"Player {player_id} not found in team", player_id)
        self._players.remove(player)
        self.recalculate()
        return player

    def recalculate(self) -> None:
        """Recompute average rank and strength level from the current players."""

        if not self._players:
            self._average_rank = 0.0
            self._strength_level = TeamStrengthLevel.WEAK
            return
        self._average_rank = sum(p.overall for p in self._players) / len(self._players)
        self._strength_level = TeamStrengthLevel.from_average(self._average_rank)

    # -- engine-assigned score -------------------------------------------

    @property
    def balance_score(self) -> float:
        return self._balance_score

    def assign_balance_score(self, score: float) -> None:
        self._balance_score = max(0.0, min(1.0, float(score)))

    @property
    def balance_quality(self) -> BalanceQuality:
        return BalanceQuality.from_score(self._balance_score)

    # -- derived metrics -------------------------------------------------

    @property
    def average_rank(self) -> float:
        return self._average_rank

    @property
    def strength_level(self) -> TeamStrengthLevel:
        return self._strength_level

    @property
    def total_rank(self) -> float:
        return sum(p.overall for p in self._players)

    @property
    def skill_variance(self) -> float:
        if len(self._players) < 2:
            return 0.0
        return pvariance((p.overall for p in self._players), mu=self._average_rank)

    @property
    def skill_std_dev(self) -> float:
        if len(self._players) < 2:
            return 0.0
        return pstdev((p.overall for p in self._players), mu=self._average_rank)

    @property
    def min_skill(self) -> float:
        return min((p.overall for p in self._players), default=0.0)

    @property
    def max_skill(self) -> float:
        return max((p.overall for p in self._players), default=0.0)

    @property
    def skill_range(self) -> float:
        return self.max_skill - self.min_skill

    @property
    def skill_breakdown(self) -> SkillBreakdown:
        count = len(self._players)
        if count == 0:
            return SkillBreakdown(technical=0.0, agility=0.0, endurance=0.0, teamwork=0.0)
        return SkillBreakdown(
            technical=sum(p.skills.technical for p in self._players) / count,
            agility=sum(p.skills.agility for p in self._players) / count,
            endurance=sum(p.skills.endurance for p in self._players) / count,
            teamwork=sum(p.skills.teamwork for p in self._players) / count,
        )

    @property
    def composition(self) -> TeamComposition:
        counts = Counter(p.skill_level for p in self._players)
        return TeamComposition(
            beginners=counts.get(SkillLevel.BEGINNER, 0),
            novices=counts.get(SkillLevel.NOVICE, 0),
            intermediates=counts.get(SkillLevel.INTERMEDIATE, 0),
            advanced=counts.get(SkillLevel.ADVANCED, 0),
            experts=counts.get(SkillLevel.EXPERT, 0),
        )

    # -- analysis --------------------------------------------------------

    def validate_composition(self) -> TeamCompositionReport:
        issues: List[TeamCompositionIssue] = []
        warnings: List[TeamCompositionIssue] = []

        if not self._players:
            issues.append(TeamCompositionIssue(code="EMPTY_TEAM", message="Team cannot be empty"))
        elif len(self._players) == 1:
            warnings.append(TeamCompositionIssue(code="SINGLE_PLAYER", message="Team has only one player"))

        if len(set(self.player_ids)) != len(self._players):
            issues.append(
                TeamCompositionIssue(code="DUPLICATE_PLAYERS", message="Team contains duplicate players")
            )

        if self.skill_range > LARGE_SKILL_RANGE:
            warnings.append(
                TeamCompositionIssue(
                    code="LARGE_SKILL_GAP",
                    message=f"Large skill gap in team (range: {self.skill_range:.1f})",
                )
            )

        if self.skill_std_dev > HIGH_STD_DEV:
            warnings.append(
                TeamCompositionIssue(
                    code="HIGH_VARIANCE",
                    message=f"High skill variance (std dev: {self.skill_std_dev:.1f})",
                )
            )

        return TeamCompositionReport(is_valid=not issues, issues=issues, warnings=warnings)

    def summary(self) -> TeamSummary:
        return TeamSummary(
            team_id=self.id,
            player_count=self.total_players,
            average_skill=self._average_rank,
            strength_level=self._strength_level,
            balance_score=self._balance_score,
            balance_quality=self.balance_quality,
            skill_range=self.skill_range,
            created_at=self.created_at,
        )

    def compare_balance(self, other: "Team") -> TeamComparison:
        skill_difference = abs(self._average_rank - other.average_rank)
        return TeamComparison(
            skill_difference=skill_difference,
            balance_difference=abs(self._balance_score - other.balance_score),
            is_well_balanced=skill_difference < WELL_BALANCED_DIFFERENCE,
            needs_rebalance=skill_difference > REBALANCE_DIFFERENCE,
        )
