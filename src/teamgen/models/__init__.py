"""Player and team models shared across the engine and orchestrator."""

from .player import MAX_SKILL, MIN_SKILL, Player, PlayerSkills, PlayerStatistics, SkillLevel
from .team import (
    BalanceQuality,
    SkillBreakdown,
    Team,
    TeamComparison,
    TeamComposition,
    TeamCompositionIssue,
    TeamCompositionReport,
    TeamMembershipError,
    TeamStrengthLevel,
    TeamSummary,
)

__all__ = [
    "MAX_SKILL",
    "MIN_SKILL",
    "Player",
    "PlayerSkills",
    "PlayerStatistics",
    "SkillLevel",
    "BalanceQuality",
    "SkillBreakdown",
    "Team",
    "TeamComparison",
    "TeamComposition",
    "TeamCompositionIssue",
    "TeamCompositionReport",
    "TeamMembershipError",
    "TeamStrengthLevel",
    "TeamSummary",
]
