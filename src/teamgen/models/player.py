"""Canonical player models shared by the engine, the orchestrator and ingest."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


MIN_SKILL = 1
MAX_SKILL = 10

SKILL_NAMES = ("technical", "agility", "endurance", "teamwork")


class SkillLevel(str, Enum):
    """Bucket of a player's overall rating at two-point intervals."""

    BEGINNER = "beginner"
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @classmethod
    def from_overall(cls, overall: float) -> "SkillLevel":
        if overall < 2.0:
            return cls.BEGINNER
        if overall < 4.0:
            return cls.NOVICE
        if overall < 6.0:
            return cls.INTERMEDIATE
        if overall < 8.0:
            return cls.ADVANCED
        return cls.EXPERT


class PlayerSkills(BaseModel):
    """Four integer ratings, clamped into [1, 10] on construction."""

    technical: int
    agility: int
    endurance: int
    teamwork: int

    model_config = ConfigDict(frozen=True)

    @field_validator(*SKILL_NAMES)
    @classmethod
    def _clamp(cls, value: int) -> int:
        return min(max(value, MIN_SKILL), MAX_SKILL)

    @property
    def overall(self) -> float:
        return (self.technical + self.agility + self.endurance + self.teamwork) / 4.0

    def as_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in SKILL_NAMES}


class PlayerStatistics(BaseModel):
    games_played: int = Field(default=0, ge=0)
    teams_joined: int = Field(default=0, ge=0)
    last_played: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    def record_game(self, when: datetime) -> "PlayerStatistics":
        """Return a copy counting one more game and team placement."""

        return self.model_copy(
            update={
                "games_played": self.games_played + 1,
                "teams_joined": self.teams_joined + 1,
                "last_played": when,
            }
        )


class Player(BaseModel):
    """Rated participant eligible for team generation."""

    id: str = Field(default_factory=lambda: uuid4().hex, min_length=1)
    name: str
    skills: PlayerSkills
    statistics: PlayerStatistics = Field(default_factory=PlayerStatistics)
    is_selected: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def overall(self) -> float:
        return self.skills.overall

    @property
    def skill_level(self) -> SkillLevel:
        return SkillLevel.from_overall(self.overall)

    def with_selection(self, is_selected: bool) -> "Player":
        return self.model_copy(update={"is_selected": is_selected})

    def with_statistics(self, statistics: PlayerStatistics) -> "Player":
        return self.model_copy(update={"statistics": statistics})
