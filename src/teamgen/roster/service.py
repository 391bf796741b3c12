"""Player management on top of the in-memory player store."""

from __future__ import annotations

import logging
from typing import List, Mapping

from teamgen.models import MAX_SKILL, MIN_SKILL, Player, PlayerSkills
from teamgen.models.player import SKILL_NAMES
from teamgen.persistence import InMemoryPlayerStore


logger = logging.getLogger(__name__)


class RosterError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPlayerName(RosterError):
    def __init__(self) -> None:
        super().__init__("Player name cannot be empty")


class InvalidSkillValue(RosterError):
    def __init__(self, skill: str, value: int):
        super().__init__(f"Skill {skill}={value} must be between {MIN_SKILL} and {MAX_SKILL}")
        self.skill = skill
        self.value = value


class PlayerNotFound(RosterError):
    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


class RosterService:
    def __init__(self, store: InMemoryPlayerStore):
        self._store = store

    async def add_player(self, name: str, skills: PlayerSkills | Mapping[str, int]) -> Player:
        trimmed = name.strip()
        if not trimmed:
            raise InvalidPlayerName()
        if isinstance(skills, Mapping):
            self._check_raw_skills(skills)
            skills = PlayerSkills(**skills)
        player = Player(name=trimmed, skills=skills)
        await self._store.save(player)
        logger.info("Added player %s (%s, overall %.2f)", player.name, player.id, player.overall)
        return player

    async def update_player(self, player: Player) -> None:
        if not player.name.strip():
            raise InvalidPlayerName()
        self._check_raw_skills(player.skills.as_dict())
        await self._require(player.id)
        await self._store.save(player)
        logger.info("Updated player %s (%s)", player.name, player.id)

    async def delete_player(self, player_id: str) -> None:
        await self._require(player_id)
        await self._store.delete(player_id)
        logger.info("Deleted player %s", player_id)

    async def toggle_selection(self, player_id: str) -> Player:
        player = await self._require(player_id)
        await self._store.update_selection(player_id, not player.is_selected)
        return await self._require(player_id)

    async def set_selection(self, player_id: str, is_selected: bool) -> None:
        await self._require(player_id)
        await self._store.update_selection(player_id, is_selected)

    async def reset_selections(self) -> None:
        await self._store.reset_all_selections()

    async def list_players(self) -> List[Player]:
        return await self._store.fetch_all()

    async def list_selected(self) -> List[Player]:
        return await self._store.fetch_selected()

    async def _require(self, player_id: str) -> Player:
        player = await self._store.fetch(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        return player

    @staticmethod
    def _check_raw_skills(skills: Mapping[str, int]) -> None:
        for skill in SKILL_NAMES:
            value = skills.get(skill)
            if value is None:
                raise RosterError(f"Missing skill {skill}")
            try:
                rating = int(value)
            except (TypeError, ValueError) as exc:
                raise RosterError(f"Skill {skill} must be an integer, got {value!r}") from exc
            if not MIN_SKILL <= rating <= MAX_SKILL:
                raise InvalidSkillValue(skill, rating)
