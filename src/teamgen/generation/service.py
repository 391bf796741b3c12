"""End-to-end team generation: validate, build with retry, score, record stats."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from statistics import fmean
from typing import Callable, List, Optional, Protocol, Sequence

import anyio

from teamgen.balance import BalanceEngine, GenerationMode
from teamgen.config import GenerationRules
from teamgen.errors import EmptyPlayerList, GenerationFailed, InvalidTeamCount
from teamgen.models import Player, Team
from teamgen.persistence import PlayerStore

from .events import (
    EventSink,
    GenerationEvent,
    TeamGenerationCompleted,
    TeamGenerationFailed,
    TeamGenerationStarted,
    publish_quietly,
)
from .validation import (
    DistributionPreview,
    GenerationValidation,
    assess_pool,
    check_player_integrity,
    preview_distribution,
)


logger = logging.getLogger(__name__)


class TeamGenerator(Protocol):
    def generate_teams(self, players: Sequence[Player], team_count: int, mode: GenerationMode) -> List[Team]: ...

    def calculate_balance_scores(self, teams: Sequence[Team]) -> List[Team]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TeamGenerationService:
    """Orchestrates one generation request against a player store.

    Callers must not run :meth:`execute` concurrently for the same player
    pool; statistics are read once and written once per call with no lock.
    """

    def __init__(
        self,
        store: PlayerStore,
        *,
        engine: Optional[TeamGenerator] = None,
        events: Optional[EventSink] = None,
        rules: Optional[GenerationRules] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._engine = engine or BalanceEngine()
        self._events = events
        self._rules = rules or GenerationRules.from_env()
        self._clock = clock

    @property
    def rules(self) -> GenerationRules:
        return self._rules

    async def execute(self, team_count: int, mode: GenerationMode | str) -> List[Team]:
        resolved = GenerationMode.parse(mode)
        start = time.perf_counter()

        players = await self._store.fetch_selected()
        validation = assess_pool(players, team_count, resolved, self._rules)
        if validation.error is not None:
            logger.info("Rejected generation request: %s", validation.error.message)
            raise validation.error
        check_player_integrity(players)

        self._publish(TeamGenerationStarted(player_count=len(players), team_count=team_count, mode=resolved))
        logger.info(
            "Starting team generation – players=%s, teams=%s, mode=%s",
            len(players),
            team_count,
            resolved.value,
        )

        try:
            teams = await self._generate_with_retry(players, team_count, resolved)
            teams = self._engine.calculate_balance_scores(teams)
            for team in teams:
                team.recalculate()
            await self._record_statistics(players, teams)
        except Exception as exc:
            logger.warning("Team generation failed: %s", exc)
            self._publish(TeamGenerationFailed(error=exc, player_count=len(players), team_count=team_count))
            raise

        average_balance = fmean(team.balance_score for team in teams)
        elapsed = time.perf_counter() - start
        self._publish(
            TeamGenerationCompleted(teams=tuple(teams), average_balance=average_balance, generation_time=elapsed)
        )
        logger.info(
            "Completed team generation – %s teams, mean balance %.3f (%.3fs)",
            len(teams),
            average_balance,
            elapsed,
        )
        return teams

    async def validate_team_generation(self, team_count: int, mode: GenerationMode | str) -> GenerationValidation:
        resolved = GenerationMode.parse(mode)
        if team_count < 2:
            return assess_pool([], team_count, resolved, self._rules)
        players = await self._store.fetch_selected()
        return assess_pool(players, team_count, resolved, self._rules)

    async def preview_team_distribution(self, team_count: int) -> DistributionPreview:
        players = await self._store.fetch_selected()
        if not players:
            raise EmptyPlayerList()
        if team_count < 2:
            raise InvalidTeamCount(team_count)
        return preview_distribution(players, team_count)

    async def _generate_with_retry(
        self,
        players: Sequence[Player],
        team_count: int,
        mode: GenerationMode,
    ) -> List[Team]:
        max_attempts = self._rules.max_attempts
        attempt = 1
        while True:
            try:
                teams = self._engine.generate_teams(players, team_count, mode)
                self._check_output(teams, team_count)
                return teams
            except GenerationFailed as exc:
                if attempt >= max_attempts:
                    logger.warning("Giving up after %s/%s attempts: %s", attempt, max_attempts, exc.reason)
                    raise
                logger.info(
                    "Attempt %s/%s failed (%s); retrying in %.2fs",
                    attempt,
                    max_attempts,
                    exc.reason,
                    self._rules.retry_backoff,
                )
            await anyio.sleep(self._rules.retry_backoff)
            attempt += 1

    @staticmethod
    def _check_output(teams: Sequence[Team], expected_count: int) -> None:
        if len(teams) != expected_count:
            raise GenerationFailed(f"Generated {len(teams)} teams, expected {expected_count}")
        for index, team in enumerate(teams, start=1):
            if not team.players:
                raise GenerationFailed(f"Team {index} is empty")
            if team.average_rank <= 0:
                raise GenerationFailed(f"Team {index} has invalid average rank")

    async def _record_statistics(self, players: Sequence[Player], teams: Sequence[Team]) -> None:
        placed = {player_id for team in teams for player_id in team.player_ids}
        now = self._clock()
        updated = [
            player.with_statistics(player.statistics.record_game(now)) if player.id in placed else player
            for player in players
        ]
        skipped = len(players) - sum(1 for player in players if player.id in placed)
        if skipped:
            logger.warning("%s selected players were not placed in a team; their statistics are unchanged", skipped)
        await self._store.save_all(updated)

    def _publish(self, event: GenerationEvent) -> None:
        publish_quietly(self._events, event)
