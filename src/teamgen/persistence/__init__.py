"""Player store contract and the in-memory store used by the CLI and tests."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from teamgen.models import Player


class PlayerStore(Protocol):
    """What the orchestrator needs from player storage."""

    async def fetch_selected(self) -> List[Player]: ...

    async def save_all(self, players: Sequence[Player]) -> None: ...


class InMemoryPlayerStore:
    """Dict-backed player repository keyed by id, in insertion order."""

    def __init__(self, players: Iterable[Player] = ()):
        self._players: Dict[str, Player] = {}
        for player in players:
            self._players[player.id] = player

    async def fetch_all(self) -> List[Player]:
        return list(self._players.values())

    async def fetch(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    async def save(self, player: Player) -> None:
        self._players[player.id] = player

    async def save_all(self, players: Sequence[Player]) -> None:
        for player in players:
            self._players[player.id] = player

    async def delete(self, player_id: str) -> None:
        self._players.pop(player_id, None)

    async def delete_all(self, player_ids: Iterable[str]) -> None:
        for player_id in player_ids:
            self._players.pop(player_id, None)

    async def fetch_selected(self) -> List[Player]:
        return [player for player in self._players.values() if player.is_selected]

    async def update_selection(self, player_id: str, is_selected: bool) -> None:
        player = self._players.get(player_id)
        if player is None:
            raise KeyError(f"Player {player_id} not found")
        self._players[player_id] = player.with_selection(is_selected)

    async def reset_all_selections(self) -> None:
        for player_id, player in list(self._players.items()):
            if player.is_selected:
                self._players[player_id] = player.with_selection(False)

    async def fetch_by_minimum_skill(self, minimum: float) -> List[Player]:
        return [player for player in self._players.values() if player.overall >= minimum]

    async def has_players(self) -> bool:
        return bool(self._players)

    async def count(self) -> int:
        return len(self._players)


__all__ = ["InMemoryPlayerStore", "PlayerStore"]
