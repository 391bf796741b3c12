"""Helpers to load roster CSVs into canonical players and write them back."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from teamgen.models import Player, PlayerSkills, PlayerStatistics
from teamgen.models.player import SKILL_NAMES


logger = logging.getLogger(__name__)

DEFAULT_ROSTER_MAPPING = {
    "player_id": "id",
    "name": "name",
    "technical": "technical",
    "agility": "agility",
    "endurance": "endurance",
    "teamwork": "teamwork",
    "selected": "selected",
}

ROSTER_COLUMNS = (
    "id",
    "name",
    "technical",
    "agility",
    "endurance",
    "teamwork",
    "selected",
    "games_played",
    "teams_joined",
    "last_played",
)

_TRUTHY = {"1", "true", "yes", "y", "x"}
_FALSY = {"0", "false", "no", "n", ""}


class RosterRow(BaseModel):
    raw_id: Optional[str] = None
    raw_name: str
    raw_technical: str
    raw_agility: str
    raw_endurance: str
    raw_teamwork: str
    raw_selected: Optional[str] = None
    raw_games_played: Optional[str] = None
    raw_teams_joined: Optional[str] = None
    raw_last_played: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "RosterRow":
        def extract(spec: Optional[str | Sequence[str]], *, default: Optional[str] = None) -> Optional[str]:
            if spec is None:
                return default
            if isinstance(spec, str):
                value = row.get(spec)
                return value.strip() if value is not None else default
            parts = [row.get(col, "").strip() for col in spec if row.get(col)]
            return " ".join(parts) if parts else default

        def parse_spec(key: str, default_key: Optional[str] = None) -> Optional[str | Sequence[str]]:
            spec = mapping.get(key)
            if spec is None and default_key:
                spec = default_key
            if spec is None:
                return None
            if isinstance(spec, str) and "|" in spec:
                return tuple(part.strip() for part in spec.split("|"))
            return spec

        data = {
            "raw_id": extract(parse_spec("player_id", "id")),
            "raw_name": extract(parse_spec("name", "name"), default=""),
            "raw_selected": extract(parse_spec("selected", "selected")),
            "raw_games_played": extract(parse_spec("games_played", "games_played")),
            "raw_teams_joined": extract(parse_spec("teams_joined", "teams_joined")),
            "raw_last_played": extract(parse_spec("last_played", "last_played")),
        }
        for skill in SKILL_NAMES:
            data[f"raw_{skill}"] = extract(parse_spec(skill, skill), default="")
        return cls(**data)


def _parse_skill(raw: str, *, skill: str, line: int) -> int:
    try:
        value = float(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Row {line}: {skill} must be an integer, got {raw!r}") from exc
    if not value.is_integer():
        raise ValueError(f"Row {line}: {skill} must be an integer, got {raw!r}")
    return int(value)


def _parse_flag(value: Optional[str], *, default: bool = True) -> bool:
    if value is None:
        return default
    token = value.strip().lower()
    if token in _TRUTHY:
        return True
    if token in _FALSY:
        return False
    logger.warning("Unrecognised selection flag %r; treating as %s", value, default)
    return default


def _parse_count(value: Optional[str]) -> int:
    if not value:
        return 0
    try:
        return max(0, int(value))
    except ValueError:
        logger.warning("Invalid count %r; using 0", value)
        return 0


def load_roster_rows(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[RosterRow]:
    mapping = {**DEFAULT_ROSTER_MAPPING, **(mapping or {})}
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = [RosterRow.from_mapping(row, mapping) for row in reader]
    return rows


def rows_to_players(rows: Iterable[RosterRow]) -> List[Player]:
    players: List[Player] = []
    for line, row in enumerate(rows, start=2):
        skills = PlayerSkills(
            **{skill: _parse_skill(getattr(row, f"raw_{skill}"), skill=skill, line=line) for skill in SKILL_NAMES}
        )
        statistics = PlayerStatistics(
            games_played=_parse_count(row.raw_games_played),
            teams_joined=_parse_count(row.raw_teams_joined),
            last_played=row.raw_last_played or None,
        )
        fields = {
            "name": row.raw_name,
            "skills": skills,
            "statistics": statistics,
            "is_selected": _parse_flag(row.raw_selected),
        }
        if row.raw_id:
            fields["id"] = row.raw_id
        players.append(Player(**fields))
    return players


def load_roster_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[Player]:
    """Read a roster CSV into players; rows are selected unless flagged otherwise."""

    players = rows_to_players(load_roster_rows(path, mapping=mapping))
    logger.info(
        "Loaded %s players from %s (%s selected)",
        len(players),
        path,
        sum(1 for player in players if player.is_selected),
    )
    return players


def write_roster_csv(path: Path, players: Iterable[Player]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(ROSTER_COLUMNS)
        for player in players:
            stats = player.statistics
            writer.writerow([
                player.id,
                player.name,
                player.skills.technical,
                player.skills.agility,
                player.skills.endurance,
                player.skills.teamwork,
                "true" if player.is_selected else "false",
                stats.games_played,
                stats.teams_joined,
                stats.last_played.isoformat() if stats.last_played else "",
            ])
