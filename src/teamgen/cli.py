"""Command-line interface for splitting a roster CSV into balanced teams."""

from __future__ import annotations

import argparse
import csv
import logging
import random
from pathlib import Path
from typing import Optional, Sequence

import anyio

from teamgen.balance import BalanceEngine, GenerationMode
from teamgen.config import GenerationRules
from teamgen.config_loader import MappingProfile
from teamgen.errors import TeamGenerationError
from teamgen.generation import GenerationValidation, RecordingEventSink, TeamGenerationService
from teamgen.ingest import load_roster_csv, write_roster_csv
from teamgen.models import Team
from teamgen.persistence import InMemoryPlayerStore


logger = logging.getLogger(__name__)

TEAM_COLUMNS = [
    "team",
    "team_id",
    "player_id",
    "player_name",
    "overall",
    "team_average",
    "strength_level",
    "balance_score",
]


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate balanced teams from a roster")
    parser.add_argument("roster", type=Path, help="Path to roster CSV")
    parser.add_argument("--teams", type=int, default=2, help="Number of teams to build")
    parser.add_argument(
        "--mode",
        default=GenerationMode.FAIR.value,
        choices=[mode.value for mode in GenerationMode],
        help="fair balances by skill, random shuffles",
    )
    parser.add_argument("--output", type=Path, default=Path("teams.csv"), help="Output CSV path")
    parser.add_argument(
        "--save-roster",
        type=Path,
        default=None,
        help="Write the roster with updated statistics to this path",
    )
    parser.add_argument(
        "--column",
        action="append",
        default=[],
        help="Mapping for roster CSV columns (e.g., name=First Name|Last Name)",
    )
    parser.add_argument("--load-profile", type=Path, help="Load column mapping JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save column mapping JSON", default=None)
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Check the request and print warnings without generating teams",
    )
    parser.add_argument("--preview", action="store_true", help="Print the expected team sizes first")
    parser.add_argument("--seed", type=int, default=None, help="Seed for random mode")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _print_validation(validation: GenerationValidation) -> None:
    for warning in validation.warnings:
        print(f"Warning: {warning.message}")
    for recommendation in validation.recommendations:
        print(f"Suggestion: {recommendation.message}")
    if validation.error is None:
        print(f"Estimated balance: {validation.estimated_balance:.2f}")


def write_teams_csv(path: Path, teams: Sequence[Team]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(TEAM_COLUMNS)
        for index, team in enumerate(teams, start=1):
            for player in team.players:
                writer.writerow([
                    index,
                    team.id,
                    player.id,
                    player.name,
                    f"{player.overall:.2f}",
                    f"{team.average_rank:.2f}",
                    team.strength_level.value,
                    f"{team.balance_score:.3f}",
                ])


async def _run(args: argparse.Namespace, service: TeamGenerationService, store: InMemoryPlayerStore) -> None:
    validation = await service.validate_team_generation(args.teams, args.mode)
    _print_validation(validation)
    if validation.error is not None:
        raise validation.error
    if args.validate_only:
        return

    if args.preview:
        preview = await service.preview_team_distribution(args.teams)
        sizes = ", ".join(str(size) for size in preview.players_per_team)
        print(f"Preview: team sizes {sizes} (estimated balance {preview.estimated_balance:.2f})")

    teams = await service.execute(args.teams, args.mode)
    write_teams_csv(args.output, teams)
    for index, team in enumerate(teams, start=1):
        print(
            f"Team {index}: {team.total_players} players, average {team.average_rank:.2f} "
            f"({team.strength_level.value}), balance {team.balance_score:.2f}"
        )
    print(f"Wrote {len(teams)} teams to {args.output}")

    if args.save_roster:
        write_roster_csv(args.save_roster, await store.fetch_all())
        print(f"Saved roster to {args.save_roster}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    mapping = _parse_mapping(args.column)
    if args.load_profile:
        profile = MappingProfile.load(args.load_profile)
        mapping = profile.roster_mapping | mapping
    if args.save_profile:
        MappingProfile(mapping).save(args.save_profile)
        print(f"Saved mapping profile to {args.save_profile}")

    players = load_roster_csv(args.roster, mapping=mapping or None)
    store = InMemoryPlayerStore(players)
    rng = random.Random(args.seed) if args.seed is not None else None
    events = RecordingEventSink()
    service = TeamGenerationService(
        store,
        engine=BalanceEngine(rng=rng),
        events=events,
        rules=GenerationRules.from_env(),
    )

    try:
        anyio.run(_run, args, service, store)
    except TeamGenerationError as exc:
        print(f"Team generation stopped: {exc.message}")
        raise SystemExit(1) from exc
    logger.debug("Published %s generation events", len(events.events))


if __name__ == "__main__":
    main()
