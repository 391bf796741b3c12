"""Input adapters that normalize raw roster data."""

from .roster import (
    DEFAULT_ROSTER_MAPPING,
    RosterRow,
    load_roster_csv,
    load_roster_rows,
    rows_to_players,
    write_roster_csv,
)

__all__ = [
    "DEFAULT_ROSTER_MAPPING",
    "RosterRow",
    "load_roster_csv",
    "load_roster_rows",
    "rows_to_players",
    "write_roster_csv",
]
