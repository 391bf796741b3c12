"""Player management use cases."""

from .service import InvalidPlayerName, InvalidSkillValue, PlayerNotFound, RosterError, RosterService

__all__ = [
    "InvalidPlayerName",
    "InvalidSkillValue",
    "PlayerNotFound",
    "RosterError",
    "RosterService",
]
