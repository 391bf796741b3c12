"""Error taxonomy shared by the balance engine and the orchestrator."""

from __future__ import annotations


class TeamGenerationError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InsufficientPlayers(TeamGenerationError):
    def __init__(self, required: int, available: int):
        super().__init__(f"Need at least {required} players, but only {available} available")
        self.required = required
        self.available = available


class InvalidTeamCount(TeamGenerationError):
    def __init__(self, count: int):
        super().__init__(f"Invalid team count: {count}. Must be at least 2")
        self.count = count


class EmptyPlayerList(TeamGenerationError):
    def __init__(self) -> None:
        super().__init__("No players available for team generation")


class GenerationFailed(TeamGenerationError):
    """Engine-level failure; the only kind the orchestrator retries."""

    def __init__(self, reason: str):
        super().__init__(f"Team generation failed: {reason}")
        self.reason = reason
