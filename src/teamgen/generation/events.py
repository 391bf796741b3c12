"""Lifecycle events emitted around a generation run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar, List, Optional, Protocol, Tuple
from uuid import uuid4

from teamgen.balance import GenerationMode
from teamgen.models import Team


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TeamGenerationStarted:
    event_type: ClassVar[str] = "TeamGenerationStarted"

    player_count: int
    team_count: int
    mode: GenerationMode
    event_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class TeamGenerationCompleted:
    event_type: ClassVar[str] = "TeamGenerationCompleted"

    teams: Tuple[Team, ...]
    average_balance: float
    generation_time: float
    event_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class TeamGenerationFailed:
    event_type: ClassVar[str] = "TeamGenerationFailed"

    error: Exception
    player_count: int
    team_count: int
    event_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=_utcnow)


GenerationEvent = TeamGenerationStarted | TeamGenerationCompleted | TeamGenerationFailed


class EventSink(Protocol):
    def publish(self, event: GenerationEvent) -> None: ...


class RecordingEventSink:
    """Keeps every published event in order."""

    def __init__(self) -> None:
        self.events: List[GenerationEvent] = []

    def publish(self, event: GenerationEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> List[GenerationEvent]:
        return [event for event in self.events if event.event_type == event_type]


def publish_quietly(sink: Optional[EventSink], event: GenerationEvent) -> None:
    """Deliver ``event`` without letting the sink affect the generation outcome."""

    if sink is None:
        return
    try:
        sink.publish(event)
    except Exception:
        logger.exception("Event sink failed to publish %s", event.event_type)
