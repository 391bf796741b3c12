"""Generation orchestrator, request validation and lifecycle events."""

from .events import (
    EventSink,
    GenerationEvent,
    RecordingEventSink,
    TeamGenerationCompleted,
    TeamGenerationFailed,
    TeamGenerationStarted,
)
from .service import TeamGenerationService, TeamGenerator
from .validation import (
    DistributionPreview,
    GenerationRecommendation,
    GenerationValidation,
    GenerationWarning,
    RecommendationKind,
    WarningKind,
    assess_pool,
    check_player_integrity,
    estimate_balance,
    preview_distribution,
)

__all__ = [
    "EventSink",
    "GenerationEvent",
    "RecordingEventSink",
    "TeamGenerationCompleted",
    "TeamGenerationFailed",
    "TeamGenerationStarted",
    "TeamGenerationService",
    "TeamGenerator",
    "DistributionPreview",
    "GenerationRecommendation",
    "GenerationValidation",
    "GenerationWarning",
    "RecommendationKind",
    "WarningKind",
    "assess_pool",
    "check_player_integrity",
    "estimate_balance",
    "preview_distribution",
]
