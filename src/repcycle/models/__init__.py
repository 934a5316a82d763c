"""Data models for repcycle."""

from .exercises import ALL_MUSCLE_GROUPS, Equipment, Exercise, MuscleGroup, PriorityTier
from .history import (
    CompletedSession,
    CompletedSet,
    PlanSession,
    SessionType,
    SingleExerciseSession,
)
from .plan import ExerciseTemplate, SessionTemplate, WorkoutPlan
from .program import (
    Focus,
    GenerationInput,
    ProgramExercise,
    ProgramSession,
    SetsRepsScheme,
    SplitType,
    WorkoutProgram,
)
from .sync import (
    ActivityType,
    OutboxItem,
    SessionTiming,
    StravaConnectionState,
    StravaSyncPayload,
    SyncCompletedSessionInput,
    SyncResult,
)

__all__ = [
    "ActivityType",
    "ALL_MUSCLE_GROUPS",
    "CompletedSession",
    "CompletedSet",
    "Equipment",
    "Exercise",
    "ExerciseTemplate",
    "Focus",
    "GenerationInput",
    "MuscleGroup",
    "OutboxItem",
    "PlanSession",
    "PriorityTier",
    "ProgramExercise",
    "ProgramSession",
    "SessionTemplate",
    "SessionTiming",
    "SessionType",
    "SetsRepsScheme",
    "SingleExerciseSession",
    "SplitType",
    "StravaConnectionState",
    "StravaSyncPayload",
    "SyncCompletedSessionInput",
    "SyncResult",
    "WorkoutPlan",
    "WorkoutProgram",
]
