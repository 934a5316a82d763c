"""Completed workout history records."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class SessionType(str, Enum):
    """Kind of completed session."""

    PLAN = "plan"
    SINGLE = "single"


# Persisted marker for sessions that are not tied to a plan template
LEGACY_SINGLE_TEMPLATE_ID = -1


@dataclass(kw_only=True)
class CompletedSession(ABC):
    """A concrete, timestamped workout instance.

    Use ``PlanSession`` or ``SingleExerciseSession``; ``from_dict`` picks
    the right variant from a persisted record.
    """

    workout_plan_id: int
    started_at: str
    completed_at: str | None = None
    notes: str | None = None
    id: int | None = None

    session_type: ClassVar[SessionType]

    @property
    def is_in_progress(self) -> bool:
        """True until the session has been completed."""
        return self.completed_at is None

    def _base_dict(self) -> dict:
        return {
            "id": self.id,
            "workout_plan_id": self.workout_plan_id,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "notes": self.notes,
            "session_type": self.session_type.value,
        }

    @abstractmethod
    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""

    @staticmethod
    def from_dict(data: dict) -> "PlanSession | SingleExerciseSession":
        """Create the matching variant from a persisted record.

        Records without ``session_type`` are plan sessions. A plan record
        carrying the single-session template marker is rejected.
        """
        raw_type = data.get("session_type") or SessionType.PLAN.value
        session_type = SessionType(raw_type)
        common = {
            "id": data.get("id"),
            "workout_plan_id": data["workout_plan_id"],
            "started_at": data["started_at"],
            "completed_at": data.get("completed_at"),
            "notes": data.get("notes"),
        }

        if session_type is SessionType.SINGLE:
            exercise_id = data.get("exercise_id")
            if exercise_id is None:
                raise ValueError(
                    f"Single-exercise session {data.get('id')} has no exercise_id"
                )
            return SingleExerciseSession(exercise_id=exercise_id, **common)

        template_id = data.get("session_template_id")
        if template_id is None or template_id == LEGACY_SINGLE_TEMPLATE_ID:
            raise ValueError(
                f"Plan session {data.get('id')} has no valid session_template_id"
            )
        return PlanSession(session_template_id=template_id, **common)


@dataclass(kw_only=True)
class PlanSession(CompletedSession):
    """A performed instance of a plan's session template."""

    session_template_id: int

    session_type: ClassVar[SessionType] = SessionType.PLAN

    def to_dict(self) -> dict:
        data = self._base_dict()
        data["session_template_id"] = self.session_template_id
        data["exercise_id"] = None
        return data


@dataclass(kw_only=True)
class SingleExerciseSession(CompletedSession):
    """An ad-hoc session for one exercise outside the plan cycle."""

    exercise_id: int

    session_type: ClassVar[SessionType] = SessionType.SINGLE

    def to_dict(self) -> dict:
        data = self._base_dict()
        data["session_template_id"] = LEGACY_SINGLE_TEMPLATE_ID
        data["exercise_id"] = self.exercise_id
        return data


@dataclass
class CompletedSet:
    """A single logged set."""

    completed_session_id: int
    exercise_id: int
    set_number: int
    weight: float
    reps: int
    completed_at: str
    is_warmup: bool = False
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "completed_session_id": self.completed_session_id,
            "exercise_id": self.exercise_id,
            "set_number": self.set_number,
            "weight": self.weight,
            "reps": self.reps,
            "is_warmup": self.is_warmup,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedSet":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            completed_session_id=data["completed_session_id"],
            exercise_id=data["exercise_id"],
            set_number=data["set_number"],
            weight=data["weight"],
            reps=data["reps"],
            is_warmup=bool(data.get("is_warmup", False)),
            completed_at=data["completed_at"],
        )
