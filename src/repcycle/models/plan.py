"""Persisted workout plan records."""

import json
from dataclasses import dataclass, field

from .exercises import Equipment, MuscleGroup
from .program import Focus


@dataclass
class WorkoutPlan:
    """A program the user accepted and saved.

    Timestamps are kept as ISO strings so that backups round-trip exactly.
    """

    name: str
    weekly_frequency: int
    duration_weeks: int
    focus: Focus
    created_at: str
    equipment_used: list[Equipment] = field(default_factory=list)
    description: str | None = None
    estimated_duration_minutes: int | None = None
    is_active: bool = True
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "weekly_frequency": self.weekly_frequency,
            "duration_weeks": self.duration_weeks,
            "focus": self.focus.value,
            "equipment_used": [eq.value for eq in self.equipment_used],
            "estimated_duration_minutes": self.estimated_duration_minutes,
            "created_at": self.created_at,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutPlan":
        """Create from dictionary.

        Older backups carry neither ``focus`` nor ``equipment_used``; the
        focus is then recovered from the description when possible.
        """
        focus = data.get("focus")
        if focus is None:
            description = data.get("description") or ""
            focus = next(
                (f.value for f in Focus if description.startswith(f.value)),
                Focus.BALANCED.value,
            )
        return cls(
            id=data.get("id"),
            name=data["name"],
            description=data.get("description"),
            weekly_frequency=data["weekly_frequency"],
            duration_weeks=data["duration_weeks"],
            focus=Focus(focus),
            equipment_used=[Equipment(eq) for eq in data.get("equipment_used") or []],
            estimated_duration_minutes=data.get("estimated_duration_minutes"),
            created_at=data["created_at"],
            is_active=bool(data.get("is_active", True)),
        )


@dataclass
class SessionTemplate:
    """One workout day within a plan's repeating cycle."""

    workout_plan_id: int
    sequence_order: int
    name: str
    target_muscle_groups: str  # JSON list
    estimated_duration_minutes: int | None = None
    id: int | None = None

    @property
    def muscle_groups(self) -> list[MuscleGroup]:
        """Decoded target muscle groups."""
        if not self.target_muscle_groups:
            return []
        return [MuscleGroup(mg) for mg in json.loads(self.target_muscle_groups)]

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "workout_plan_id": self.workout_plan_id,
            "sequence_order": self.sequence_order,
            "name": self.name,
            "target_muscle_groups": self.target_muscle_groups,
            "estimated_duration_minutes": self.estimated_duration_minutes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionTemplate":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            workout_plan_id=data["workout_plan_id"],
            sequence_order=data["sequence_order"],
            name=data["name"],
            target_muscle_groups=data.get("target_muscle_groups") or "[]",
            estimated_duration_minutes=data.get("estimated_duration_minutes"),
        )


@dataclass
class ExerciseTemplate:
    """An exercise slot within a session template."""

    session_template_id: int
    exercise_id: int
    exercise_order: int
    sets: int
    reps: int
    is_warmup: bool = False
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "session_template_id": self.session_template_id,
            "exercise_id": self.exercise_id,
            "exercise_order": self.exercise_order,
            "sets": self.sets,
            "reps": self.reps,
            "is_warmup": self.is_warmup,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseTemplate":
        """Create from dictionary."""
        return cls(
            id=data.get("id"),
            session_template_id=data["session_template_id"],
            exercise_id=data["exercise_id"],
            exercise_order=data["exercise_order"],
            sets=data["sets"],
            reps=data["reps"],
            is_warmup=bool(data.get("is_warmup", False)),
        )
