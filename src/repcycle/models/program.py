"""Generated (not yet persisted) training program models."""

from dataclasses import dataclass, field
from enum import Enum

from ..errors import ProgramValidationError
from .exercises import Equipment, Exercise, MuscleGroup


class Focus(str, Enum):
    """Training focus chosen by the user."""

    BALANCED = "Balanced"
    STRENGTH = "Strength"
    ENDURANCE = "Endurance"


class SplitType(str, Enum):
    """Template pattern used to spread muscle groups over the week."""

    FULL_BODY = "Full Body"
    UPPER_LOWER = "Upper/Lower"
    PUSH_PULL_LEGS = "Push/Pull/Legs"


@dataclass
class SetsRepsScheme:
    """Sets and rep range for a focus."""

    sets: int
    reps_min: int
    reps_max: int


@dataclass
class GenerationInput:
    """User choices that drive program generation."""

    frequency: int
    equipment: list[Equipment]
    focus: Focus = Focus.BALANCED

    def validate(self) -> "GenerationInput":
        """Coerce raw values to enums, raising on anything unknown."""
        try:
            focus = Focus(self.focus)
        except ValueError:
            raise ProgramValidationError(
                f"Unknown focus '{self.focus}'. Expected one of: "
                + ", ".join(f.value for f in Focus)
            ) from None

        equipment = []
        for item in self.equipment or []:
            try:
                equipment.append(Equipment(item))
            except ValueError:
                raise ProgramValidationError(f"Unknown equipment '{item}'") from None

        if not isinstance(self.frequency, int) or isinstance(self.frequency, bool):
            raise ProgramValidationError(f"Frequency must be an integer, got {self.frequency!r}")

        self.focus = focus
        self.equipment = equipment
        return self


@dataclass
class ProgramExercise:
    """An exercise slot within a session."""

    exercise: Exercise
    sets: int
    reps_min: int
    reps_max: int
    order: int  # 1-based position in session

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exercise": self.exercise.to_dict(),
            "sets": self.sets,
            "reps_min": self.reps_min,
            "reps_max": self.reps_max,
            "order": self.order,
        }


@dataclass
class ProgramSession:
    """A single training day of a generated program."""

    name: str
    day_of_week: int
    primary_muscles: list[MuscleGroup]
    exercises: list[ProgramExercise] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "day_of_week": self.day_of_week,
            "primary_muscles": [mg.value for mg in self.primary_muscles],
            "exercises": [ex.to_dict() for ex in self.exercises],
        }


@dataclass
class WorkoutProgram:
    """A complete generated program awaiting user acceptance."""

    name: str
    focus: Focus
    duration_weeks: int
    sessions_per_week: int
    sessions: list[ProgramSession]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "focus": self.focus.value,
            "duration_weeks": self.duration_weeks,
            "sessions_per_week": self.sessions_per_week,
            "sessions": [s.to_dict() for s in self.sessions],
        }

    def get_summary(self) -> str:
        """Generate a summary of the program."""
        summary = f"Program: {self.name}\n"
        summary += f"Duration: {self.duration_weeks} weeks, {self.sessions_per_week} days/week\n\n"

        for session in self.sessions:
            muscles = ", ".join(mg.value for mg in session.primary_muscles)
            summary += f"  Day {session.day_of_week}: {session.name} ({muscles})\n"
            for ex in session.exercises:
                summary += (
                    f"    {ex.order}. {ex.exercise.name}: "
                    f"{ex.sets}x{ex.reps_min}-{ex.reps_max}\n"
                )
            if not session.exercises:
                summary += "    (no eligible exercises)\n"

        return summary
