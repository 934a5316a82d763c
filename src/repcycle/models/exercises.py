"""Exercise definitions and metadata."""

from dataclasses import dataclass, field
from enum import Enum


class MuscleGroup(str, Enum):
    """Major muscle groups used for splits."""

    CHEST = "Chest"
    BACK = "Back"
    LEGS = "Legs"
    SHOULDERS = "Shoulders"
    ARMS = "Arms"
    CORE = "Core"


# Canonical display order
ALL_MUSCLE_GROUPS: list[MuscleGroup] = [
    MuscleGroup.CHEST,
    MuscleGroup.BACK,
    MuscleGroup.LEGS,
    MuscleGroup.SHOULDERS,
    MuscleGroup.ARMS,
    MuscleGroup.CORE,
]


class Equipment(str, Enum):
    """Equipment an exercise can require."""

    BARBELL = "Barbell"
    DUMBBELL = "Dumbbell"
    BODYWEIGHT = "Bodyweight"
    CABLES = "Cables"
    MACHINES = "Machines"
    BANDS = "Bands"


class PriorityTier(int, Enum):
    """Selection tier, lower is picked first."""

    COMPOUND = 1
    ISOLATION = 2


@dataclass
class Exercise:
    """Represents an exercise in the catalog."""

    name: str
    muscle_group: MuscleGroup
    equipment_required: Equipment | None
    is_compound: bool = False
    muscle_groups: list[MuscleGroup] = field(default_factory=list)
    description: str | None = None
    id: int | None = None

    def __post_init__(self):
        # Primary group always leads the list
        if not self.muscle_groups:
            self.muscle_groups = [self.muscle_group]
        elif self.muscle_groups[0] != self.muscle_group:
            rest = [mg for mg in self.muscle_groups if mg != self.muscle_group]
            self.muscle_groups = [self.muscle_group, *rest]

    @property
    def priority(self) -> PriorityTier:
        """Priority tier derived from the compound flag."""
        return PriorityTier.COMPOUND if self.is_compound else PriorityTier.ISOLATION

    @property
    def is_bodyweight(self) -> bool:
        """True when no equipment is needed."""
        return self.equipment_required in (None, Equipment.BODYWEIGHT)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "muscle_group": self.muscle_group.value,
            "muscle_groups": [mg.value for mg in self.muscle_groups],
            "equipment_required": (
                self.equipment_required.value if self.equipment_required else None
            ),
            "is_compound": self.is_compound,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        """Create from dictionary."""
        equipment = data.get("equipment_required")
        return cls(
            id=data.get("id"),
            name=data["name"],
            muscle_group=MuscleGroup(data["muscle_group"]),
            muscle_groups=[MuscleGroup(mg) for mg in data.get("muscle_groups") or []],
            equipment_required=Equipment(equipment) if equipment else None,
            is_compound=bool(data.get("is_compound", False)),
            description=data.get("description"),
        )
