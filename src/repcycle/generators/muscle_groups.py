"""Training splits and weekly volume distribution.

Each split maps a weekly frequency to a fixed list of sessions. Sessions are
numbered 1..frequency and together always cover every major muscle group.

Example (frequency 4):
```
Day 1  Upper Body A   Chest, Back, Shoulders
Day 2  Lower Body A   Legs
Day 3  Upper Body B   Chest, Back, Arms
Day 4  Lower Body B   Legs, Core
```
"""

import string
from dataclasses import dataclass

from ..models.exercises import ALL_MUSCLE_GROUPS, MuscleGroup
from ..models.program import Focus, SplitType

MG = MuscleGroup

# Weekly working sets per muscle by focus
WEEKLY_VOLUME = {
    Focus.BALANCED: 16,
    Focus.STRENGTH: 12,
    Focus.ENDURANCE: 14,
}

_UPPER_LOWER = [
    ("Upper Body A", [MG.CHEST, MG.BACK, MG.SHOULDERS]),
    ("Lower Body A", [MG.LEGS]),
    ("Upper Body B", [MG.CHEST, MG.BACK, MG.ARMS]),
    ("Lower Body B", [MG.LEGS, MG.CORE]),
]

_PUSH_PULL_LEGS = [
    ("Push Day", [MG.CHEST, MG.SHOULDERS]),
    ("Pull Day", [MG.BACK, MG.ARMS]),
    ("Leg Day", [MG.LEGS]),
    ("Upper Day", [MG.CHEST, MG.BACK, MG.SHOULDERS]),
    ("Lower Day", [MG.LEGS, MG.CORE]),
]


@dataclass
class SessionSlot:
    """A day of the split before any exercises are chosen."""

    name: str
    day_of_week: int
    muscles: list[MuscleGroup]


def get_split_type(frequency: int) -> SplitType:
    """Pick the split for a weekly frequency. Out-of-range values get Full Body."""
    if frequency == 4:
        return SplitType.UPPER_LOWER
    if frequency == 5:
        return SplitType.PUSH_PULL_LEGS
    return SplitType.FULL_BODY


def distribute_muscle_groups(frequency: int) -> list[SessionSlot]:
    """Assign target muscle groups to each training day.

    Args:
        frequency: Sessions per week. Values below 1 are treated as 1.

    Returns:
        Exactly ``max(frequency, 1)`` sessions with days numbered from 1
    """
    frequency = max(frequency, 1)
    split = get_split_type(frequency)

    if split == SplitType.UPPER_LOWER:
        layout = _UPPER_LOWER
    elif split == SplitType.PUSH_PULL_LEGS:
        layout = _PUSH_PULL_LEGS
    else:
        layout = [
            (f"Full Body {_session_label(i)}", list(ALL_MUSCLE_GROUPS))
            for i in range(frequency)
        ]

    return [
        SessionSlot(name=name, day_of_week=i + 1, muscles=list(muscles))
        for i, (name, muscles) in enumerate(layout)
    ]


def _session_label(index: int) -> str:
    if index < len(string.ascii_uppercase):
        return string.ascii_uppercase[index]
    return str(index + 1)


def get_muscle_groups_for_frequency(frequency: int) -> list[MuscleGroup]:
    """All muscle groups trained in a week, in canonical order."""
    trained = {mg for slot in distribute_muscle_groups(frequency) for mg in slot.muscles}
    return [mg for mg in ALL_MUSCLE_GROUPS if mg in trained]


def calculate_session_volume(focus: Focus, sessions_per_week: int) -> list[int]:
    """Spread the weekly set volume over sessions.

    The remainder goes to the earliest sessions, e.g. 16 sets over 3
    sessions gives ``[6, 5, 5]``.
    """
    if sessions_per_week < 1:
        return []

    weekly = WEEKLY_VOLUME[Focus(focus)]
    base, remainder = divmod(weekly, sessions_per_week)
    return [base + (1 if i < remainder else 0) for i in range(sessions_per_week)]
