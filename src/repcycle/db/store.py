"""Plan store: an in-memory cache of all workout records over a key-value backend.

Reads are synchronous and served from memory. Every mutation is written
through to the backend before it returns.
"""

import json
import threading
from dataclasses import asdict, dataclass

import structlog

from ..errors import StorageNotInitializedError
from ..models.exercises import Equipment, Exercise, MuscleGroup
from ..models.history import CompletedSession, CompletedSet
from ..models.plan import ExerciseTemplate, SessionTemplate, WorkoutPlan
from ..utils.dates import parse_iso
from .kv import KeyValueStore

logger = structlog.get_logger(__name__)

# Backend keys per collection
STORAGE_KEYS = {
    "exercises": "workout_exercises",
    "workoutPlans": "workout_plans",
    "sessionTemplates": "workout_session_templates",
    "exerciseTemplates": "workout_exercise_templates",
    "completedSessions": "workout_completed_sessions",
    "completedSets": "workout_completed_sets",
    "idCounters": "workout_id_counters",
}

COLLECTIONS = [key for key in STORAGE_KEYS if key != "idCounters"]


@dataclass
class IdCounters:
    """Last id handed out per collection."""

    exercises: int = 0
    workoutPlans: int = 0
    sessionTemplates: int = 0
    exerciseTemplates: int = 0
    completedSessions: int = 0
    completedSets: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict | None) -> "IdCounters":
        data = data or {}
        return cls(**{name: int(data.get(name, 0)) for name in COLLECTIONS})


_PARSERS = {
    "exercises": Exercise.from_dict,
    "workoutPlans": WorkoutPlan.from_dict,
    "sessionTemplates": SessionTemplate.from_dict,
    "exerciseTemplates": ExerciseTemplate.from_dict,
    "completedSessions": CompletedSession.from_dict,
    "completedSets": CompletedSet.from_dict,
}


class PlanStore:
    """All persisted workout data for one user."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv
        self._id_lock = threading.Lock()
        self._initialized = False
        self._clear()

    def _clear(self) -> None:
        self._data: dict[str, list] = {name: [] for name in COLLECTIONS}
        self._counters = IdCounters()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def init(self) -> None:
        """Load every collection from the backend. Safe to call twice."""
        if self._initialized:
            return

        raw = await self.kv.get_many(list(STORAGE_KEYS.values()))
        for name in COLLECTIONS:
            value = raw.get(STORAGE_KEYS[name])
            records = json.loads(value) if value else []
            self._data[name] = [_PARSERS[name](record) for record in records]

        counters = raw.get(STORAGE_KEYS["idCounters"])
        self._counters = IdCounters.from_dict(json.loads(counters) if counters else None)
        self._initialized = True
        logger.debug(
            "store_initialized",
            **{name: len(records) for name, records in self._data.items()},
        )

    async def reset(self) -> None:
        """Drop all records and counters."""
        self._clear()
        self._initialized = True
        await self.persist()
        logger.info("store_reset")

    async def persist(self, names: list[str] | None = None) -> None:
        """Write collections (all by default) and the id counters."""
        self._ensure_initialized()
        items = {
            STORAGE_KEYS[name]: json.dumps([r.to_dict() for r in self._data[name]])
            for name in (names or COLLECTIONS)
        }
        items[STORAGE_KEYS["idCounters"]] = json.dumps(self._counters.to_dict())
        await self.kv.set_many(items)

    def get_all_data(self) -> dict:
        """Snapshot of every collection plus the id counters."""
        self._ensure_initialized()
        data = {
            name: [record.to_dict() for record in self._data[name]]
            for name in COLLECTIONS
        }
        data["idCounters"] = self._counters.to_dict()
        return data

    async def replace_all(self, data: dict) -> None:
        """Replace every collection and counter from one snapshot.

        Records are parsed before anything is replaced, so a malformed
        snapshot leaves the store untouched.
        """
        self._ensure_initialized()
        parsed = {
            name: [_PARSERS[name](record) for record in data.get(name) or []]
            for name in COLLECTIONS
        }
        counters = IdCounters.from_dict(data.get("idCounters"))

        # Never hand out an id that is already taken
        for name in COLLECTIONS:
            highest = max((r.id or 0 for r in parsed[name]), default=0)
            if highest > getattr(counters, name):
                setattr(counters, name, highest)

        self._data = parsed
        self._counters = counters
        await self.persist()
        logger.info(
            "store_replaced",
            **{name: len(records) for name, records in parsed.items()},
        )

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise StorageNotInitializedError()

    def _next_id(self, collection: str) -> int:
        with self._id_lock:
            value = getattr(self._counters, collection) + 1
            setattr(self._counters, collection, value)
            return value

    async def _insert(self, collection: str, record):
        self._ensure_initialized()
        record.id = self._next_id(collection)
        self._data[collection].append(record)
        try:
            await self.persist([collection])
        except Exception:
            self._data[collection].remove(record)
            raise
        return record.id

    # Exercises

    def get_all_exercises(self) -> list[Exercise]:
        """All exercises in insertion order."""
        self._ensure_initialized()
        return list(self._data["exercises"])

    def get_exercise_by_id(self, exercise_id: int) -> Exercise | None:
        self._ensure_initialized()
        return _find(self._data["exercises"], exercise_id)

    def get_exercises_by_muscle_group(self, muscle_group: MuscleGroup) -> list[Exercise]:
        self._ensure_initialized()
        return [e for e in self._data["exercises"] if e.muscle_group == muscle_group]

    def get_exercises_by_equipment(self, equipment: Equipment) -> list[Exercise]:
        self._ensure_initialized()
        return [e for e in self._data["exercises"] if e.equipment_required == equipment]

    async def insert_exercise(self, exercise: Exercise) -> int:
        return await self._insert("exercises", exercise)

    # Workout plans

    def get_all_workout_plans(self) -> list[WorkoutPlan]:
        """Plans, newest first."""
        self._ensure_initialized()
        return sorted(
            self._data["workoutPlans"],
            key=lambda p: parse_iso(p.created_at),
            reverse=True,
        )

    def get_active_workout_plan(self) -> WorkoutPlan | None:
        return next((p for p in self.get_all_workout_plans() if p.is_active), None)

    def get_workout_plan_by_id(self, plan_id: int) -> WorkoutPlan | None:
        self._ensure_initialized()
        return _find(self._data["workoutPlans"], plan_id)

    async def insert_workout_plan(self, plan: WorkoutPlan) -> int:
        return await self._insert("workoutPlans", plan)

    async def update_workout_plan_active_status(self, plan_id: int, is_active: bool) -> None:
        plan = self.get_workout_plan_by_id(plan_id)
        if plan is not None:
            plan.is_active = is_active
            await self.persist(["workoutPlans"])

    async def deactivate_all_workout_plans(self) -> None:
        self._ensure_initialized()
        for plan in self._data["workoutPlans"]:
            plan.is_active = False
        await self.persist(["workoutPlans"])

    # Session templates

    def get_session_templates_by_plan_id(self, plan_id: int) -> list[SessionTemplate]:
        """Templates of a plan ordered by sequence_order."""
        self._ensure_initialized()
        return sorted(
            (t for t in self._data["sessionTemplates"] if t.workout_plan_id == plan_id),
            key=lambda t: t.sequence_order,
        )

    def get_session_template_by_id(self, template_id: int) -> SessionTemplate | None:
        self._ensure_initialized()
        return _find(self._data["sessionTemplates"], template_id)

    async def insert_session_template(self, template: SessionTemplate) -> int:
        return await self._insert("sessionTemplates", template)

    # Exercise templates

    def get_exercise_templates_by_session_id(self, template_id: int) -> list[ExerciseTemplate]:
        """Exercise slots of a session template ordered by exercise_order."""
        self._ensure_initialized()
        return sorted(
            (t for t in self._data["exerciseTemplates"] if t.session_template_id == template_id),
            key=lambda t: t.exercise_order,
        )

    async def insert_exercise_template(self, template: ExerciseTemplate) -> int:
        return await self._insert("exerciseTemplates", template)

    # Completed sessions

    def get_completed_sessions_by_plan_id(self, plan_id: int) -> list[CompletedSession]:
        """Sessions of a plan, most recently started first."""
        self._ensure_initialized()
        return sorted(
            (s for s in self._data["completedSessions"] if s.workout_plan_id == plan_id),
            key=lambda s: parse_iso(s.started_at),
            reverse=True,
        )

    def get_all_completed_sessions(self) -> list[CompletedSession]:
        """Every session, most recently started first."""
        self._ensure_initialized()
        return sorted(
            self._data["completedSessions"],
            key=lambda s: parse_iso(s.started_at),
            reverse=True,
        )

    def get_completed_session_by_id(self, session_id: int) -> CompletedSession | None:
        self._ensure_initialized()
        return _find(self._data["completedSessions"], session_id)

    async def insert_completed_session(self, session: CompletedSession) -> int:
        return await self._insert("completedSessions", session)

    async def update_completed_session(
        self, session_id: int, completed_at: str, notes: str | None = None
    ) -> None:
        session = self.get_completed_session_by_id(session_id)
        if session is not None:
            session.completed_at = completed_at
            session.notes = notes
            await self.persist(["completedSessions"])

    # Completed sets

    def get_completed_sets_by_session_id(self, session_id: int) -> list[CompletedSet]:
        """Sets of a session in the order they were performed."""
        self._ensure_initialized()
        return sorted(
            (s for s in self._data["completedSets"] if s.completed_session_id == session_id),
            key=lambda s: parse_iso(s.completed_at),
        )

    def get_completed_sets_by_exercise_id(self, exercise_id: int) -> list[CompletedSet]:
        """Sets of an exercise, newest first."""
        self._ensure_initialized()
        return sorted(
            (s for s in self._data["completedSets"] if s.exercise_id == exercise_id),
            key=lambda s: parse_iso(s.completed_at),
            reverse=True,
        )

    def get_last_completed_set_for_exercise(self, exercise_id: int) -> CompletedSet | None:
        """Most recent working (non-warmup) set of an exercise."""
        sets = self.get_completed_sets_by_exercise_id(exercise_id)
        return next((s for s in sets if not s.is_warmup), None)

    async def insert_completed_set(self, completed_set: CompletedSet) -> int:
        return await self._insert("completedSets", completed_set)


def _find(records: list, record_id: int):
    return next((r for r in records if r.id == record_id), None)
