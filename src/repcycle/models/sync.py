"""Strava sync state and wire models."""

from dataclasses import dataclass
from enum import Enum

from .history import SessionType

SPORT_TYPE_WEIGHT_TRAINING = "WeightTraining"


class ActivityType(str, Enum):
    """Kind of activity reported to the relay."""

    PLAN = "plan"
    SINGLE = "single"

    @classmethod
    def from_session_type(cls, session_type: SessionType | str | None) -> "ActivityType":
        """Map a stored session type (default plan) to an activity type."""
        value = session_type.value if isinstance(session_type, SessionType) else session_type
        return cls.SINGLE if value == SessionType.SINGLE.value else cls.PLAN


@dataclass
class StravaConnectionState:
    """Locally stored connection to the sync relay."""

    connected: bool = False
    install_id: str | None = None
    sync_token: str | None = None
    last_sync_at: str | None = None
    last_sync_error: str | None = None

    @property
    def has_credentials(self) -> bool:
        """True when connected with both an install id and a token."""
        return bool(self.connected and self.install_id and self.sync_token)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "connected": self.connected,
            "install_id": self.install_id,
            "sync_token": self.sync_token,
            "last_sync_at": self.last_sync_at,
            "last_sync_error": self.last_sync_error,
        }


@dataclass
class SessionTiming:
    """Estimated start/end of a completed session."""

    start_time_iso: str
    end_time_iso: str
    elapsed_seconds: int


@dataclass
class StravaSyncPayload:
    """Request body for ``POST /strava/sync-session``."""

    install_id: str
    idempotency_key: str
    activity_name: str
    activity_type: ActivityType
    start_time_iso: str
    end_time_iso: str
    elapsed_seconds: int
    sport_type: str = SPORT_TYPE_WEIGHT_TRAINING

    def to_dict(self) -> dict:
        """Serialize using the relay's camelCase field names."""
        return {
            "installId": self.install_id,
            "idempotencyKey": self.idempotency_key,
            "activityName": self.activity_name,
            "sportType": self.sport_type,
            "activityType": self.activity_type.value,
            "startTimeIso": self.start_time_iso,
            "endTimeIso": self.end_time_iso,
            "elapsedSeconds": self.elapsed_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StravaSyncPayload":
        """Parse a camelCase payload."""
        return cls(
            install_id=data["installId"],
            idempotency_key=data["idempotencyKey"],
            activity_name=data["activityName"],
            sport_type=data.get("sportType", SPORT_TYPE_WEIGHT_TRAINING),
            activity_type=ActivityType(data.get("activityType", "plan")),
            start_time_iso=data["startTimeIso"],
            end_time_iso=data["endTimeIso"],
            elapsed_seconds=int(data["elapsedSeconds"]),
        )


@dataclass
class OutboxItem:
    """A failed delivery waiting for retry."""

    payload: StravaSyncPayload
    created_at_iso: str
    last_error: str

    @property
    def idempotency_key(self) -> str:
        return self.payload.idempotency_key

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "payload": self.payload.to_dict(),
            "createdAtIso": self.created_at_iso,
            "lastError": self.last_error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OutboxItem":
        """Create from dictionary."""
        return cls(
            payload=StravaSyncPayload.from_dict(data["payload"]),
            created_at_iso=data["createdAtIso"],
            last_error=data["lastError"],
        )


@dataclass
class SyncCompletedSessionInput:
    """What the sync service needs to know about a finished session."""

    completed_session_id: int
    completed_at_iso: str
    completed_set_count: int
    activity_type: ActivityType = ActivityType.PLAN


@dataclass
class SyncResult:
    """Counts from a batch sync or retry pass."""

    attempted: int = 0
    succeeded: int = 0

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded
