"""Activity timing and naming for synced sessions.

Only the completion time and the number of logged sets are known, so the
activity start is estimated at a fixed four minutes per set.
"""

from datetime import timedelta

from ...models.sync import SessionTiming
from ...utils.dates import parse_iso, to_iso

SECONDS_PER_COMPLETED_SET = 4 * 60


def calculate_strava_session_timing(
    completed_at_iso: str, completed_set_count: int
) -> SessionTiming:
    """Estimate start, end and duration of a completed session.

    Example: 3 sets completed at ``2026-02-21T14:00:00.000Z`` give 720
    seconds starting at ``2026-02-21T13:48:00.000Z``.
    """
    end = parse_iso(completed_at_iso)
    elapsed_seconds = max(0, completed_set_count) * SECONDS_PER_COMPLETED_SET
    start = end - timedelta(seconds=elapsed_seconds)
    return SessionTiming(
        start_time_iso=to_iso(start),
        end_time_iso=to_iso(end),
        elapsed_seconds=elapsed_seconds,
    )


def format_workout_activity_name(completed_at_iso: str) -> str:
    """Activity title such as ``Training 02-21`` (UTC date)."""
    completed = parse_iso(completed_at_iso)
    return f"Training {completed.month:02d}-{completed.day:02d}"


def build_strava_idempotency_key(completed_session_id: int, completed_at_iso: str) -> str:
    """Deterministic key so a completion is never posted as two activities."""
    return f"session-{completed_session_id}-{completed_at_iso}"
