"""Strava sync routes."""

from fastapi import APIRouter

from ..dependencies import Context
from ..schemas import EnableSyncRequest

router = APIRouter(prefix="/sync", tags=["sync"])


@router.get("/status")
async def sync_status(context: Context):
    """Connection state, auto-sync flag and pending deliveries."""
    connection = await context.sync.get_connection_state()
    pending = await context.outbox.list_items()
    return {
        "connection": {k: v for k, v in connection.to_dict().items() if k != "sync_token"},
        "enabled": await context.preferences.get_strava_sync_enabled(),
        "pending": [item.to_dict() for item in pending],
    }


@router.put("/enabled")
async def set_enabled(request: EnableSyncRequest, context: Context):
    await context.preferences.set_strava_sync_enabled(request.enabled)
    return {"enabled": request.enabled}


@router.post("/retry")
async def retry_pending(context: Context):
    """Retry every queued delivery once, oldest first."""
    result = await context.sync.retry_pending()
    return {
        "attempted": result.attempted,
        "succeeded": result.succeeded,
        "failed": result.failed,
    }
