"""Strava sync commands."""

import click

from ..services.strava_sync import SYNC_FAILURES, SyncProgress
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    load_context,
)


@click.group()
@click.pass_context
def strava(ctx):
    """Connect to Strava and sync completed sessions.

    Sessions are posted through the sync relay configured with
    REPCYCLE_STRAVA_SYNC_API_BASE_URL.
    """
    ensure_initialized(ctx)


@strava.command()
@async_command
async def enable():
    """Sync sessions automatically when they are completed."""
    context = await load_context()
    await context.preferences.set_strava_sync_enabled(True)
    echo_success("Automatic Strava sync enabled")
    connection = await context.sync.get_connection_state()
    if not connection.connected:
        echo_warning("Not connected yet. Run 'repcycle strava connect'")


@strava.command()
@async_command
async def disable():
    """Stop syncing sessions automatically."""
    context = await load_context()
    await context.preferences.set_strava_sync_enabled(False)
    echo_success("Automatic Strava sync disabled")


@strava.command()
@click.option("--return-to", help="URL the relay redirects to after authorization")
@click.pass_context
@async_command
async def connect(ctx, return_to: str | None):
    """Register this install with the relay and print the authorization URL."""
    context = await load_context()
    try:
        registration = await context.sync.register(return_to)
    except SYNC_FAILURES as e:
        echo_error(f"Failed to connect to Strava: {e}")
        ctx.exit(1)

    echo_success("Install registered")
    click.echo()
    click.echo("Open this URL to authorize Strava:")
    click.echo(f"  {registration.connect_url}")
    click.echo()
    click.echo("Then run 'repcycle strava status' to confirm the connection.")


@strava.command()
@click.pass_context
@async_command
async def status(ctx):
    """Show connection and sync status."""
    context = await load_context()
    try:
        connection = await context.sync.refresh_connection_status()
    except SYNC_FAILURES as e:
        echo_warning(f"Could not reach the sync relay: {e}")
        connection = await context.sync.get_connection_state()

    enabled = await context.preferences.get_strava_sync_enabled()
    pending = await context.outbox.list_items()

    click.echo()
    click.echo(f"Connected:    {'yes' if connection.connected else 'no'}")
    click.echo(f"Auto-sync:    {'on' if enabled else 'off'}")
    click.echo(f"Last sync:    {connection.last_sync_at or 'never'}")
    if connection.last_sync_error:
        click.echo(f"Last error:   {connection.last_sync_error}")
    click.echo(f"Pending:      {len(pending)}")
    for item in pending:
        click.echo(f"  - {item.idempotency_key}: {item.last_error}")


@strava.command(name="sync-all")
@async_command
async def sync_all():
    """Post every completed session, including ones from before connecting."""
    context = await load_context()
    connection = await context.sync.get_connection_state()
    if not connection.has_credentials:
        echo_error("Not connected to Strava. Run 'repcycle strava connect'")
        return

    def report(progress: SyncProgress) -> None:
        click.echo(f"  {progress.processed}/{progress.total} ({progress.succeeded} ok)")

    result = await context.sync.sync_all_completed_sessions(on_progress=report)
    if result.failed:
        echo_warning(f"{result.succeeded} synced, {result.failed} queued for retry")
    else:
        echo_success(f"{result.succeeded} session(s) synced")


@strava.command()
@async_command
async def retry():
    """Retry queued deliveries once, oldest first."""
    context = await load_context()
    result = await context.sync.retry_pending()
    if result.attempted == 0:
        echo_info("Nothing to retry")
    elif result.failed:
        echo_warning(f"{result.succeeded} delivered, {result.failed} still pending")
    else:
        echo_success(f"{result.succeeded} delivered")


@strava.command()
@click.pass_context
@async_command
async def disconnect(ctx):
    """Unlink Strava and forget local credentials."""
    context = await load_context()
    try:
        await context.sync.disconnect()
    except SYNC_FAILURES as e:
        echo_error(f"Failed to disconnect Strava: {e}")
        ctx.exit(1)
    echo_success("Strava disconnected")
