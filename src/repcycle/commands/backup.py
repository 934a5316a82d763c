"""Backup export and import commands."""

from pathlib import Path

import click

from ..errors import BackupValidationError, RepcycleError, is_cancellation
from ..services.backup import import_backup, read_backup_file, write_backup
from .base import async_command, echo_error, echo_info, echo_success, ensure_initialized, load_context


@click.group()
@click.pass_context
def backup(ctx):
    """Export or restore all workout data."""
    ensure_initialized(ctx)


@backup.command(name="export")
@click.argument("path", type=click.Path(path_type=Path), default=Path("."))
@async_command
async def export_cmd(path: Path):
    """Write a JSON backup to PATH (a file or directory)."""
    context = await load_context()
    written = write_backup(context.store, path)
    data = context.store.get_all_data()
    echo_success(
        f"Backup written to {written} "
        f"({len(data['workoutPlans'])} plans, {len(data['completedSessions'])} sessions)"
    )


@backup.command(name="import")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Replace data without asking")
@click.pass_context
@async_command
async def import_cmd(ctx, path: Path, yes: bool):
    """Replace ALL data with the backup at PATH."""
    context = await load_context()
    try:
        content = read_backup_file(path)
        if not yes and not click.confirm(
            "This replaces all plans and history. Continue?", default=False
        ):
            echo_info("Import cancelled")
            return
        parsed = await import_backup(context.store, content)
    except BackupValidationError as e:
        echo_error(str(e))
        ctx.exit(1)
    except RepcycleError as e:
        if is_cancellation(e):
            echo_info(str(e))
            return
        raise

    echo_success(f"Backup from {parsed['exportedAt']} restored")
