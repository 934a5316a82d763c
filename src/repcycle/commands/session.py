"""Workout session logging commands."""

import click

from ..models.history import PlanSession
from ..services.session_cycle import get_next_session_template
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_table,
    load_context,
)


@click.group()
@click.pass_context
def session(ctx):
    """Log workout sessions and sets."""
    ensure_initialized(ctx)


@session.command()
@click.argument("plan_id", type=int)
@click.option("--template", "-t", "template_id", type=int, help="Session template to train (default: next)")
@click.option("--exercise", "-x", "exercise_id", type=int, help="Train a single exercise instead")
@click.pass_context
@async_command
async def start(ctx, plan_id: int, template_id: int | None, exercise_id: int | None):
    """Start a session of a plan."""
    context = await load_context()
    if context.store.get_workout_plan_by_id(plan_id) is None:
        echo_error(f"Plan ID {plan_id} not found")
        ctx.exit(1)

    if template_id is not None and exercise_id is not None:
        echo_error("Use either --template or --exercise, not both")
        ctx.exit(1)

    if exercise_id is not None:
        started = await context.workouts.start_single_exercise_session(plan_id, exercise_id)
        if started is None:
            echo_error(f"Exercise ID {exercise_id} not found")
            ctx.exit(1)
        echo_success(f"Single-exercise session started (ID: {started.id})")
        return

    if template_id is None:
        template = get_next_session_template(context.store, plan_id)
        if template is None:
            echo_error("This plan has no sessions")
            ctx.exit(1)
        template_id = template.id

    started = await context.workouts.start_plan_session(plan_id, template_id)
    if started is None:
        echo_error(f"Session template {template_id} is not part of plan {plan_id}")
        ctx.exit(1)

    template = context.store.get_session_template_by_id(template_id)
    echo_success(f"Started {template.name} (session ID: {started.id})")
    for slot in context.store.get_exercise_templates_by_session_id(template_id):
        exercise = context.store.get_exercise_by_id(slot.exercise_id)
        name = exercise.name if exercise else f"Exercise #{slot.exercise_id}"
        click.echo(f"  [{slot.exercise_id}] {name}: {slot.sets}x{slot.reps}")
    click.echo()
    click.echo(f"Log sets with: repcycle session log {started.id} <exercise_id> <weight> <reps>")


@session.command()
@click.argument("session_id", type=int)
@click.argument("exercise_id", type=int)
@click.argument("weight", type=float)
@click.argument("reps", type=int)
@click.option("--warmup", is_flag=True, help="Mark as a warm-up set")
@click.pass_context
@async_command
async def log(ctx, session_id: int, exercise_id: int, weight: float, reps: int, warmup: bool):
    """Log a set in a session."""
    context = await load_context()
    if context.store.get_exercise_by_id(exercise_id) is None:
        echo_error(f"Exercise ID {exercise_id} not found")
        ctx.exit(1)

    try:
        logged = await context.workouts.log_set(
            session_id, exercise_id, weight, reps, is_warmup=warmup
        )
    except ValueError as e:
        echo_error(str(e))
        ctx.exit(1)

    if logged is None:
        echo_error(f"Session ID {session_id} not found")
        ctx.exit(1)

    unit = await context.preferences.get_unit_preference()
    kind = "warm-up set" if warmup else "set"
    echo_success(f"Logged {kind} {logged.set_number}: {weight:g} {unit} x {reps}")


@session.command()
@click.argument("session_id", type=int)
@click.option("--notes", "-n", help="Notes for the session")
@click.pass_context
@async_command
async def complete(ctx, session_id: int, notes: str | None):
    """Finish a session and sync it to Strava if enabled."""
    context = await load_context()
    existing = context.store.get_completed_session_by_id(session_id)
    if existing is None:
        echo_error(f"Session ID {session_id} not found")
        ctx.exit(1)
    if not existing.is_in_progress:
        echo_warning(f"Session {session_id} was already completed at {existing.completed_at}")
        return

    finished = await context.workouts.complete_session(session_id, notes)
    summary = context.workouts.get_session_summary(session_id)
    echo_success(
        f"Session {session_id} completed: {len(summary.sets)} sets, "
        f"volume {summary.total_volume:g}"
    )

    connection = await context.sync.get_connection_state()
    if connection.connected and await context.preferences.get_strava_sync_enabled():
        if connection.last_sync_error:
            echo_warning(f"Strava sync queued for retry: {connection.last_sync_error}")
        else:
            echo_success(f"Synced to Strava ({finished.completed_at})")


@session.command()
@click.option("--plan", "-p", "plan_id", type=int, help="Only sessions of this plan")
@click.option("--exercise", "-x", "exercise_id", type=int, help="Show set history for an exercise")
@click.option("--limit", "-l", type=int, default=20, show_default=True)
@async_command
async def history(plan_id: int | None, exercise_id: int | None, limit: int):
    """Show completed sessions or an exercise's set history."""
    context = await load_context()
    store = context.store
    unit = await context.preferences.get_unit_preference()

    if exercise_id is not None:
        sets = context.workouts.get_exercise_history(exercise_id)[:limit]
        if not sets:
            echo_info("No sets logged for this exercise")
            return
        rows = [
            [s.completed_at[:16].replace("T", " "), str(s.set_number), f"{s.weight:g} {unit}",
             str(s.reps), "warm-up" if s.is_warmup else ""]
            for s in sets
        ]
        click.echo(format_table(["Date", "Set", "Weight", "Reps", ""], rows))
        return

    summaries = context.workouts.get_history(plan_id, limit)
    if not summaries:
        echo_info("No completed sessions yet")
        return

    rows = []
    for summary in summaries:
        done = summary.session
        if isinstance(done, PlanSession):
            template = store.get_session_template_by_id(done.session_template_id)
            label = template.name if template else "Plan session"
        else:
            exercise = store.get_exercise_by_id(done.exercise_id)
            label = f"Single: {exercise.name}" if exercise else "Single exercise"
        rows.append([
            str(done.id),
            done.completed_at[:16].replace("T", " "),
            label,
            str(len(summary.sets)),
            f"{summary.total_volume:g}",
        ])

    click.echo(format_table(["ID", "Completed", "Session", "Sets", f"Volume ({unit})"], rows))
