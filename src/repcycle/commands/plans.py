"""Plan management commands."""

import click

from ..services.session_cycle import (
    calculate_plan_progress,
    count_completed_sessions,
    get_completion_count_for_template,
    get_current_week,
    get_in_progress_session,
    get_next_session_template,
    get_unique_exercises_for_plan,
)
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    load_context,
    truncate,
)


@click.group()
@click.pass_context
def plans(ctx):
    """Manage saved workout plans.

    Commands for listing, viewing, activating plans and finding the next
    session to train.
    """
    ensure_initialized(ctx)


@plans.command(name="list")
@async_command
async def list_plans():
    """List all saved plans."""
    context = await load_context()
    all_plans = context.store.get_all_workout_plans()

    if not all_plans:
        echo_info("No plans found. Generate one with 'repcycle generate'")
        return

    headers = ["ID", "Name", "Days", "Weeks", "Progress", "Active", "Created"]
    rows = []
    for plan in all_plans:
        done = count_completed_sessions(context.store, plan.id)
        rows.append([
            str(plan.id),
            truncate(plan.name),
            str(plan.weekly_frequency),
            str(plan.duration_weeks),
            f"{calculate_plan_progress(plan, done)}%",
            "*" if plan.is_active else "",
            plan.created_at[:10],
        ])

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_plans)} plan(s)")


def _resolve_plan(context, plan_id: int | None):
    if plan_id is not None:
        return context.store.get_workout_plan_by_id(plan_id)
    return context.store.get_active_workout_plan()


@plans.command()
@click.argument("plan_id", type=int, required=False)
@click.pass_context
@async_command
async def show(ctx, plan_id: int | None):
    """Show details of a plan (the active plan by default)."""
    context = await load_context()
    store = context.store
    plan = _resolve_plan(context, plan_id)
    if plan is None:
        echo_error(f"Plan ID {plan_id} not found" if plan_id else "No active plan")
        ctx.exit(1)

    done = count_completed_sessions(store, plan.id)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Plan: {plan.name} (ID: {plan.id})")
    click.echo("=" * 60)
    click.echo()
    if plan.description:
        click.echo(f"Description: {plan.description}")
    click.echo(f"Focus: {plan.focus.value}")
    click.echo(f"Schedule: {plan.weekly_frequency} days/week for {plan.duration_weeks} weeks")
    if plan.equipment_used:
        click.echo(f"Equipment: {', '.join(eq.value for eq in plan.equipment_used)}")
    click.echo(
        f"Progress: week {get_current_week(plan, done)}, "
        f"{calculate_plan_progress(plan, done)}% ({done} sessions)"
    )
    click.echo()

    for template in store.get_session_templates_by_plan_id(plan.id):
        muscles = ", ".join(mg.value for mg in template.muscle_groups)
        completions = get_completion_count_for_template(store, template.id)
        click.echo(f"  {template.sequence_order}. {template.name} ({muscles}) - done {completions}x")
        for slot in store.get_exercise_templates_by_session_id(template.id):
            exercise = store.get_exercise_by_id(slot.exercise_id)
            name = exercise.name if exercise else f"Exercise #{slot.exercise_id}"
            click.echo(f"       {slot.exercise_order}. {name}: {slot.sets}x{slot.reps}")

    click.echo()
    unique = get_unique_exercises_for_plan(store, plan.id)
    click.echo(f"{len(unique)} unique exercises")


@plans.command()
@click.argument("plan_id", type=int)
@click.pass_context
@async_command
async def activate(ctx, plan_id: int):
    """Make a plan the active plan."""
    context = await load_context()
    if not await context.workouts.activate_plan(plan_id):
        echo_error(f"Plan ID {plan_id} not found")
        ctx.exit(1)
    echo_success(f"Plan {plan_id} is now active")


@plans.command(name="next")
@click.argument("plan_id", type=int, required=False)
@click.pass_context
@async_command
async def next_session(ctx, plan_id: int | None):
    """Show the next session to train."""
    context = await load_context()
    store = context.store
    plan = _resolve_plan(context, plan_id)
    if plan is None:
        echo_error(f"Plan ID {plan_id} not found" if plan_id else "No active plan")
        ctx.exit(1)

    in_progress = get_in_progress_session(store, plan.id)
    if in_progress is not None:
        template = store.get_session_template_by_id(in_progress.session_template_id)
        name = template.name if template else "session"
        echo_info(
            f"Unfinished: {name} started {in_progress.started_at} "
            f"(session {in_progress.id}). "
            f"Finish it with: repcycle session complete {in_progress.id}"
        )

    template = get_next_session_template(store, plan.id)
    if template is None:
        echo_info("This plan has no sessions")
        return

    click.echo()
    click.echo(f"Next: {template.name} (session {template.sequence_order} of "
               f"{len(store.get_session_templates_by_plan_id(plan.id))})")
    for slot in store.get_exercise_templates_by_session_id(template.id):
        exercise = store.get_exercise_by_id(slot.exercise_id)
        name = exercise.name if exercise else f"Exercise #{slot.exercise_id}"
        line = f"  {slot.exercise_order}. {name}: {slot.sets}x{slot.reps}"
        last = context.workouts.get_last_working_set(slot.exercise_id)
        if last is not None:
            line += f"  (last: {last.weight:g} x {last.reps})"
        click.echo(line)
    click.echo()
    click.echo(f"Start it with: repcycle session start {plan.id} --template {template.id}")
