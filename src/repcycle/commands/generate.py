"""Generate plan command."""

import click
import questionary

from ..errors import ProgramValidationError
from ..generators import (
    filter_exercises_by_equipment,
    generate_workout_program,
    generate_workout_program_from_custom_exercises,
    get_muscle_groups_for_frequency,
    get_split_type,
    save_workout_program,
    select_initial_exercises_by_muscle_group,
)
from ..models.exercises import Equipment, Exercise
from ..models.program import Focus, GenerationInput
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    load_context,
)

EQUIPMENT_CHOICES = [eq.value for eq in Equipment]
FOCUS_CHOICES = [f.value for f in Focus]


@click.command()
@click.option(
    "--frequency",
    "-f",
    type=int,
    help="Sessions per week (prompted if omitted)",
)
@click.option(
    "--equipment",
    "-e",
    multiple=True,
    type=click.Choice(EQUIPMENT_CHOICES, case_sensitive=False),
    help="Available equipment, repeatable (prompted if omitted)",
)
@click.option(
    "--focus",
    type=click.Choice(FOCUS_CHOICES, case_sensitive=False),
    default=Focus.BALANCED.value,
    show_default=True,
    help="Training focus",
)
@click.option("--customize", is_flag=True, help="Review and change the exercise picks")
@click.option("--yes", "-y", is_flag=True, help="Save without asking for confirmation")
@click.pass_context
@async_command
async def generate(
    ctx,
    frequency: int | None,
    equipment: tuple[str, ...],
    focus: str,
    customize: bool,
    yes: bool,
):
    """Generate a workout plan and save it once you accept it.

    The plan is previewed first. Nothing is stored unless you confirm
    the prompt or pass --yes.

    Examples:

        # Three full body days with a barbell and dumbbells
        repcycle generate -f 3 -e Barbell -e Dumbbell

        # Strength focus, hand-pick exercises
        repcycle generate -f 4 -e Barbell --focus Strength --customize

        # Non-interactive
        repcycle generate -f 5 -e Cables -e Machines --yes
    """
    ensure_initialized(ctx)
    context = await load_context()
    catalog = context.store.get_all_exercises()
    if not catalog:
        echo_error("Exercise library is empty. Run 'repcycle init' first.")
        ctx.exit(1)

    if frequency is None:
        answer = await questionary.select(
            "How many days per week can you train?",
            choices=["2", "3", "4", "5"],
        ).ask_async()
        if answer is None:
            echo_info("Cancelled")
            return
        frequency = int(answer)

    selected_equipment = _normalize_equipment(equipment)
    if not equipment:
        answer = await questionary.checkbox(
            "What equipment do you have? (bodyweight is always included)",
            choices=[
                questionary.Choice(eq.value, eq)
                for eq in Equipment
                if eq != Equipment.BODYWEIGHT
            ],
        ).ask_async()
        if answer is None:
            echo_info("Cancelled")
            return
        selected_equipment = answer

    generation_input = GenerationInput(
        frequency=frequency,
        equipment=selected_equipment,
        focus=_normalize_focus(focus),
    )

    try:
        if customize:
            picks = await _ask_custom_exercises(catalog, generation_input)
            if picks is None:
                echo_info("Cancelled")
                return
            program = generate_workout_program_from_custom_exercises(generation_input, picks)
        else:
            program = generate_workout_program(generation_input, catalog)
    except ProgramValidationError as e:
        echo_error(str(e))
        ctx.exit(1)

    echo_info(f"Split: {get_split_type(frequency).value}")
    click.echo()
    click.echo("=" * 60)
    click.echo(program.get_summary().rstrip())
    click.echo("=" * 60)
    click.echo()

    empty = [s.name for s in program.sessions if not s.exercises]
    if empty:
        echo_warning(f"No eligible exercises for: {', '.join(empty)}")

    if not yes and not click.confirm("Save this plan?", default=True):
        echo_info("Plan discarded")
        return

    plan_id = await save_workout_program(context.store, program, selected_equipment)
    await context.workouts.activate_plan(plan_id)
    echo_success(f"Plan saved and activated (ID: {plan_id})")
    click.echo()
    click.echo("Next steps:")
    click.echo(f"  - View plan:         repcycle plans show {plan_id}")
    click.echo(f"  - Next session:      repcycle plans next {plan_id}")
    click.echo(f"  - Start training:    repcycle session start {plan_id}")


def _normalize_equipment(values: tuple[str, ...]) -> list[Equipment]:
    lookup = {eq.value.lower(): eq for eq in Equipment}
    return [lookup[value.lower()] for value in values]


def _normalize_focus(value: str) -> Focus:
    lookup = {f.value.lower(): f for f in Focus}
    return lookup[value.lower()]


async def _ask_custom_exercises(
    catalog: list[Exercise], generation_input: GenerationInput
) -> list[Exercise] | None:
    """Checkbox over eligible exercises with the initial picks pre-checked."""
    initial = select_initial_exercises_by_muscle_group(catalog, generation_input.equipment)
    initial_ids = {ex.id for picks in initial.values() for ex in picks}
    eligible = filter_exercises_by_equipment(catalog, generation_input.equipment)

    choices = []
    for muscle in get_muscle_groups_for_frequency(generation_input.frequency):
        choices.append(questionary.Separator(f"-- {muscle.value} --"))
        for exercise in eligible:
            if exercise.muscle_group != muscle:
                continue
            label = exercise.name + (" (compound)" if exercise.is_compound else "")
            choices.append(
                questionary.Choice(label, exercise, checked=exercise.id in initial_ids)
            )

    return await questionary.checkbox(
        "Pick the exercises for your plan:",
        choices=choices,
    ).ask_async()
