"""Initialize project command."""

import click

from ..config import get_settings
from ..data.catalog import (
    get_compound_exercise_count,
    get_exercise_count_by_muscle_group,
    seed_exercises,
)
from ..db import get_db_path
from .base import async_command, echo_info, echo_success, load_context


@click.command()
@click.option("--unit", type=click.Choice(["lbs", "kg"]), help="Weight unit preference")
@async_command
async def init(unit: str | None):
    """Initialize the repcycle data directory and database.

    Creates the SQLite database and seeds the exercise library. Running it
    again only adds catalog exercises that are missing.
    """
    data_dir = get_settings().data_dir
    echo_info(f"Initializing repcycle in {data_dir}")

    context = await load_context()
    echo_success(f"Database ready at {get_db_path()}")

    count = await seed_exercises(context.store)
    total = len(context.store.get_all_exercises())
    echo_success(f"Exercise library populated ({count} new, {total} total)")
    counts = get_exercise_count_by_muscle_group()
    click.echo("  " + ", ".join(f"{group}: {n}" for group, n in counts.items()))
    click.echo(f"  {get_compound_exercise_count()} compound movements")

    if unit:
        await context.preferences.set_unit_preference(unit)
        echo_success(f"Weight unit set to {unit}")

    click.echo()
    click.echo("repcycle is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Generate a plan:")
    click.echo("     repcycle generate --frequency 3 --equipment Barbell --equipment Dumbbell")
    click.echo()
    click.echo("  2. See what to train next:")
    click.echo("     repcycle plans next")
