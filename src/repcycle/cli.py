"""CLI entry point for repcycle."""

import click

from .commands import backup, generate, init, plans, serve, session, strava
from .observability import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="repcycle")
@click.option("--log-level", help="Override REPCYCLE_LOG_LEVEL for this run")
def main(log_level: str | None):
    """repcycle: strength plans that cycle, with Strava sync.

    Generate a weekly strength plan from your schedule and equipment,
    always know which session is next, and mirror finished sessions to
    Strava even when the network is flaky.

    Example usage:

        # Initialize the project
        repcycle init

        # Generate and save a 3 day plan
        repcycle generate -f 3 -e Barbell -e Dumbbell

        # Train
        repcycle plans next
        repcycle session start 1
        repcycle session log 1 5 135 8
        repcycle session complete 1
    """
    configure_logging(level=log_level)


main.add_command(init)
main.add_command(generate)
main.add_command(plans)
main.add_command(session)
main.add_command(strava)
main.add_command(backup)
main.add_command(serve)


def run():
    """Run the CLI (handles async event loop)."""
    main()


if __name__ == "__main__":
    run()
