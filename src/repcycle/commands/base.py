"""Shared CLI utilities."""

import asyncio
from functools import wraps

import click

from ..db import get_db_path
from ..services.context import AppContext, open_context


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path()
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'repcycle init' first."
        )
        ctx.exit(1)


async def load_context() -> AppContext:
    """Open the store and services for the configured data directory."""
    return await open_context(get_db_path())


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    def render(cells) -> str:
        return "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(cells))

    lines = [render(headers), render("-" * w for w in widths)]
    lines.extend(render(row) for row in rows)
    return "\n".join(line.rstrip() for line in lines)


def truncate(text: str, limit: int = 30) -> str:
    return text[:limit] + "..." if len(text) > limit else text
