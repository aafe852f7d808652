"""Expression commands for crontable CLI."""

import typer
from rich.table import Table

from crontable.cli import app, console
from crontable.cli.utils import format_datetime, format_values, get_timezone, parse_when
from crontable.errors import ScheduleParseError
from crontable.models import FIELDS, Schedule, Tick
from crontable.scheduler import matches, next_runs, parse_schedule


def _parse_or_exit(expression: str) -> Schedule:
    try:
        return parse_schedule(expression)
    except ScheduleParseError as e:
        console.print(f"[red]✗[/] Invalid expression [cyan]{expression}[/]: {e.message}")
        raise typer.Exit(1)


@app.command()
def check(
    expression: str = typer.Argument(..., help="Five-field cron expression (quote it)"),
    at: str | None = typer.Option(
        None,
        "--at",
        help="ISO datetime to test the expression against",
    ),
    timezone: str | None = typer.Option(
        None,
        "--timezone",
        "-z",
        help="Timezone for --at when it has no offset",
    ),
) -> None:
    """Validate a cron expression and show the values it accepts.

    Examples:
        crontable check "*/15 9-17 * * 1-5"
        crontable check "0 0 1 * *" --at 2026-11-01T00:00
    """
    schedule = _parse_or_exit(expression)

    console.print(f"[green]✓[/] Expression [cyan]{schedule}[/] is valid")
    console.print()

    table = Table(title="Fields")
    table.add_column("Field", style="cyan")
    table.add_column("Values")
    table.add_column("Count", justify="right")

    field_values = (
        schedule.minute,
        schedule.hour,
        schedule.day,
        schedule.month,
        schedule.day_of_week,
    )
    for spec, values in zip(FIELDS, field_values, strict=True):
        table.add_row(spec.name, format_values(values, spec), str(len(values)))

    console.print(table)

    if at is not None:
        when = parse_when(at, get_timezone(timezone))
        if matches(Tick.from_datetime(when), schedule):
            console.print(f"[green]✓[/] Matches {format_datetime(when)}")
        else:
            console.print(f"[yellow]✗[/] Does not match {format_datetime(when)}")


@app.command("next")
def next_cmd(
    expression: str = typer.Argument(..., help="Five-field cron expression (quote it)"),
    count: int = typer.Option(
        5,
        "--count",
        "-n",
        min=1,
        help="Number of run times to show",
    ),
    start: str | None = typer.Option(
        None,
        "--from",
        help="ISO datetime to start from (default: now)",
    ),
    timezone: str | None = typer.Option(
        None,
        "--timezone",
        "-z",
        help="Timezone to compute run times in",
    ),
) -> None:
    """Show the next times a cron expression fires.

    Examples:
        crontable next "0 9 * * 1-5"
        crontable next "*/10 * * * *" -n 3 --from 2026-10-19T08:00
    """
    schedule = _parse_or_exit(expression)
    when = parse_when(start, get_timezone(timezone))

    runs = next_runs(schedule, when, count)
    if not runs:
        console.print(f"[yellow]![/] [cyan]{schedule}[/] does not fire within a year")
        return

    for run_at in runs:
        console.print(f"  {format_datetime(run_at)}")
