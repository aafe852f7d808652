"""Jobs file commands for crontable CLI."""

from datetime import datetime
from pathlib import Path
from typing import Any

import typer
from rich.table import Table

from crontable.cli import app, console
from crontable.cli.utils import format_datetime, get_timezone, load_jobs
from crontable.errors import CommandFailedError
from crontable.jobs import build_table
from crontable.scheduler import next_runs


@app.command("list")
def list_jobs(
    jobs_file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        help="Jobs file (default: ~/.crontable/jobs.yaml)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
) -> None:
    """List jobs defined in a jobs file with their next run time."""
    jobs = load_jobs(jobs_file)
    table = build_table(jobs)
    now = datetime.now(get_timezone(jobs.timezone))

    rows: list[dict[str, Any]] = []
    for entry in table.entries():
        definition = jobs.get_job(entry.name)
        runs = next_runs(entry.schedule, now)
        rows.append(
            {
                "name": entry.name,
                "schedule": str(entry.schedule),
                "command": definition.command if definition else "",
                "next_run": runs[0] if runs else None,
            }
        )

    if json_output:
        console.print_json(
            data={
                "jobs": [
                    {**row, "next_run": row["next_run"].isoformat() if row["next_run"] else None}
                    for row in rows
                ]
            }
        )
        return

    if not rows:
        console.print("[yellow]No jobs defined.[/]")
        return

    output = Table(title="Jobs")
    output.add_column("Name", style="cyan")
    output.add_column("Schedule")
    output.add_column("Command")
    output.add_column("Next Run")

    for row in rows:
        command = row["command"]
        output.add_row(
            row["name"],
            row["schedule"],
            command[:50] + "..." if len(command) > 50 else command,
            format_datetime(row["next_run"]),
        )

    console.print(output)


@app.command()
def run(
    name: str | None = typer.Argument(
        None,
        help="Job to run (runs every job if omitted)",
    ),
    jobs_file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        help="Jobs file (default: ~/.crontable/jobs.yaml)",
    ),
) -> None:
    """Run jobs immediately in the foreground, ignoring their schedules.

    Examples:
        crontable run backup
        crontable run --file ./jobs.yaml
    """
    jobs = load_jobs(jobs_file)
    table = build_table(jobs)

    if name is None:
        entries = list(table.entries())
    elif name in table:
        entries = [table.get(name)]
    else:
        console.print(f"[red]Error:[/] Job not found: {name}")
        raise typer.Exit(1)

    failures: list[str] = []

    def report(job_name: str, exc: BaseException) -> None:
        failures.append(job_name)
        detail = exc.message if isinstance(exc, CommandFailedError) else str(exc)
        console.print(f"[red]✗[/] [cyan]{job_name}[/] failed: {detail}")

    for entry in entries:
        console.print(f"Running [cyan]{entry.name}[/]...")
        entry.run(on_error=report)
        if entry.name not in failures:
            console.print(f"[green]✓[/] [cyan]{entry.name}[/] completed")

    if failures:
        raise typer.Exit(1)
