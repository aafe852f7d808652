"""Utility functions for crontable CLI."""

from __future__ import annotations

from datetime import datetime, tzinfo
from pathlib import Path

import typer

from crontable.cli import console
from crontable.config import ConfigError, resolve_timezone
from crontable.errors import JobsFileError
from crontable.jobs import JobsFileParser
from crontable.models import FieldSpec, JobsFile


def get_jobs_file(path: Path | None) -> Path:
    """Resolve the jobs file path, defaulting to ~/.crontable/jobs.yaml.

    Raises:
        typer.Exit: If the file does not exist.
    """
    from crontable.cli import JOBS_FILE

    resolved = path or JOBS_FILE
    if not resolved.exists():
        console.print(f"[red]Error:[/] Jobs file not found: {resolved}")
        raise typer.Exit(1)
    return resolved


def load_jobs(path: Path | None) -> JobsFile:
    """Load and validate a jobs file, exiting with a message on errors."""
    resolved = get_jobs_file(path)

    try:
        jobs = JobsFileParser().parse_file(resolved)
    except JobsFileError as e:
        console.print(f"[red]✗[/] Invalid jobs file [cyan]{resolved.name}[/]:")
        if e.errors:
            for error in e.errors:
                console.print(f"  [red]•[/] [yellow]{error['location']}[/]: {error['message']}")
        else:
            console.print(f"  {e.message}")
        raise typer.Exit(1)

    # Fail early on unknown timezones
    get_timezone(jobs.timezone)
    return jobs


def get_timezone(name: str | None) -> tzinfo | None:
    """Resolve a --timezone option, exiting on unknown names."""
    try:
        return resolve_timezone(name)
    except ConfigError as e:
        console.print(f"[red]Error:[/] {e.message}")
        raise typer.Exit(1)


def parse_when(value: str | None, tz: tzinfo | None) -> datetime:
    """Parse an ISO datetime option, defaulting to now.

    Naive values are taken to be in ``tz``.
    """
    if value is None:
        return datetime.now(tz)

    try:
        when = datetime.fromisoformat(value)
    except ValueError:
        console.print(f"[red]Error:[/] Invalid datetime: {value} (use ISO format)")
        raise typer.Exit(1)

    if when.tzinfo is None and tz is not None:
        when = when.replace(tzinfo=tz)
    return when


def format_values(values: frozenset[int], spec: FieldSpec) -> str:
    """Render a field set compactly, e.g. ``1-5,10,20-22``."""
    if not values:
        return "[dim]none[/]"
    if values == spec.full:
        return "*"

    ordered = sorted(values)
    parts: list[str] = []
    start = prev = ordered[0]
    for value in ordered[1:]:
        if value == prev + 1:
            prev = value
            continue
        parts.append(str(start) if start == prev else f"{start}-{prev}")
        start = prev = value
    parts.append(str(start) if start == prev else f"{start}-{prev}")

    return ",".join(parts)


def format_datetime(dt: datetime | None) -> str:
    """Format datetime for display."""
    if dt is None:
        return "-"
    return dt.strftime("%Y-%m-%d %H:%M %a")
