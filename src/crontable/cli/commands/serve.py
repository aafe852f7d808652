"""Serve command for crontable CLI.

Runs the jobs of a jobs file on their schedules in the foreground until
interrupted.
"""

from __future__ import annotations

import logging
import signal
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from crontable.cli import app, console
from crontable.cli.utils import get_timezone, load_jobs
from crontable.config import ConfigError, load_settings
from crontable.jobs import build_table

if TYPE_CHECKING:
    from types import FrameType

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path | None = None, debug: bool = False) -> None:
    """Set up logging for the scheduler process.

    Args:
        log_file: Path to the log file, logs to stderr if omitted.
        debug: Enable debug logging.
    """
    level = logging.DEBUG if debug else logging.INFO
    handlers: list[logging.Handler] = []
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    else:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    # APScheduler logs every clock tick at INFO
    logging.getLogger("apscheduler").setLevel(logging.DEBUG if debug else logging.WARNING)


def setup_signal_handlers(stop_event: threading.Event) -> None:
    """Set up signal handlers for graceful shutdown."""

    def handle_signal(signum: int, frame: FrameType | None) -> None:
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, shutting down...")
        stop_event.set()

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)


def wait_for_shutdown(stop_event: threading.Event) -> None:
    """Block until the stop event is set."""
    while not stop_event.wait(timeout=1.0):
        pass


@app.command()
def serve(
    jobs_file: Path | None = typer.Option(
        None,
        "--file",
        "-f",
        help="Jobs file (default: ~/.crontable/jobs.yaml)",
    ),
    timezone: str | None = typer.Option(
        None,
        "--timezone",
        "-z",
        help="Timezone for schedules (overrides file and config)",
    ),
    resolution: float | None = typer.Option(
        None,
        "--resolution",
        "-r",
        min=0.1,
        help="Seconds between clock ticks (overrides file and config)",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Write logs to this file instead of stderr",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging",
    ),
) -> None:
    """Run jobs on their schedules until interrupted.

    Settings are taken from the command line, then the jobs file, then
    ~/.crontable/config.yaml and CRONTABLE_* environment variables.

    Examples:
        crontable serve
        crontable serve --file ./jobs.yaml --timezone Europe/Berlin
    """
    setup_logging(log_file, debug)

    jobs = load_jobs(jobs_file)
    try:
        settings = load_settings()
    except ConfigError as e:
        console.print(f"[red]Error:[/] {e.message}")
        raise typer.Exit(1)

    if timezone is None:
        timezone = jobs.timezone if "timezone" in jobs.model_fields_set else settings.timezone
    if resolution is None:
        resolution = (
            jobs.resolution if "resolution" in jobs.model_fields_set else settings.resolution
        )
    get_timezone(timezone)

    table = build_table(jobs, timezone=timezone, resolution=resolution)
    if not len(table):
        console.print("[yellow]No jobs defined, nothing to do.[/]")
        raise typer.Exit(0)

    stop_event = threading.Event()
    setup_signal_handlers(stop_event)

    table.start()
    console.print(f"[green]✓[/] Scheduling {len(table)} job(s) [dim](timezone: {timezone})[/]")
    for name in table.names():
        console.print(f"  - [cyan]{name}[/] [dim]{table.get(name).schedule}[/]")

    try:
        wait_for_shutdown(stop_event)
    finally:
        table.stop()
        console.print("[green]✓[/] Stopped")
