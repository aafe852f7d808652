"""crontable CLI interface."""

from pathlib import Path

import typer
from rich.console import Console

# CLI App
app = typer.Typer(
    name="crontable",
    help="Check cron expressions and run shell jobs on cron schedules.",
    no_args_is_help=True,
)

# Console for rich output
console = Console()

# Default paths
CRONTABLE_DIR = Path.home() / ".crontable"
JOBS_FILE = CRONTABLE_DIR / "jobs.yaml"

# Import commands to register them
from crontable.cli.commands import check, jobs, serve  # noqa: E402, F401


@app.command()
def version() -> None:
    """Show crontable version."""
    from crontable import __version__

    console.print(f"crontable v{__version__}")


if __name__ == "__main__":
    app()
