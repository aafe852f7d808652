"""CLI commands for crontable."""

# Import command modules to register them with the app
# These imports have side effects (register commands via @app.command())
from crontable.cli.commands import check, jobs, serve

__all__ = ["check", "jobs", "serve"]
