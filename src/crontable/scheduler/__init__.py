"""crontable scheduling core.

Parses five-field cron expressions, matches them against clock ticks and
dispatches registered actions from a background clock.
"""

from .actions import bind_action
from .expression import combine_days, parse_field, parse_schedule
from .matcher import get_tick, matches, next_runs
from .table import CronTable, Entry, FailureSink, TableState, log_failure

__all__ = [
    "CronTable",
    "Entry",
    "FailureSink",
    "TableState",
    "bind_action",
    "combine_days",
    "get_tick",
    "log_failure",
    "matches",
    "next_runs",
    "parse_field",
    "parse_schedule",
]
