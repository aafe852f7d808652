"""crontable: an in-process cron table for Python programs."""

from crontable.errors import (
    CommandFailedError,
    CrontableError,
    DuplicateEntryError,
    EntryNotFoundError,
    ErrorCategory,
    InvalidActionError,
    JobsFileError,
    ScheduleParseError,
    TableStateError,
)
from crontable.models import Schedule, Tick
from crontable.scheduler import (
    CronTable,
    Entry,
    TableState,
    bind_action,
    matches,
    next_runs,
    parse_field,
    parse_schedule,
)

__version__ = "0.1.0"

__all__ = [
    "CommandFailedError",
    "CronTable",
    "CrontableError",
    "DuplicateEntryError",
    "Entry",
    "EntryNotFoundError",
    "ErrorCategory",
    "InvalidActionError",
    "JobsFileError",
    "Schedule",
    "ScheduleParseError",
    "TableState",
    "TableStateError",
    "Tick",
    "__version__",
    "bind_action",
    "matches",
    "next_runs",
    "parse_field",
    "parse_schedule",
]
