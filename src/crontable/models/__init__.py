"""crontable data models."""

from .jobs import JobDefinition, JobsFile
from .schedule import DAY, DAY_OF_WEEK, FIELDS, HOUR, MINUTE, MONTH, FieldSpec, Schedule, Tick

__all__ = [
    "DAY",
    "DAY_OF_WEEK",
    "FIELDS",
    "HOUR",
    "MINUTE",
    "MONTH",
    "FieldSpec",
    "JobDefinition",
    "JobsFile",
    "Schedule",
    "Tick",
]
