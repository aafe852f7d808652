"""Schedule and tick models for crontable."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from datetime import datetime


class FieldSpec(NamedTuple):
    """Name and inclusive bounds of one schedule field."""

    name: str
    minimum: int
    maximum: int

    @property
    def full(self) -> frozenset[int]:
        """Every value the field can take."""
        return frozenset(range(self.minimum, self.maximum + 1))


MINUTE = FieldSpec("minute", 0, 59)
HOUR = FieldSpec("hour", 0, 23)
DAY = FieldSpec("day", 1, 31)
MONTH = FieldSpec("month", 1, 12)
DAY_OF_WEEK = FieldSpec("day_of_week", 0, 6)  # 0 = Sunday

# Positional order of fields in a schedule string
FIELDS: tuple[FieldSpec, ...] = (MINUTE, HOUR, DAY, MONTH, DAY_OF_WEEK)


@dataclass(frozen=True)
class Schedule:
    """Parsed five-field schedule.

    The day and day_of_week sets have already been combined: when only one
    of them is restricted the other one is empty, so matching can always OR
    them together.
    """

    expression: str
    minute: frozenset[int]
    hour: frozenset[int]
    day: frozenset[int]
    month: frozenset[int]
    day_of_week: frozenset[int]

    def sizes(self) -> tuple[int, int, int, int, int]:
        """Number of accepted values per field, in positional order."""
        return (
            len(self.minute),
            len(self.hour),
            len(self.day),
            len(self.month),
            len(self.day_of_week),
        )

    def __str__(self) -> str:
        return self.expression


@dataclass(frozen=True)
class Tick:
    """A single instant reduced to its five schedule fields."""

    minute: int
    hour: int
    day: int
    month: int
    day_of_week: int

    @classmethod
    def from_datetime(cls, dt: datetime) -> Tick:
        """Build a tick from a datetime.

        ISO weekday 7 (Sunday) maps to 0.
        """
        return cls(
            minute=dt.minute,
            hour=dt.hour,
            day=dt.day,
            month=dt.month,
            day_of_week=dt.isoweekday() % 7,
        )
