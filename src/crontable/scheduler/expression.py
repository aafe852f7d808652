"""Cron expression parsing for crontable.

A schedule string has five whitespace-separated fields: minute, hour,
day of month, month and day of week. Each field is one of:

- ``*`` for every value in range
- ``*/n`` or ``a-b/n`` for every nth value of the full range or of ``a-b``
- a comma separated list of values and ``a-b`` ranges
"""

from __future__ import annotations

import re

from crontable.errors import ScheduleParseError
from crontable.models.schedule import DAY, DAY_OF_WEEK, FIELDS, Schedule

_NUMBER = re.compile(r"[0-9]+")
_RANGE = re.compile(r"([0-9]+)-([0-9]+)")


def _out_of_range(
    token: str,
    text: str,
    minimum: int,
    maximum: int,
    name: str | None,
) -> ScheduleParseError:
    label = name or "field"
    return ScheduleParseError(
        f"out of range for {token} in {text}: {label} must be in range {minimum}-{maximum}",
        token=token,
        field_name=name,
        bounds=(minimum, maximum),
    )


def _malformed(
    token: str,
    text: str,
    minimum: int,
    maximum: int,
    name: str | None,
) -> ScheduleParseError:
    return ScheduleParseError(
        f"unable to parse {token!r} part in {text!r}",
        token=token,
        field_name=name,
        bounds=(minimum, maximum),
    )


def _parse_range(
    token: str,
    text: str,
    minimum: int,
    maximum: int,
    name: str | None,
) -> tuple[int, int] | None:
    """Parse ``a-b`` and check both literal endpoints against the bounds.

    Returns None if the token is not a range at all.
    """
    match = _RANGE.fullmatch(token)
    if match is None:
        return None

    start, stop = int(match.group(1)), int(match.group(2))
    if not (minimum <= start <= maximum and minimum <= stop <= maximum):
        raise _out_of_range(token, text, minimum, maximum, name)
    if start > stop:
        raise ScheduleParseError(
            f"range {token} in {text} starts after it ends",
            token=token,
            field_name=name,
            bounds=(minimum, maximum),
        )
    return start, stop


def parse_field(text: str, minimum: int, maximum: int, name: str | None = None) -> frozenset[int]:
    """Parse one schedule field into the set of values it accepts.

    Args:
        text: The field text, e.g. ``*/15`` or ``1,2,10-15``.
        minimum: Smallest valid value for the field.
        maximum: Largest valid value for the field.
        name: Field name used in error messages.

    Returns:
        Non-empty frozenset of values within ``[minimum, maximum]``.

    Raises:
        ScheduleParseError: If the text is malformed, holds an out-of-range
            literal, or yields no values.
    """
    # wildcard
    if text == "*":
        return frozenset(range(minimum, maximum + 1))

    # */2 1-59/5
    if "/" in text:
        base, _, step_text = text.partition("/")
        if _NUMBER.fullmatch(step_text) is None:
            raise _malformed(step_text, text, minimum, maximum, name)

        step = int(step_text)
        if step == 0:
            raise ScheduleParseError(
                f"step in {text} must be a positive integer",
                token=step_text,
                field_name=name,
                bounds=(minimum, maximum),
            )

        if base == "*":
            start, stop = minimum, maximum
        else:
            rng = _parse_range(base, text, minimum, maximum, name)
            if rng is None:
                raise _malformed(base, text, minimum, maximum, name)
            start, stop = rng

        values = frozenset(range(start, stop + 1, step))
    else:
        # 1,2,4 or 1,2,10-15,20,30-45
        collected: set[int] = set()
        for item in text.split(","):
            rng = _parse_range(item, text, minimum, maximum, name)
            if rng is not None:
                collected.update(range(rng[0], rng[1] + 1))
            elif _NUMBER.fullmatch(item):
                value = int(item)
                if not minimum <= value <= maximum:
                    raise _out_of_range(item, text, minimum, maximum, name)
                collected.add(value)
            else:
                raise _malformed(item, text, minimum, maximum, name)
        values = frozenset(collected)

    if not values:
        raise ScheduleParseError(
            f"unable to parse {text!r}: no values",
            token=text,
            field_name=name,
            bounds=(minimum, maximum),
        )

    return values


def combine_days(
    day: frozenset[int],
    day_of_week: frozenset[int],
) -> tuple[frozenset[int], frozenset[int]]:
    """Apply the cron day-of-month / day-of-week combination rule.

    If only one of the two fields is restricted, the other is emptied so it
    can never match. If both are restricted, or both are full, they are kept
    and OR-ed at match time.
    """
    day_full = day == DAY.full
    day_of_week_full = day_of_week == DAY_OF_WEEK.full

    if not day_full and day_of_week_full:
        return day, frozenset()
    if not day_of_week_full and day_full:
        return frozenset(), day_of_week
    return day, day_of_week


def parse_schedule(text: str) -> Schedule:
    """Parse a five-field schedule string.

    Args:
        text: Schedule string such as ``*/5 9-17 * * 1-5``.

    Returns:
        Schedule with the day/day-of-week rule already applied.

    Raises:
        ScheduleParseError: If the string doesn't have exactly five fields
            or any field fails to parse.
    """
    parts = text.split()
    if len(parts) != len(FIELDS):
        raise ScheduleParseError(
            f"schedule string must have five components like * * * * *, got {text!r}",
            token=text,
        )

    minute, hour, day, month, day_of_week = [
        parse_field(part, spec.minimum, spec.maximum, spec.name)
        for part, spec in zip(parts, FIELDS, strict=True)
    ]
    day, day_of_week = combine_days(day, day_of_week)

    return Schedule(
        expression=" ".join(parts),
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=day_of_week,
    )
