"""Tick matching for crontable schedules."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from crontable.models.schedule import Schedule, Tick

# Minutes in a leap year
_SEARCH_LIMIT = 366 * 24 * 60


def matches(tick: Tick, schedule: Schedule) -> bool:
    """Decide whether a schedule should fire at a tick.

    Minute, hour and month must all match. Day of month and day of week are
    cumulative: either one matching is enough.
    """
    if tick.minute not in schedule.minute:
        return False

    if tick.hour not in schedule.hour:
        return False

    if tick.month not in schedule.month:
        return False

    return tick.day in schedule.day or tick.day_of_week in schedule.day_of_week


def get_tick(dt: datetime) -> Tick:
    """Return the tick for a point in time."""
    return Tick.from_datetime(dt)


def next_runs(schedule: Schedule, start: datetime, count: int = 1) -> list[datetime]:
    """Find the next minutes after ``start`` at which a schedule fires.

    Args:
        schedule: Parsed schedule.
        start: Search starts at the minute following this instant.
        count: Number of run times to return.

    Returns:
        Up to ``count`` minute-aligned datetimes, in the same timezone as
        ``start``. Fewer are returned if a year passes without a match,
        e.g. for ``0 0 30 2 *``. Aware start times are stepped in UTC, so
        wall times skipped by a DST change are never returned.
    """
    runs: list[datetime] = []
    tz = start.tzinfo
    candidate = start.replace(second=0, microsecond=0)
    if tz is not None:
        candidate = candidate.astimezone(UTC)

    while len(runs) < count:
        for _ in range(_SEARCH_LIMIT):
            candidate += timedelta(minutes=1)
            local = candidate.astimezone(tz) if tz is not None else candidate
            if matches(Tick.from_datetime(local), schedule):
                runs.append(local)
                break
        else:
            break

    return runs
