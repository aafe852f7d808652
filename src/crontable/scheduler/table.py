"""Cron table: entry registry and periodic clock."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import Any, TypeVar

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from crontable.config import resolve_timezone
from crontable.errors import (
    CrontableError,
    DuplicateEntryError,
    EntryNotFoundError,
    TableStateError,
)
from crontable.models.schedule import Schedule, Tick

from .actions import bind_action
from .expression import parse_schedule
from .matcher import matches

logger = logging.getLogger(__name__)

FailureSink = Callable[[str, BaseException], None]
F = TypeVar("F", bound=Callable[..., Any])

CLOCK_JOB_ID = "crontable:clock"
DEFAULT_RESOLUTION = 60.0


def log_failure(name: str, exc: BaseException) -> None:
    """Default failure sink: log the fault with its traceback."""
    logger.error(f"Cron job '{name}' failed: {exc}", exc_info=exc)


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class TableState(str, Enum):
    """Lifecycle of a cron table."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class Entry:
    """A named action registered on a schedule."""

    name: str
    schedule: Schedule
    action: Callable[[], Any]

    def run(self, on_error: FailureSink | None = None) -> None:
        """Run the action, reporting any exception to ``on_error``.

        Awaitables returned by async actions are driven to completion on a
        fresh event loop, so this must not be called from a running loop.
        Anything an action raises except KeyboardInterrupt is reported,
        including CancelledError and SystemExit.
        """
        sink = on_error or log_failure
        try:
            result = self.action()
            if inspect.isawaitable(result):
                asyncio.run(_await(result))
        except KeyboardInterrupt:
            raise
        except BaseException as e:
            try:
                sink(self.name, e)
            except Exception:
                logger.exception(f"Failure sink raised while reporting cron job '{self.name}'")


class CronTable:
    """In-process cron table.

    Entries are matched against the wall clock once per ``resolution``
    seconds by an APScheduler background thread. Each matching action runs
    on its own daemon thread and is never awaited: ``stop()`` halts future
    ticks only, so callers that need a graceful shutdown must track their
    own work.
    """

    def __init__(
        self,
        timezone: tzinfo | str | None = None,
        resolution: float | timedelta = DEFAULT_RESOLUTION,
        on_error: FailureSink | None = None,
    ) -> None:
        """Initialize the cron table.

        Args:
            timezone: Timezone the clock is read in. Accepts a tzinfo, an IANA
                name, or None/"local" for local time.
            resolution: Seconds between clock ticks. Matching is always done
                at minute granularity; shorter values are for testing.
            on_error: Failure sink called with the entry name and exception
                when an action raises. Defaults to logging.
        """
        if isinstance(resolution, timedelta):
            resolution = resolution.total_seconds()
        if resolution <= 0:
            msg = f"resolution must be positive, got {resolution}"
            raise ValueError(msg)

        self._tz = resolve_timezone(timezone) if isinstance(timezone, str) else timezone
        self._resolution = float(resolution)
        self._on_error = on_error or log_failure

        # Replaced wholesale under the lock, read without it
        self._entries: tuple[Entry, ...] = ()
        self._lock = threading.Lock()

        self._state = TableState.IDLE
        self._scheduler: BackgroundScheduler | None = None

    @property
    def state(self) -> TableState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the clock is running."""
        return self._state is TableState.RUNNING

    @property
    def timezone(self) -> tzinfo | None:
        """Timezone the clock is read in, None for local time."""
        return self._tz

    @property
    def resolution(self) -> float:
        """Seconds between clock ticks."""
        return self._resolution

    def start(self) -> None:
        """Start the clock.

        Raises:
            TableStateError: If the table has been stopped.
        """
        with self._lock:
            if self._state is TableState.RUNNING:
                return
            if self._state is TableState.STOPPED:
                raise TableStateError("cron table was stopped and can't be restarted")

            scheduler = BackgroundScheduler(
                timezone=self._tz,
                job_defaults={
                    "coalesce": True,  # Combine missed ticks into one
                    "max_instances": 1,  # Ticks are processed one at a time
                    "misfire_grace_time": max(1, int(self._resolution)),
                },
            )
            scheduler.add_job(
                self._on_tick,
                trigger=IntervalTrigger(seconds=self._resolution, timezone=self._tz),
                id=CLOCK_JOB_ID,
                name="crontable clock",
            )
            scheduler.start()

            self._scheduler = scheduler
            self._state = TableState.RUNNING

        logger.info(f"Cron table started (resolution {self._resolution:g}s)")

    def stop(self) -> None:
        """Stop the clock for good.

        Actions already dispatched keep running and are not awaited.
        """
        with self._lock:
            if self._state is TableState.STOPPED:
                return
            scheduler, self._scheduler = self._scheduler, None
            self._state = TableState.STOPPED

        if scheduler is not None:
            scheduler.shutdown(wait=False)
        logger.info("Cron table stopped")

    def register(
        self,
        schedule: str,
        name: str,
        action: Any,
        /,
        *args: Any,
        **kwargs: Any,
    ) -> Entry:
        """Add a named action to the table.

        Args:
            schedule: Five-field cron expression.
            name: Unique entry name.
            action: Callable (sync or async) to run.
            *args: Positional arguments bound to the action.
            **kwargs: Keyword arguments bound to the action.

        Returns:
            The new entry.

        Raises:
            ScheduleParseError: If the schedule can't be parsed.
            InvalidActionError: If the action can't be called with the arguments.
            DuplicateEntryError: If the name is already registered.
        """
        if name in self:
            raise DuplicateEntryError(name)

        parsed = parse_schedule(schedule)
        entry = Entry(name=name, schedule=parsed, action=bind_action(action, *args, **kwargs))

        # Re-checked under the lock for concurrent registrations
        with self._lock:
            if any(existing.name == name for existing in self._entries):
                raise DuplicateEntryError(name)
            self._entries = (*self._entries, entry)

        logger.info(f"Registered cron job '{name}' ({parsed})")
        return entry

    def must_register(
        self,
        schedule: str,
        name: str,
        action: Any,
        /,
        *args: Any,
        **kwargs: Any,
    ) -> Entry:
        """Like ``register`` but fails hard.

        Meant for registering literal schedules at program start, where a
        malformed expression is a bug that should stop the program.

        Raises:
            RuntimeError: If registration fails for any reason.
        """
        try:
            return self.register(schedule, name, action, *args, **kwargs)
        except CrontableError as e:
            msg = f"job {name} not added: {e}"
            raise RuntimeError(msg) from e

    def job(self, schedule: str, name: str | None = None) -> Callable[[F], F]:
        """Decorator registering a function with ``must_register``.

        Args:
            schedule: Five-field cron expression.
            name: Entry name, defaults to the function's qualified name.
        """

        def decorator(fn: F) -> F:
            self.must_register(schedule, name or fn.__qualname__, fn)
            return fn

        return decorator

    def clear(self) -> None:
        """Remove all entries. A running clock keeps ticking."""
        with self._lock:
            self._entries = ()
        logger.info("Cleared all cron jobs")

    def names(self) -> list[str]:
        """Names of all entries, in registration order."""
        return [entry.name for entry in self._entries]

    def entries(self) -> tuple[Entry, ...]:
        """Snapshot of all entries."""
        return self._entries

    def get(self, name: str) -> Entry:
        """Look up an entry by name.

        Raises:
            EntryNotFoundError: If no entry has that name.
        """
        for entry in self._entries:
            if entry.name == name:
                return entry
        raise EntryNotFoundError(name)

    def run(self, name: str) -> None:
        """Dispatch one entry now, regardless of its schedule.

        Raises:
            EntryNotFoundError: If no entry has that name.
        """
        self._dispatch(self.get(name))

    def run_all(self) -> None:
        """Dispatch every entry now, regardless of schedule."""
        for entry in self._entries:
            self._dispatch(entry)

    def run_scheduled(self, now: datetime) -> list[str]:
        """Dispatch every entry whose schedule matches ``now``.

        Returns:
            Names of the dispatched entries.
        """
        tick = Tick.from_datetime(now)
        dispatched: list[str] = []

        for entry in self._entries:
            if matches(tick, entry.schedule):
                self._dispatch(entry)
                dispatched.append(entry.name)

        if dispatched:
            logger.debug(f"Tick {now:%Y-%m-%d %H:%M}: dispatched {', '.join(dispatched)}")
        return dispatched

    def _on_tick(self) -> None:
        self.run_scheduled(datetime.now(self._tz))

    def _dispatch(self, entry: Entry) -> None:
        thread = threading.Thread(
            target=entry.run,
            args=(self._on_error,),
            name=f"crontable-{entry.name}",
            daemon=True,
        )
        thread.start()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self._entries)

    def __repr__(self) -> str:
        return f"CronTable(state={self._state.value}, entries={len(self._entries)})"
