"""Error classification for crontable."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Classification of errors surfaced by the cron table."""

    PARSE = "parse"  # Malformed schedule string
    CONFLICT = "conflict"  # Duplicate entry name
    INVALID_ACTION = "invalid_action"  # Action not callable or args don't bind
    LOOKUP = "lookup"  # Unknown entry name
    STATE = "state"  # Operation not allowed in current lifecycle state
    ACTION = "action"  # Action terminated abnormally
    CONFIG = "config"  # Jobs file or configuration problem


@dataclass
class CrontableError(Exception):
    """Base error with classification and context."""

    message: str
    category: ErrorCategory
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.category.value}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ScheduleParseError(CrontableError):
    """A schedule string or one of its fields could not be parsed."""

    token: str | None = None
    field_name: str | None = None
    bounds: tuple[int, int] | None = None

    def __init__(
        self,
        message: str,
        token: str | None = None,
        field_name: str | None = None,
        bounds: tuple[int, int] | None = None,
    ) -> None:
        self.token = token
        self.field_name = field_name
        self.bounds = bounds
        super().__init__(
            message=message,
            category=ErrorCategory.PARSE,
            context={"token": token, "field": field_name, "bounds": bounds},
        )


@dataclass
class DuplicateEntryError(CrontableError):
    """An entry with the same name is already registered."""

    name: str = ""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            message=f"job named {name} already added",
            category=ErrorCategory.CONFLICT,
            context={"name": name},
        )


@dataclass
class InvalidActionError(CrontableError):
    """The action is not callable or the bound arguments don't fit it."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, category=ErrorCategory.INVALID_ACTION)


@dataclass
class EntryNotFoundError(CrontableError):
    """No entry is registered under the requested name."""

    name: str = ""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            message=f"job {name} not found",
            category=ErrorCategory.LOOKUP,
            context={"name": name},
        )


@dataclass
class TableStateError(CrontableError):
    """Raised when a lifecycle operation is not allowed."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, category=ErrorCategory.STATE)


@dataclass
class CommandFailedError(CrontableError):
    """A shell command action exited abnormally."""

    exit_code: int | None = None

    def __init__(self, message: str, exit_code: int | None = None, stderr: str = "") -> None:
        self.exit_code = exit_code
        super().__init__(
            message=message,
            category=ErrorCategory.ACTION,
            context={"exit_code": exit_code, "stderr": stderr},
        )


@dataclass
class JobsFileError(CrontableError):
    """Error loading or validating a jobs file."""

    errors: list[dict[str, Any]] = field(default_factory=list)

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message=message, category=ErrorCategory.CONFIG)
