"""Tests for crontable error types."""

import pytest

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


class TestCrontableError:
    """Tests for the base error."""

    def test_str_includes_category(self) -> None:
        """Test the string form is prefixed with the category."""
        err = CrontableError(message="something broke", category=ErrorCategory.STATE)

        assert str(err) == "[state] something broke"
        assert err.args == ("something broke",)

    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (ScheduleParseError("bad"), ErrorCategory.PARSE),
            (DuplicateEntryError("job"), ErrorCategory.CONFLICT),
            (InvalidActionError("bad"), ErrorCategory.INVALID_ACTION),
            (EntryNotFoundError("job"), ErrorCategory.LOOKUP),
            (TableStateError("bad"), ErrorCategory.STATE),
            (CommandFailedError("bad"), ErrorCategory.ACTION),
            (JobsFileError("bad"), ErrorCategory.CONFIG),
        ],
    )
    def test_categories(self, error: CrontableError, category: ErrorCategory) -> None:
        """Test each error carries its category and can be raised."""
        assert error.category == category

        with pytest.raises(CrontableError):
            raise error


class TestScheduleParseError:
    """Tests for ScheduleParseError."""

    def test_context(self) -> None:
        """Test token, field and bounds are kept."""
        err = ScheduleParseError("out of range", token="70", field_name="minute", bounds=(0, 59))

        assert err.token == "70"
        assert err.field_name == "minute"
        assert err.bounds == (0, 59)
        assert err.context == {"token": "70", "field": "minute", "bounds": (0, 59)}


class TestNamedErrors:
    """Tests for errors about a named entry."""

    def test_duplicate(self) -> None:
        """Test the duplicate message names the entry."""
        err = DuplicateEntryError("backup")

        assert err.name == "backup"
        assert err.message == "job named backup already added"

    def test_not_found(self) -> None:
        """Test the lookup message names the entry."""
        err = EntryNotFoundError("backup")

        assert err.name == "backup"
        assert err.message == "job backup not found"
