"""Unit tests for utility functions."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from blogdb.utils import (
    format_iso,
    new_id,
    newest_first,
    oldest_first,
    parse_datetime,
    redact_token,
    utc_now,
)


class TestDatetimeFunctions:
    """Tests for datetime utility functions."""

    def test_parse_datetime_valid_iso(self):
        """Test parsing valid ISO8601 timestamp."""
        result = parse_datetime("2024-01-15T10:30:00Z")
        assert result is not None
        assert (result.year, result.month, result.day) == (2024, 1, 15)
        assert (result.hour, result.minute) == (10, 30)
        assert result.tzinfo == timezone.utc

    def test_parse_datetime_with_offset(self):
        """Test parsing ISO8601 with timezone offset converts to UTC."""
        result = parse_datetime("2024-01-15T10:30:00+05:00")
        assert result.tzinfo == timezone.utc
        assert result.hour == 5

    def test_parse_datetime_naive_string_is_utc(self):
        """Test a timestamp without offset is taken as UTC."""
        result = parse_datetime("2024-01-15T10:30:00")
        assert result == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_parse_datetime_naive_datetime_is_utc(self):
        """Test naive datetimes (as read back from SQLite) are taken as UTC."""
        result = parse_datetime(datetime(2024, 1, 15, 10, 30))
        assert result == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_parse_datetime_aware_datetime_converted(self):
        """Test aware datetimes are normalized to UTC."""
        tz = timezone(timedelta(hours=2))
        result = parse_datetime(datetime(2024, 1, 15, 12, 0, tzinfo=tz))
        assert result == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc

    def test_parse_datetime_none(self):
        """Test parsing None returns None."""
        assert parse_datetime(None) is None

    def test_parse_datetime_invalid(self):
        """Test parsing invalid timestamp raises error."""
        with pytest.raises(ValueError):
            parse_datetime("not-a-date")

    def test_utc_now(self):
        """Test getting current UTC time."""
        now = utc_now()
        assert now.tzinfo == timezone.utc
        assert isinstance(now, datetime)

    def test_format_iso_valid(self):
        """Test formatting datetime to ISO string."""
        dt = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
        assert format_iso(dt) == "2024-01-15T10:30:00Z"

    def test_format_iso_none(self):
        """Test formatting None returns None."""
        assert format_iso(None) is None


class TestIdentifiers:
    """Tests for identifier generation."""

    def test_new_id_is_uuid(self):
        """Test ids are UUID strings."""
        value = new_id()
        assert str(uuid.UUID(value)) == value

    def test_new_id_unique(self):
        """Test ids do not repeat."""
        assert len({new_id() for _ in range(100)}) == 100


class TestTokenRedaction:
    """Tests for token redaction."""

    def test_redact_long_token(self):
        """Test redacting long token."""
        token = "abcdefghijklmnopqrstuvwxyz"
        redacted = redact_token(token)
        assert redacted == "abcdefgh...wxyz"
        assert "ijklmnop" not in redacted

    def test_redact_short_token(self):
        """Test redacting short token."""
        assert redact_token("short") == "***"

    def test_redact_none(self):
        """Test redacting None."""
        assert redact_token(None) == "None"

    def test_redact_empty_string(self):
        """Test redacting empty string."""
        assert redact_token("") == "None"


class TestOrdering:
    """Tests for stable ordering helpers."""

    def test_newest_first_stable(self):
        """Test descending sort keeps input order among ties."""
        items = [(1, "a"), (2, "b"), (1, "c"), (2, "d")]
        assert newest_first(items, key=lambda t: t[0]) == [
            (2, "b"),
            (2, "d"),
            (1, "a"),
            (1, "c"),
        ]

    def test_oldest_first_stable(self):
        """Test ascending sort keeps input order among ties."""
        items = [(2, "a"), (1, "b"), (2, "c"), (1, "d")]
        assert oldest_first(items, key=lambda t: t[0]) == [
            (1, "b"),
            (1, "d"),
            (2, "a"),
            (2, "c"),
        ]

    def test_does_not_mutate_input(self):
        """Test the helpers return new lists."""
        items = [3, 1, 2]
        newest_first(items, key=lambda n: n)
        oldest_first(items, key=lambda n: n)
        assert items == [3, 1, 2]
