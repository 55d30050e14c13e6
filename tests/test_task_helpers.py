"""Tests for task timestamp and age helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from simpletodo.models.task_helpers import (
    AgeCategory,
    format_timestamp,
    get_age,
    get_age_category,
    get_duration,
    is_valid_iso_timestamp,
)

NOW = datetime(2026, 1, 20, 12, 0, 0, tzinfo=timezone.utc)


class TestTimestamps:
    """Test ISO timestamp formatting and validation."""

    def test_format_has_milliseconds_and_z(self):
        value = datetime(2026, 1, 20, 10, 5, 3, 123456, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2026-01-20T10:05:03.123Z"

    def test_format_converts_to_utc(self):
        value = datetime(2026, 1, 20, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(value) == "2026-01-20T10:00:00.000Z"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2026-01-20T10:00:00.000Z", True),
            ("2026-01-20T10:00:00Z", False),
            ("2026-01-20T10:00:00.000+00:00", False),
            ("2026-02-30T10:00:00.000Z", False),
            ("not a date", False),
            (None, False),
        ],
    )
    def test_is_valid_iso_timestamp(self, value, expected):
        assert is_valid_iso_timestamp(value) is expected


class TestDurations:
    """Test age and duration calculations."""

    def test_duration(self):
        assert get_duration(NOW, NOW + timedelta(seconds=90)) == 90_000
        assert get_duration(NOW, None) is None

    def test_age(self, make_task):
        task = make_task(created_at=NOW - timedelta(hours=2))
        assert get_age(task, now=NOW) == 2 * 60 * 60 * 1000

    @pytest.mark.parametrize(
        "days,expected",
        [
            (0, AgeCategory.FRESH),
            (0.99, AgeCategory.FRESH),
            (1, AgeCategory.RECENT),
            (3, AgeCategory.AGING),
            (7, AgeCategory.OLD),
            (13.9, AgeCategory.OLD),
            (14, AgeCategory.STALE),
            (60, AgeCategory.STALE),
        ],
    )
    def test_age_category(self, make_task, days, expected):
        task = make_task(created_at=NOW - timedelta(days=days))
        assert get_age_category(task, now=NOW) == expected
