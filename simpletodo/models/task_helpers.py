"""Timestamp and age helpers for tasks.

Timestamps travel over the wire and on disk as ISO 8601 UTC strings with
millisecond precision, e.g. ``2026-01-20T10:00:00.000Z``.
"""

import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

ISO_TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")

ONE_MILLISECOND = timedelta(milliseconds=1)


class AgeCategory(str, Enum):
    """Visual age bucket for a task."""
    FRESH = "fresh"      # < 1 day
    RECENT = "recent"    # 1-3 days
    AGING = "aging"      # 3-7 days
    OLD = "old"          # 7-14 days
    STALE = "stale"      # >= 14 days


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.sssZ``."""
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"


def is_valid_iso_timestamp(timestamp: str) -> bool:
    """Check that a string is a strict millisecond ISO 8601 UTC timestamp."""
    if not isinstance(timestamp, str) or not ISO_TIMESTAMP_PATTERN.match(timestamp):
        return False
    try:
        datetime.strptime(timestamp, "%Y-%m-%dT%H:%M:%S.%fZ")
    except ValueError:
        return False
    return True


def get_duration(created_at: datetime, completed_at: Optional[datetime]) -> Optional[int]:
    """Lifetime of a task in milliseconds, or None if it is not completed."""
    if completed_at is None:
        return None
    return (ensure_utc(completed_at) - ensure_utc(created_at)) // ONE_MILLISECOND


def get_age(task, now: Optional[datetime] = None) -> int:
    """Age of a task in milliseconds since creation."""
    now = now or utc_now()
    return (ensure_utc(now) - ensure_utc(task.created_at)) // ONE_MILLISECOND


def get_age_category(task, now: Optional[datetime] = None) -> AgeCategory:
    """Bucket a task by age for display."""
    age_days = get_age(task, now) / (1000 * 60 * 60 * 24)

    if age_days < 1:
        return AgeCategory.FRESH
    if age_days < 3:
        return AgeCategory.RECENT
    if age_days < 7:
        return AgeCategory.AGING
    if age_days < 14:
        return AgeCategory.OLD
    return AgeCategory.STALE
