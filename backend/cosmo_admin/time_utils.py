# Overview: UTC timestamp and calendar-date helpers shared by models, validation and reporting.

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

# Datetimes are stored naive and always mean UTC.
UTC = timezone.utc


def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def _as_utc_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(UTC).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Order and audit timestamps from clients.

    Accepts a bare date (midnight), a naive datetime (taken as UTC) or an
    offset/"Z" datetime, which is shifted to UTC. Blank input gives None;
    anything else unparseable raises ValueError.
    """
    text = (value or "").strip()
    if not text:
        return None
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    return _as_utc_naive(datetime.fromisoformat(text))


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse "YYYY-MM-DD" (a full datetime string is truncated to its date)."""
    text = (value or "").strip()
    if not text:
        return None
    if len(text) > 10:
        return parse_iso_datetime(text).date()
    return date.fromisoformat(text)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Whole-second ISO-8601 with a trailing "Z"."""
    if dt is None:
        return None
    return _as_utc_naive(dt).replace(microsecond=0).isoformat() + "Z"


def to_iso_date(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def days_ago(days: int, *, now: Optional[datetime] = None) -> datetime:
    return (now or utcnow()) - timedelta(days=days)


def date_range(start: date, end: date) -> list[date]:
    """Every calendar day from start to end, inclusive."""
    days = []
    current = start
    while current <= end:
        days.append(current)
        current += timedelta(days=1)
    return days
