"""
Date helpers shared by the GitHub client, the job aggregator and the API.

GitHub timestamps are ISO-8601 strings in UTC ("2024-05-01T12:00:00Z").
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from app.entities.date_range import DateRange

DateLike = Union[datetime, date, str]


def parse_github_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub timestamp, returning None for empty or invalid input."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    parsed = parse_github_timestamp(value)
    if parsed is None:
        raise ValueError(f"Invalid date value: {value!r}")
    return parsed


def format_date(value: DateLike) -> str:
    """Format as YYYY-MM-DD."""
    return _to_datetime(value).strftime("%Y-%m-%d")


def format_datetime(value: DateLike) -> str:
    """Format as YYYY-MM-DD HH:MM:SS."""
    return _to_datetime(value).strftime("%Y-%m-%d %H:%M:%S")


def resolve_timezone(tz_name: str) -> tzinfo:
    if not tz_name or tz_name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(tz_name)


def format_execution_date(
    started_at: Optional[datetime],
    tz_name: str = "UTC",
    date_format: str = "%Y-%m-%d",
) -> str:
    """
    Render the calendar day a job started on, without time of day.

    Args:
        started_at: Job start instant (naive values are treated as UTC)
        tz_name: IANA timezone the day is computed in
        date_format: strftime pattern for the rendered day

    Returns:
        Formatted date, or an empty string when the job has not started
    """
    if started_at is None:
        return ""
    local = _to_datetime(started_at).astimezone(resolve_timezone(tz_name))
    return local.strftime(date_format)


def get_default_date_range(days: int = 30, now: Optional[datetime] = None) -> DateRange:
    """Window from the start of the day `days` ago to the end of today (UTC)."""
    now = _to_datetime(now) if now else datetime.now(timezone.utc)
    now = now.astimezone(timezone.utc)
    end = datetime.combine(now.date(), time.max, tzinfo=timezone.utc)
    start = datetime.combine((end - timedelta(days=days)).date(), time.min, tzinfo=timezone.utc)
    return DateRange(start=start, end=end)


def is_date_in_range(value: DateLike, date_range: DateRange) -> bool:
    """Inclusive containment check."""
    return date_range.contains(_to_datetime(value))
