"""Date range helpers for report periods and file names."""

from datetime import datetime, time, timedelta
from typing import Optional

from worklog.models.commit import DateRange


def ensure_aware(moment: datetime) -> datetime:
    """Attach the local timezone to naive datetimes, keep aware ones as they are."""
    if moment.tzinfo is None:
        return moment.astimezone()
    return moment


def normalize_range(date_range: DateRange) -> DateRange:
    return DateRange(start=ensure_aware(date_range.start), end=ensure_aware(date_range.end))


def day_range(day: datetime) -> DateRange:
    """Range covering a whole calendar day, 00:00:00 to 23:59:59.999999."""
    return DateRange(
        start=datetime.combine(day.date(), time.min),
        end=datetime.combine(day.date(), time.max),
    )


def today_range(now: Optional[datetime] = None) -> DateRange:
    return day_range(now or datetime.now())


def this_week_range(now: Optional[datetime] = None) -> DateRange:
    """Monday 00:00 to Sunday 23:59:59 of the current week."""
    today = (now or datetime.now()).date()
    monday = today - timedelta(days=today.weekday())
    sunday = monday + timedelta(days=6)
    return DateRange(start=datetime.combine(monday, time.min), end=datetime.combine(sunday, time.max))


def last_week_range(now: Optional[datetime] = None) -> DateRange:
    current = this_week_range(now)
    return DateRange(start=current.start - timedelta(days=7), end=current.end - timedelta(days=7))


def parse_date(value: str) -> datetime:
    """Parse a YYYY-MM-DD date (or ISO timestamp) given on the command line."""
    return datetime.fromisoformat(value.strip())


def custom_range(start: str, end: Optional[str] = None) -> DateRange:
    """Range from the start of START to the end of END (END defaults to START)."""
    start_day = parse_date(start)
    end_day = parse_date(end) if end else start_day
    return DateRange(start=datetime.combine(start_day.date(), time.min), end=datetime.combine(end_day.date(), time.max))


def format_date(moment: datetime, fmt: str = "%Y-%m-%d") -> str:
    return moment.strftime(fmt)


def format_period(date_range: DateRange, separator: str = " ~ ") -> str:
    """`start` when both ends fall on the same day, else `start<separator>end`."""
    start = format_date(date_range.start)
    end = format_date(date_range.end)
    if start == end:
        return start
    return f"{start}{separator}{end}"


def format_range_for_filename(date_range: DateRange) -> str:
    return format_period(date_range, separator="_")
