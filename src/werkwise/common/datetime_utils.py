from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_date(value: DateLike) -> str:
    """dd/mm/yyyy, used in exports."""
    d = as_date(value)
    return f"{d.day:02d}/{d.month:02d}/{d.year}"


def format_datetime(value: datetime) -> str:
    return f"{format_date(value)} {value.hour:02d}:{value.minute:02d}"


def format_nl_date(value: DateLike) -> str:
    """Short Dutch locale date (d-m-yyyy, no zero padding)."""
    d = as_date(value)
    return f"{d.day}-{d.month}-{d.year}"


def format_nl_datetime(value: datetime) -> str:
    return f"{format_nl_date(value)} {value.hour:02d}:{value.minute:02d}:{value.second:02d}"


def iso_week_number(value: DateLike) -> int:
    return as_date(value).isocalendar()[1]


def js_weekday(value: DateLike) -> int:
    """Weekday with Sunday=0 .. Saturday=6 (schedule day_of_week convention)."""
    return (as_date(value).weekday() + 1) % 7


def week_range(now: DateLike) -> tuple[date, date]:
    """Sunday..Saturday of the week containing `now`."""
    d = as_date(now)
    start = d - timedelta(days=js_weekday(d))
    return start, start + timedelta(days=6)


def month_start(value: DateLike) -> date:
    return as_date(value).replace(day=1)


def add_months(value: date, months: int) -> date:
    """First day of the month `months` away from `value`'s month."""
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_end(value: date) -> date:
    return add_months(value, 1) - timedelta(days=1)


def count_work_days(start: Optional[DateLike], end: Optional[DateLike]) -> int:
    """Number of Monday..Friday days in [start, end]."""
    if not start or not end:
        return 0

    current = as_date(start)
    last = as_date(end)
    days = 0
    while current <= last:
        if current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days
