# app/services/week_boundaries.py
from __future__ import annotations

from datetime import date as date_type, datetime, timedelta

from app.schemas.week import WeekWindow

# Wednesday in the Sunday=0 ... Saturday=6 numbering
WEEK_START_DOW = 3

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class InvalidDateError(ValueError):
    """
    Raised when a stored or user-supplied date string cannot be parsed.
    """


def parse_calendar_date(value: str | date_type | datetime) -> date_type:
    """
    Parse a meeting date into a calendar date.

    Accepts `YYYY-MM-DD` and full ISO-8601 datetimes (the date part is kept,
    no time zone conversion is applied). `date`/`datetime` objects pass through.

    Raises
    ------
    InvalidDateError
        If the value is empty or not an ISO date/datetime.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date_type):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateError(f"Invalid date: {value!r}")

    text = value.strip()
    try:
        return date_type.fromisoformat(text)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date: {value!r}") from exc


def _sunday_based_dow(day: date_type) -> int:
    # date.weekday() is Monday=0 ... Sunday=6
    return (day.weekday() + 1) % 7


def week_start(day: date_type) -> date_type:
    """
    Return the Wednesday that starts the organizational week containing `day`.
    """
    dow = _sunday_based_dow(day)
    if dow >= WEEK_START_DOW:
        days_back = dow - WEEK_START_DOW
    else:
        # Sunday, Monday, Tuesday belong to the previous Wednesday's week
        days_back = dow + 4
    return day - timedelta(days=days_back)


def week_boundaries(day: date_type) -> tuple[date_type, date_type]:
    """
    Return `(week_start, week_end)` for the Wednesday-to-Tuesday week
    containing `day`. `week_end` is always `week_start + 6 days`.
    """
    start = week_start(day)
    return start, start + timedelta(days=6)


def week_label(day: date_type) -> str:
    """
    Short label for the week containing `day`, e.g. `Nov19` or `Dec02`.
    """
    start = week_start(day)
    return f"{_MONTH_ABBR[start.month - 1]}{start.day:02d}"


def week_window(day: date_type) -> WeekWindow:
    start, end = week_boundaries(day)
    return WeekWindow(date=day, week_start=start, week_end=end, label=week_label(day))


def week_for_offset(today: date_type, offset: int = 0) -> tuple[date_type, date_type]:
    """
    Boundaries of the week `offset` weeks away from the one containing `today`
    (0 = current week, -1 = previous week, ...).
    """
    return week_boundaries(today + timedelta(weeks=offset))
