# tests/test_week_boundaries.py
from datetime import date, datetime, timedelta

import pytest

from app.services.week_boundaries import (
    InvalidDateError,
    parse_calendar_date,
    week_boundaries,
    week_for_offset,
    week_label,
    week_window,
)


@pytest.mark.parametrize(
    "day, expected_start, expected_end",
    [
        (date(2024, 1, 10), date(2024, 1, 10), date(2024, 1, 16)),  # Wednesday
        (date(2024, 1, 8), date(2024, 1, 3), date(2024, 1, 9)),  # Monday
        (date(2024, 1, 9), date(2024, 1, 3), date(2024, 1, 9)),  # Tuesday
        (date(2024, 1, 14), date(2024, 1, 10), date(2024, 1, 16)),  # Sunday
        (date(2024, 1, 13), date(2024, 1, 10), date(2024, 1, 16)),  # Saturday
        (date(2024, 1, 1), date(2023, 12, 27), date(2024, 1, 2)),  # across new year
    ],
)
def test_week_boundaries_known_dates(day, expected_start, expected_end):
    assert week_boundaries(day) == (expected_start, expected_end)


def test_week_boundaries_contain_day_and_span_seven_days():
    """
    For a full year of dates: start <= day <= end, end = start + 6 days and
    the start is always a Wednesday.
    """
    day = date(2024, 1, 1)
    while day.year == 2024:
        start, end = week_boundaries(day)
        assert start <= day <= end
        assert end - start == timedelta(days=6)
        assert start.weekday() == 2  # Wednesday
        day += timedelta(days=1)


def test_every_day_of_a_window_maps_to_same_window():
    start, end = week_boundaries(date(2024, 2, 21))
    for offset in range(7):
        assert week_boundaries(start + timedelta(days=offset)) == (start, end)


def test_week_label_uses_wednesday_of_the_week():
    assert week_label(date(2025, 11, 19)) == "Nov19"
    # Monday 2025-11-24 belongs to the week starting Wednesday 2025-11-19
    assert week_label(date(2025, 11, 24)) == "Nov19"
    assert week_label(date(2026, 12, 2)) == "Dec02"


def test_week_window_shape():
    window = week_window(date(2024, 1, 8))
    assert window.date == date(2024, 1, 8)
    assert window.week_start == date(2024, 1, 3)
    assert window.week_end == date(2024, 1, 9)
    assert window.label == "Jan03"


def test_week_for_offset_moves_whole_weeks():
    today = date(2024, 1, 12)
    assert week_for_offset(today) == (date(2024, 1, 10), date(2024, 1, 16))
    assert week_for_offset(today, -1) == (date(2024, 1, 3), date(2024, 1, 9))
    assert week_for_offset(today, -2) == (date(2023, 12, 27), date(2024, 1, 2))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-01-10", date(2024, 1, 10)),
        (" 2024-01-10 ", date(2024, 1, 10)),
        ("2024-01-10T18:30:00", date(2024, 1, 10)),
        ("2024-01-10T18:30:00Z", date(2024, 1, 10)),
        (date(2024, 1, 10), date(2024, 1, 10)),
        (datetime(2024, 1, 10, 18, 30), date(2024, 1, 10)),
    ],
)
def test_parse_calendar_date_accepts_iso_values(value, expected):
    assert parse_calendar_date(value) == expected


@pytest.mark.parametrize("value", ["", "   ", "not-a-date", "10/01/2024", "2024-13-40", None])
def test_parse_calendar_date_rejects_malformed_values(value):
    with pytest.raises(InvalidDateError):
        parse_calendar_date(value)


def test_invalid_date_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_calendar_date("garbage")
