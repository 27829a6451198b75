"""Tests for day / week / month navigation."""

from datetime import date

import pytest

from month_layout import build_grid
from navigation import (
    DAY_ABBR,
    navigate,
    next_month,
    prev_month,
    shift_month,
    view_dates,
    view_title,
    week_dates,
)


def test_prev_next_month_wrap_years():
    assert prev_month(2025, 1) == (2024, 12)
    assert next_month(2025, 12) == (2026, 1)
    assert next_month(2025, 6) == (2025, 7)


@pytest.mark.parametrize("start, delta, expected", [
    (date(2025, 1, 31), 1, date(2025, 2, 28)),
    (date(2024, 1, 31), 1, date(2024, 2, 29)),
    (date(2025, 3, 31), -1, date(2025, 2, 28)),
    (date(2025, 6, 23), 1, date(2025, 7, 23)),
    (date(2025, 11, 15), 3, date(2026, 2, 15)),
    (date(2025, 6, 23), 0, date(2025, 6, 23)),
])
def test_shift_month_clamps_day(start, delta, expected):
    assert shift_month(start, delta) == expected


def test_navigate_by_view():
    d = date(2025, 6, 23)
    assert navigate(d, "day", 1) == date(2025, 6, 24)
    assert navigate(d, "day", -1) == date(2025, 6, 22)
    assert navigate(d, "week", 1) == date(2025, 6, 30)
    assert navigate(d, "week", -1) == date(2025, 6, 16)
    assert navigate(d, "month", 1) == date(2025, 7, 23)
    assert navigate(d, "month", -1) == date(2025, 5, 23)


def test_unknown_view_rejected():
    with pytest.raises(ValueError):
        navigate(date(2025, 6, 23), "year", 1)
    with pytest.raises(ValueError):
        view_dates(date(2025, 6, 23), "agenda")


def test_week_dates_monday_first():
    days = week_dates(date(2025, 6, 29))  # a Sunday
    assert days[0] == date(2025, 6, 23)
    assert days[-1] == date(2025, 6, 29)
    assert [d.weekday() for d in days] == list(range(7))
    assert len(DAY_ABBR) == 7 and DAY_ABBR[0] == "Mon"


def test_view_dates():
    d = date(2025, 6, 25)
    assert view_dates(d, "day") == (d,)
    assert view_dates(d, "week") == week_dates(d)
    assert view_dates(d, "month") == build_grid(d)


def test_view_titles():
    assert view_title(date(2025, 6, 23), "day") == "Monday, June 23, 2025"
    assert view_title(date(2025, 6, 25), "week") == "Jun 23 - Jun 29, 2025"
    assert view_title(date(2024, 12, 31), "week") == "Dec 30, 2024 - Jan 5, 2025"
    assert view_title(date(2025, 6, 25), "month") == "June 2025"
