"""View navigation for the day / week / month calendar. No UI dependencies."""

import calendar
from datetime import date, timedelta

from month_layout import build_grid

DAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

VIEWS = ("day", "week", "month")


def _check_view(view: str) -> None:
    if view not in VIEWS:
        raise ValueError(f"unknown view {view!r}; expected one of {VIEWS}")


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def shift_month(d: date, delta: int) -> date:
    """Move *d* by *delta* months, clamping the day to the target month's length."""
    year, month = d.year, d.month
    step = next_month if delta > 0 else prev_month
    for _ in range(abs(delta)):
        year, month = step(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def navigate(d: date, view: str, direction: int) -> date:
    """Return the reference date one step forward (+1) or back (-1) in *view*."""
    _check_view(view)
    step = 1 if direction > 0 else -1
    if view == "day":
        return d + timedelta(days=step)
    if view == "week":
        return d + timedelta(days=7 * step)
    return shift_month(d, step)


def week_dates(d: date) -> tuple[date, ...]:
    """Return the Monday-first week containing *d*."""
    monday = d - timedelta(days=d.weekday())
    return tuple(monday + timedelta(days=i) for i in range(7))


def view_dates(d: date, view: str) -> tuple[date, ...]:
    _check_view(view)
    if view == "day":
        return (d,)
    if view == "week":
        return week_dates(d)
    return build_grid(d)


def view_title(d: date, view: str) -> str:
    """Header text for the current view."""
    _check_view(view)
    if view == "day":
        return f"{d.strftime('%A')}, {calendar.month_name[d.month]} {d.day}, {d.year}"
    if view == "week":
        days = week_dates(d)
        lo, hi = days[0], days[-1]
        lo_str = f"{calendar.month_abbr[lo.month]} {lo.day}"
        hi_str = f"{calendar.month_abbr[hi.month]} {hi.day}, {hi.year}"
        if lo.year != hi.year:
            lo_str += f", {lo.year}"
        return f"{lo_str} - {hi_str}"
    return f"{calendar.month_name[d.month]} {d.year}"
