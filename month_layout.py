"""Month-grid layout engine: pure functions, no UI dependencies.

Maps a list of appointments onto the fixed 6×7 month grid: builds the grid,
splits multi-day appointments into per-row segments and decides which
single-day appointments each cell shows and how many overflow.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, Sequence

from appointments import Appointment

GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_SIZE = GRID_ROWS * GRID_COLUMNS
DEFAULT_VISIBLE_LIMIT = 3


# --- grid -------------------------------------------------------------------

def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def build_grid(reference: date) -> tuple[date, ...]:
    """Return the 42 consecutive dates shown for *reference*'s month.

    The grid starts on the Monday on or before the 1st of the month.
    """
    first = _as_date(reference).replace(day=1)
    start = first - timedelta(days=first.weekday())  # Monday = 0
    return tuple(start + timedelta(days=i) for i in range(GRID_SIZE))


def week_numbers(grid: Sequence[date]) -> list[int]:
    """Return the ISO week number of each grid row."""
    return [grid[r * GRID_COLUMNS].isocalendar()[1] for r in range(len(grid) // GRID_COLUMNS)]


# --- spans ------------------------------------------------------------------

def span_dates(appointment: Appointment) -> tuple[date, ...]:
    """Return every calendar date from the start's day through the end.

    Walks local midnights from the start date while they are not after the
    end instant. An end before the start's midnight yields an empty tuple,
    an end earlier on the start's day yields just the start date.
    """
    cursor = datetime.combine(appointment.start.date(), time.min)
    days: list[date] = []
    while cursor <= appointment.end:
        days.append(cursor.date())
        cursor += timedelta(days=1)
    return tuple(days)


# --- segments ---------------------------------------------------------------

@dataclass(frozen=True)
class Segment:
    """One row-bounded bar of a multi-day appointment."""

    appointment: Appointment
    row: int
    start_column: int
    end_column: int
    span_dates: tuple[date, ...]

    @property
    def appointment_id(self) -> str:
        return self.appointment.id

    @property
    def key(self) -> tuple[str, int]:
        return (self.appointment.id, self.row)

    @property
    def width(self) -> int:
        return self.end_column - self.start_column + 1


def _row_spans(start_index: int, end_index: int) -> Iterable[tuple[int, int, int]]:
    """Yield (row, start_column, end_column) for a grid index range."""
    start_row, start_col = divmod(start_index, GRID_COLUMNS)
    end_row, end_col = divmod(end_index, GRID_COLUMNS)
    for row in range(start_row, end_row + 1):
        yield (
            row,
            start_col if row == start_row else 0,
            end_col if row == end_row else GRID_COLUMNS - 1,
        )


def plan_segments(
    appointments: Iterable[Appointment], grid: Sequence[date],
) -> tuple[Segment, ...]:
    """Place every multi-day appointment on the grid as one segment per row.

    Appointments whose first or last day is not on the grid are left out.
    """
    index_of = {d: i for i, d in enumerate(grid)}
    segments: list[Segment] = []
    for appt in appointments:
        days = span_dates(appt)
        if len(days) <= 1:
            continue
        start_index = index_of.get(days[0])
        end_index = index_of.get(days[-1])
        if start_index is None or end_index is None:
            continue
        segments.extend(
            Segment(appt, row, start_col, end_col, days)
            for row, start_col, end_col in _row_spans(start_index, end_index)
        )
    return tuple(segments)


def assign_lanes(segments: Iterable[Segment]) -> dict[tuple[str, int], int]:
    """Stack segments sharing a row into lanes so their bars do not overlap.

    Greedy in input order: each segment takes the lowest lane with no
    column collision in its row.
    """
    taken: dict[tuple[int, int], set[int]] = {}  # (row, lane) -> columns
    lanes: dict[tuple[str, int], int] = {}
    for seg in segments:
        cols = set(range(seg.start_column, seg.end_column + 1))
        lane = 0
        while taken.get((seg.row, lane), set()) & cols:
            lane += 1
        taken.setdefault((seg.row, lane), set()).update(cols)
        lanes[seg.key] = lane
    return lanes


# --- day selection ----------------------------------------------------------

def events_for_day(appointments: Iterable[Appointment], day: date) -> list[Appointment]:
    """Return appointments overlapping *day*, both ends inclusive, in input order."""
    day = _as_date(day)
    day_start = datetime.combine(day, time.min)
    day_end = datetime.combine(day, time.max)
    return [a for a in appointments if a.start <= day_end and a.end >= day_start]


def single_day_subset(day_events: Iterable[Appointment]) -> list[Appointment]:
    """Drop multi-day appointments; they are drawn as segments instead."""
    return [a for a in day_events if len(span_dates(a)) == 1]


# --- overflow ---------------------------------------------------------------

@dataclass(frozen=True)
class OverflowSummary:
    visible: tuple[Appointment, ...]
    hidden_count: int


def summarize_overflow(
    day_events: Sequence[Appointment], visible_limit: int = DEFAULT_VISIBLE_LIMIT,
) -> OverflowSummary:
    limit = max(0, visible_limit)
    return OverflowSummary(
        visible=tuple(day_events[:limit]),
        hidden_count=max(0, len(day_events) - limit),
    )


# --- assembly ---------------------------------------------------------------

@dataclass(frozen=True)
class DayCell:
    date: date
    is_current_month: bool
    is_today: bool
    day_events: tuple[Appointment, ...]
    single_day_events: tuple[Appointment, ...]
    visible_events: tuple[Appointment, ...]
    overflow_count: int


@dataclass(frozen=True)
class MonthLayout:
    reference: date
    grid: tuple[date, ...]
    segments: tuple[Segment, ...]
    cells: tuple[DayCell, ...]
    week_numbers: tuple[int, ...]

    def cell_at(self, row: int, column: int) -> DayCell:
        return self.cells[row * GRID_COLUMNS + column]

    def segments_in_row(self, row: int) -> list[Segment]:
        return [s for s in self.segments if s.row == row]


def build_day_cells(
    appointments: Sequence[Appointment],
    grid: Sequence[date],
    reference: date,
    today: date,
    visible_limit: int = DEFAULT_VISIBLE_LIMIT,
) -> tuple[DayCell, ...]:
    reference = _as_date(reference)
    cells: list[DayCell] = []
    for d in grid:
        day_events = events_for_day(appointments, d)
        singles = single_day_subset(day_events)
        summary = summarize_overflow(singles, visible_limit)
        cells.append(DayCell(
            date=d,
            is_current_month=(d.year, d.month) == (reference.year, reference.month),
            is_today=d == today,
            day_events=tuple(day_events),
            single_day_events=tuple(singles),
            visible_events=summary.visible,
            overflow_count=summary.hidden_count,
        ))
    return tuple(cells)


def layout_month(
    reference: date,
    appointments: Sequence[Appointment],
    today: date | None = None,
    visible_limit: int = DEFAULT_VISIBLE_LIMIT,
) -> MonthLayout:
    """Recompute the whole month view for *reference* in one pass."""
    reference = _as_date(reference)
    if today is None:
        today = date.today()
    appointments = tuple(appointments)
    grid = build_grid(reference)
    return MonthLayout(
        reference=reference,
        grid=grid,
        segments=plan_segments(appointments, grid),
        cells=build_day_cells(appointments, grid, reference, _as_date(today), visible_limit),
        week_numbers=tuple(week_numbers(grid)),
    )


DisclosureHandler = Callable[[date, Sequence[Appointment]], None]


def disclose(cell: DayCell, on_disclose: DisclosureHandler) -> bool:
    """Hand the cell's full appointment list to *on_disclose* if it overflows.

    The list includes multi-day appointments touching the date, not only
    the single-day ones counted by ``overflow_count``.
    """
    if cell.overflow_count <= 0:
        return False
    on_disclose(cell.date, cell.day_events)
    return True
