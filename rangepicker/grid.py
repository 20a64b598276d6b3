# rangepicker/grid.py
from __future__ import annotations

from typing import List, Optional, Tuple

from pendulum import DateTime

from .interval import effective_bounds
from .model import (
    CalendarHeader,
    CalendarMatrix,
    CalendarView,
    Cell,
    CellFlags,
    CompleteRange,
    Constraints,
    DropdownOption,
    Locale,
    Selection,
    Side,
    selection_end,
)
from .predicates import normalize_tags

ROWS = 6
COLS = 7


def weekday_index(d: DateTime) -> int:
    """0=Sunday .. 6=Saturday (the only weekday convention used internally)."""
    return d.isoweekday() % 7


def build_calendar(anchor: DateTime, first_day: int) -> CalendarMatrix:
    """6x7 row-major grid of the anchor's month, lead/trail days included.

    Every cell carries the anchor's time of day so that cells can be compared
    against time-bearing selection endpoints.
    """
    if not 0 <= int(first_day) <= 6:
        raise ValueError(f"first_day must be 0..6; got {first_day!r}")

    day1 = anchor.set(day=1)
    offset = (weekday_index(day1) - int(first_day) + 7) % 7
    cur = day1.subtract(days=offset)

    rows: List[Tuple[DateTime, ...]] = []
    for _row in range(ROWS):
        row: List[DateTime] = []
        for _col in range(COLS):
            row.append(cur.set(hour=anchor.hour, minute=anchor.minute, second=anchor.second))
            cur = cur.add(days=1)
        rows.append(tuple(row))
    return tuple(rows)


def weekday_labels(locale: Locale) -> Tuple[str, ...]:
    names = tuple(locale.day_names)
    k = int(locale.first_day) % 7
    return names[k:] + names[:k]


def week_numbers(matrix: CalendarMatrix) -> Tuple[int, ...]:
    return tuple(row[0].isocalendar()[1] for row in matrix)


def in_range(cell: DateTime, start: DateTime, end: DateTime) -> bool:
    # Strictly between the endpoints' days; the endpoints themselves are start/end cells.
    return start.end_of("day") < cell < end.start_of("day")


def classify_cell(
    cell: DateTime,
    anchor: DateTime,
    selection: Selection,
    constraints: Constraints,
    side: Side,
    *,
    today: DateTime,
) -> CellFlags:
    bounds = effective_bounds(selection, constraints, side)
    end = selection_end(selection)

    disabled = False
    if bounds.floor is not None and cell.start_of("day") < bounds.floor.start_of("day"):
        disabled = True
    if bounds.ceiling is not None and cell.end_of("day") > bounds.ceiling.end_of("day"):
        disabled = True
    if constraints.invalid_date.is_invalid(cell):
        disabled = True

    return CellFlags(
        is_today=cell.is_same_day(today),
        is_weekend=weekday_index(cell) in (0, 6),
        is_off_month=cell.month != anchor.month,
        is_disabled=disabled,
        is_start=cell.is_same_day(selection.start),
        is_end=end is not None and cell.is_same_day(end),
        is_in_range=end is not None and in_range(cell, selection.start, end),
        is_available=not disabled,
        custom_tags=normalize_tags(constraints.custom_date.tags_for(cell)),
    )


def classify_matrix(
    matrix: CalendarMatrix,
    anchor: DateTime,
    selection: Selection,
    constraints: Constraints,
    side: Side,
    *,
    today: DateTime,
) -> Tuple[Tuple[Cell, ...], ...]:
    return tuple(
        tuple(
            Cell(date=d, flags=classify_cell(d, anchor, selection, constraints, side, today=today))
            for d in row
        )
        for row in matrix
    )


def preview_matrix(matrix: CalendarMatrix, start: DateTime, hovered: DateTime) -> Tuple[Tuple[bool, ...], ...]:
    """Prospective in-range flags with `hovered` standing in for the end."""
    return tuple(
        tuple(in_range(d, start, hovered) or d.is_same_day(hovered) for d in row)
        for row in matrix
    )


def build_header(
    matrix: CalendarMatrix,
    selection: Selection,
    constraints: Constraints,
    side: Side,
    locale: Locale,
    *,
    linked: bool,
    single_date: bool,
    show_week_numbers: bool = False,
) -> CalendarHeader:
    bounds = effective_bounds(selection, constraints, side)
    floor, ceiling = bounds.floor, bounds.ceiling
    first, last = matrix[0][0], matrix[ROWS - 1][COLS - 1]
    shown = matrix[1][1]

    prev_available = (floor is None or first.start_of("day") > floor.start_of("day")) and (
        side is Side.PRIMARY or not linked
    )
    next_available = (ceiling is None or last.end_of("day") < ceiling.end_of("day")) and (
        side is Side.SECONDARY or not linked or single_date
    )

    min_year = floor.year if floor is not None else constraints.min_year
    max_year = ceiling.year if ceiling is not None else constraints.max_year

    months: List[DropdownOption] = []
    for m in range(1, 13):
        disabled = bool(
            (floor is not None and shown.year == floor.year and m < floor.month)
            or (ceiling is not None and shown.year == ceiling.year and m > ceiling.month)
        )
        months.append(
            DropdownOption(value=m, label=locale.month_names[m - 1], selected=m == shown.month, disabled=disabled)
        )

    years = tuple(
        DropdownOption(value=y, label=str(y), selected=y == shown.year)
        for y in range(min_year, max_year + 1)
    )

    return CalendarHeader(
        title=f"{locale.month_names[shown.month - 1]} {shown.year}",
        prev_available=prev_available,
        next_available=next_available,
        weekday_labels=weekday_labels(locale),
        month_options=tuple(months),
        year_options=years,
        week_numbers=week_numbers(matrix) if show_week_numbers else (),
    )


def build_view(
    anchor: DateTime,
    selection: Selection,
    constraints: Constraints,
    side: Side,
    locale: Locale,
    *,
    today: DateTime,
    linked: bool = True,
    single_date: bool = False,
    show_week_numbers: bool = False,
    matrix: Optional[CalendarMatrix] = None,
) -> CalendarView:
    if matrix is None:
        matrix = build_calendar(anchor, locale.first_day)
    header = build_header(
        matrix,
        selection,
        constraints,
        side,
        locale,
        linked=linked,
        single_date=single_date,
        show_week_numbers=show_week_numbers,
    )
    cells = classify_matrix(matrix, anchor, selection, constraints, side, today=today)
    return CalendarView(side=side, anchor=anchor, header=header, cells=cells)


def is_committable(selection: Selection) -> bool:
    return isinstance(selection, CompleteRange) and selection.start <= selection.end
