# rangepicker/model.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union

from pendulum import DateTime, Duration

from rangepicker.predicates import (
    NEVER_INVALID,
    NO_CUSTOM_TAGS,
    CustomDatePredicate,
    InvalidDatePredicate,
)


class Side(str, Enum):
    PRIMARY = "left"
    SECONDARY = "right"

    @classmethod
    def parse(cls, value: Any) -> "Side":
        if isinstance(value, Side):
            return value
        s = str(value or "").strip().lower()
        if s in {"left", "primary", "start"}:
            return cls.PRIMARY
        if s in {"right", "secondary", "end"}:
            return cls.SECONDARY
        raise ValueError(f"Unknown calendar side: {value!r}")


class SelectionState(str, Enum):
    IDLE = "idle"
    PICKING_END = "picking_end"


# --- Selection ---------------------------------------------------------------

@dataclass(frozen=True)
class CompleteRange:
    start: DateTime
    end: DateTime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"range end {self.end} is before start {self.start}")


@dataclass(frozen=True)
class PickingEnd:
    """Open selection: the first endpoint is set, the second is being picked."""

    start: DateTime


Selection = Union[CompleteRange, PickingEnd]


def selection_end(sel: Selection) -> Optional[DateTime]:
    return sel.end if isinstance(sel, CompleteRange) else None


@dataclass(frozen=True)
class RangeSelection:
    current: Selection
    committed: CompleteRange

    @property
    def state(self) -> SelectionState:
        return SelectionState.PICKING_END if isinstance(self.current, PickingEnd) else SelectionState.IDLE


# --- Configuration values ------------------------------------------------------

@dataclass(frozen=True)
class Constraints:
    min_date: Optional[DateTime] = None
    max_date: Optional[DateTime] = None
    max_span: Optional[Duration] = None
    min_year: int = 1900
    max_year: int = 2100
    invalid_date: InvalidDatePredicate = NEVER_INVALID
    custom_date: CustomDatePredicate = NO_CUSTOM_TAGS


@dataclass(frozen=True)
class PresetRange:
    label: str
    start: DateTime
    end: DateTime


@dataclass(frozen=True)
class TimeConfig:
    enabled: bool = False
    increment: int = 1
    seconds: bool = False
    hour_mode: int = 12


DEFAULT_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
DEFAULT_DAY_NAMES = ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa")


@dataclass(frozen=True)
class Locale:
    """Display/formatting knobs. day_names always starts on Sunday."""

    format: str = "MM/DD/YYYY"
    separator: str = " - "
    first_day: int = 0
    month_names: Tuple[str, ...] = DEFAULT_MONTH_NAMES
    day_names: Tuple[str, ...] = DEFAULT_DAY_NAMES
    apply_label: str = "Apply"
    cancel_label: str = "Cancel"
    week_label: str = "W"
    custom_range_label: str = "Custom Range"
    lang: str = "en"


# --- Computed values -----------------------------------------------------------

CalendarMatrix = Tuple[Tuple[DateTime, ...], ...]


@dataclass(frozen=True)
class CellFlags:
    is_today: bool = False
    is_weekend: bool = False
    is_off_month: bool = False
    is_disabled: bool = False
    is_start: bool = False
    is_end: bool = False
    is_in_range: bool = False
    is_available: bool = True
    custom_tags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Cell:
    date: DateTime
    flags: CellFlags


@dataclass(frozen=True)
class DropdownOption:
    value: int
    label: str
    selected: bool = False
    disabled: bool = False


@dataclass(frozen=True)
class CalendarHeader:
    title: str
    prev_available: bool
    next_available: bool
    weekday_labels: Tuple[str, ...]
    month_options: Tuple[DropdownOption, ...] = ()
    year_options: Tuple[DropdownOption, ...] = ()
    week_numbers: Tuple[int, ...] = ()


@dataclass(frozen=True)
class CalendarView:
    side: Side
    anchor: DateTime
    header: CalendarHeader
    cells: Tuple[Tuple[Cell, ...], ...]


@dataclass(frozen=True)
class TimeOption:
    value: Union[int, str]
    label: str
    selected: bool = False
    disabled: bool = False


@dataclass(frozen=True)
class TimeOptions:
    side: Side
    subject: DateTime
    hours: Tuple[TimeOption, ...]
    minutes: Tuple[TimeOption, ...]
    seconds: Tuple[TimeOption, ...] = ()
    meridiem: Tuple[TimeOption, ...] = ()
    locked: bool = False


@dataclass(frozen=True)
class HoverPreview:
    hovered: DateTime
    left: Tuple[Tuple[bool, ...], ...]
    right: Tuple[Tuple[bool, ...], ...]


@dataclass(frozen=True)
class RenderSnapshot:
    left: CalendarView
    right: CalendarView
    left_time: Optional[TimeOptions]
    right_time: Optional[TimeOptions]
    selected_label: Optional[str]
    apply_enabled: bool
    selected_text: str
    show_calendars: bool
    state: SelectionState
    hover: Optional[HoverPreview] = None


@dataclass(frozen=True)
class Notification:
    kind: str  # "opened" | "closed" | "applied" | "cancelled" | "selection_changed"
    start: Optional[DateTime] = None
    end: Optional[DateTime] = None
    label: Optional[str] = None
    snapshot: Optional[RenderSnapshot] = field(default=None, repr=False)


__all__ = [
    "CalendarHeader",
    "CalendarMatrix",
    "CalendarView",
    "Cell",
    "CellFlags",
    "CompleteRange",
    "Constraints",
    "DropdownOption",
    "HoverPreview",
    "Locale",
    "Notification",
    "PickingEnd",
    "PresetRange",
    "RangeSelection",
    "RenderSnapshot",
    "Selection",
    "SelectionState",
    "Side",
    "TimeConfig",
    "TimeOption",
    "TimeOptions",
    "selection_end",
]
