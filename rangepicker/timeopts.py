# rangepicker/timeopts.py
from __future__ import annotations

from typing import List, Tuple

from pendulum import DateTime

from .interval import effective_bounds
from .model import PickingEnd, Selection, Side, TimeConfig, TimeOption, TimeOptions

AM = "AM"
PM = "PM"


def normalize_meridiem(value: str) -> str:
    s = str(value or "").strip().upper()
    if s in {"AM", "A"}:
        return AM
    if s in {"PM", "P"}:
        return PM
    raise ValueError(f"Invalid meridiem: {value!r}")


def to_24h(hour: int, meridiem: str) -> int:
    """Displayed 1..12 hour + AM/PM -> 0..23."""
    hour = int(hour)
    if not 1 <= hour <= 12:
        raise ValueError(f"12-hour value must be 1..12; got {hour}")
    mer = normalize_meridiem(meridiem)
    if mer == AM and hour == 12:
        return 0
    if mer == PM and hour != 12:
        return hour + 12
    return hour


def from_24h(hour: int) -> Tuple[int, str]:
    """0..23 -> (displayed 1..12 hour, AM/PM)."""
    hour = int(hour)
    if not 0 <= hour <= 23:
        raise ValueError(f"24-hour value must be 0..23; got {hour}")
    mer = PM if hour >= 12 else AM
    h12 = hour % 12
    return (12 if h12 == 0 else h12), mer


def floor_minute(minute: int, increment: int) -> int:
    # Always rounds down onto the increment grid.
    inc = max(1, int(increment))
    return int(minute) - (int(minute) % inc)


def snap_to_increment(value: DateTime, increment: int) -> DateTime:
    return value.set(minute=floor_minute(value.minute, increment), microsecond=0)


def _hour_options(subject: DateTime, floor, ceiling, cfg: TimeConfig) -> Tuple[TimeOption, ...]:
    twelve = int(cfg.hour_mode) == 12
    pm = subject.hour >= 12
    out: List[TimeOption] = []
    for i in (range(1, 13) if twelve else range(0, 24)):
        h24 = to_24h(i, PM if pm else AM) if twelve else i
        t = subject.set(hour=h24, minute=0, second=0, microsecond=0)

        disabled = False
        if floor is not None and t.set(minute=59, second=59) < floor:
            disabled = True
        if ceiling is not None and t > ceiling:
            disabled = True

        out.append(
            TimeOption(value=i, label=str(i), selected=h24 == subject.hour and not disabled, disabled=disabled)
        )
    return tuple(out)


def _minute_options(subject: DateTime, floor, ceiling, cfg: TimeConfig) -> Tuple[TimeOption, ...]:
    inc = max(1, int(cfg.increment))
    out: List[TimeOption] = []
    for i in range(0, 60, inc):
        t = subject.set(minute=i, second=0, microsecond=0)

        disabled = False
        if floor is not None and t.set(second=59) < floor:
            disabled = True
        if ceiling is not None and t > ceiling:
            disabled = True

        selected = i <= subject.minute < i + inc and not disabled
        out.append(TimeOption(value=i, label=f"{i:02d}", selected=selected, disabled=disabled))
    return tuple(out)


def _second_options(subject: DateTime, floor, ceiling) -> Tuple[TimeOption, ...]:
    out: List[TimeOption] = []
    for i in range(60):
        t = subject.set(second=i, microsecond=0)

        disabled = False
        if floor is not None and t < floor:
            disabled = True
        if ceiling is not None and t > ceiling:
            disabled = True

        out.append(TimeOption(value=i, label=f"{i:02d}", selected=subject.second == i and not disabled, disabled=disabled))
    return tuple(out)


def _meridiem_options(subject: DateTime, floor, ceiling) -> Tuple[TimeOption, ...]:
    # Coarse half-day test, independent of the selected hour.
    midnight = subject.set(hour=0, minute=0, second=0, microsecond=0)
    noon = subject.set(hour=12, minute=0, second=0, microsecond=0)

    am_disabled = floor is not None and noon < floor
    pm_disabled = ceiling is not None and midnight > ceiling
    pm = subject.hour >= 12

    return (
        TimeOption(value=AM, label=AM, selected=not pm, disabled=am_disabled),
        TimeOption(value=PM, label=PM, selected=pm, disabled=pm_disabled),
    )


def compute_time_options(
    subject: DateTime,
    selection: Selection,
    constraints,
    side: Side,
    cfg: TimeConfig,
) -> TimeOptions:
    """Enabled hour/minute/second/meridiem options for one side's time picker.

    `subject` is the instant displayed on that side (start for the primary
    side, end or the right anchor for the secondary side).
    """
    bounds = effective_bounds(selection, constraints, side)
    floor, ceiling = bounds.floor, bounds.ceiling

    return TimeOptions(
        side=side,
        subject=subject,
        hours=_hour_options(subject, floor, ceiling, cfg),
        minutes=_minute_options(subject, floor, ceiling, cfg),
        seconds=_second_options(subject, floor, ceiling) if cfg.seconds else (),
        meridiem=_meridiem_options(subject, floor, ceiling) if int(cfg.hour_mode) == 12 else (),
        locked=side is Side.SECONDARY and isinstance(selection, PickingEnd),
    )
