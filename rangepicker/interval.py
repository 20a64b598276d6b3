# rangepicker/interval.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pendulum import DateTime, Duration

from .model import Constraints, PickingEnd, Selection, Side


@dataclass(frozen=True)
class EffectiveBounds:
    floor: Optional[DateTime]      # earliest selectable instant (None = unbounded)
    ceiling: Optional[DateTime]    # latest selectable instant (None = unbounded)

    floor_src: str                 # "min_date" | "selection_start" | "none"
    ceiling_src: str               # "max_date" | "max_span" | "none"


def span_limit(selection: Selection, constraints: Constraints) -> Optional[DateTime]:
    """start + max_span while the selection is open, else None."""
    if not isinstance(selection, PickingEnd) or constraints.max_span is None:
        return None
    return selection.start + constraints.max_span


def span_cap(start: DateTime, max_span: Duration, *, whole_days: bool) -> DateTime:
    """Latest end a range starting at `start` may have.

    Day-granular pickers allow the whole last day, the same ceiling the
    secondary calendar's cells are classified against.
    """
    cap = start + max_span
    return cap.end_of("day") if whole_days else cap


def effective_bounds(selection: Selection, constraints: Constraints, side: Side) -> EffectiveBounds:
    """
    Side-specific limits:
      - floor: primary side uses min_date; the secondary side can never go
        before the first endpoint, so it uses selection.start
      - ceiling: max_date, capped by start + max_span while the end is
        still being picked
    Callers decide the granularity (day cells compare start/end of day,
    time options compare exact instants).
    """
    if side is Side.PRIMARY:
        floor = constraints.min_date
        floor_src = "min_date" if floor is not None else "none"
    else:
        floor = selection.start
        floor_src = "selection_start"

    ceiling = constraints.max_date
    ceiling_src = "max_date" if ceiling is not None else "none"

    limit = span_limit(selection, constraints)
    if limit is not None and (ceiling is None or limit < ceiling):
        ceiling = limit
        ceiling_src = "max_span"

    return EffectiveBounds(floor=floor, ceiling=ceiling, floor_src=floor_src, ceiling_src=ceiling_src)
