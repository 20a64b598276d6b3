# rangepicker/coordinator.py
from __future__ import annotations

import logging
from typing import Optional

from pendulum import DateTime

from .model import CompleteRange, Selection, Side

logger = logging.getLogger(__name__)

ANCHOR_DAY = 2


def to_anchor(d: DateTime) -> DateTime:
    # Day 2 survives month shifts without day-of-month overflow (Jan 31 + 1 month).
    return d.set(day=ANCHOR_DAY)


def month_index(d: DateTime) -> int:
    return d.year * 12 + (d.month - 1)


class LinkedCalendarCoordinator:
    """Owns the month anchors of the two calendars.

    Linked mode keeps `right` exactly one month after `left`; every mutation
    finishes with the max_date clamp, which re-establishes that distance.
    """

    def __init__(
        self,
        start: DateTime,
        *,
        linked: bool = True,
        single_date: bool = False,
        min_date: Optional[DateTime] = None,
        max_date: Optional[DateTime] = None,
        min_year: int = 1900,
        max_year: int = 2100,
    ) -> None:
        self.linked = bool(linked)
        self.single_date = bool(single_date)
        self.min_date = min_date
        self.max_date = max_date
        self.min_year = int(min_year)
        self.max_year = int(max_year)

        self._left = to_anchor(start)
        self._right = self._left.add(months=1)
        self._clamp_to_max_date()

    @property
    def left(self) -> DateTime:
        return self._left

    @property
    def right(self) -> DateTime:
        return self._right

    def anchor(self, side: Side) -> DateTime:
        return self._left if side is Side.PRIMARY else self._right

    def month_distance(self) -> int:
        return month_index(self._right) - month_index(self._left)

    # --- transitions ---------------------------------------------------------

    def sync_to_selection(self, selection: Selection) -> None:
        # An open selection keeps the calendars still while the end is picked.
        if not isinstance(selection, CompleteRange):
            return
        start, end = selection.start, selection.end

        self._left = to_anchor(start)
        if not self.linked and (end.month != start.month or end.year != start.year):
            self._right = to_anchor(end)
        else:
            self._right = self._left.add(months=1)
        self._clamp_to_max_date()

    def navigate(self, side: Side, delta: int) -> None:
        delta = int(delta)
        if side is Side.PRIMARY:
            self._left = self._left.add(months=delta)
            if self.linked:
                self._right = self._right.add(months=delta)
        else:
            self._right = self._right.add(months=delta)
            if self.linked:
                self._left = self._left.add(months=delta)
        self._clamp_to_max_date()

    def prev(self, side: Side) -> None:
        self.navigate(side, -1)

    def next(self, side: Side) -> None:
        self.navigate(side, +1)

    def set_month_year(self, side: Side, month: int, year: int, *, start: Optional[DateTime] = None) -> None:
        """Dropdown change. The secondary calendar never goes before `start`'s month."""
        month, year = self._sanitize_month_year(int(month), int(year))
        if side is Side.SECONDARY and start is not None and year * 12 + (month - 1) < month_index(start):
            year, month = start.year, start.month

        if side is Side.PRIMARY:
            self._left = self._left.set(year=year, month=month)
            if self.linked:
                self._right = self._left.add(months=1)
        else:
            self._right = self._right.set(year=year, month=month)
            if self.linked:
                self._left = self._right.subtract(months=1)
        self._clamp_to_max_date()

    # --- helpers -------------------------------------------------------------

    def _sanitize_month_year(self, month: int, year: int):
        if not 1 <= month <= 12:
            logger.debug("month %s out of range; clamping", month)
            month = min(12, max(1, month))
        if year < self.min_year:
            year = self.min_year
        elif year > self.max_year:
            year = self.max_year

        idx = year * 12 + (month - 1)
        if self.min_date is not None and idx < month_index(self.min_date):
            year, month = self.min_date.year, self.min_date.month
        elif self.max_date is not None and idx > month_index(self.max_date):
            year, month = self.max_date.year, self.max_date.month
        return month, year

    def _clamp_to_max_date(self) -> None:
        if self.max_date is None or not self.linked or self.single_date:
            return
        if self._right > self.max_date:
            self._right = to_anchor(self.max_date)
            self._left = self._right.subtract(months=1)
