# rangepicker/engine.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .coordinator import LinkedCalendarCoordinator
from .grid import build_calendar, build_view, classify_cell, is_committable, preview_matrix
from .interval import span_cap
from .labels import match_label
from .model import (
    CompleteRange,
    HoverPreview,
    Notification,
    PickingEnd,
    PresetRange,
    RangeSelection,
    RenderSnapshot,
    Selection,
    SelectionState,
    Side,
    selection_end,
)
from .options import PickerOptions, normalize_options
from .timeopts import compute_time_options, floor_minute, from_24h, snap_to_increment, to_24h
from .util.timeparse import coerce_datetime, format_date, format_range_text, parse_range_text

logger = logging.getLogger(__name__)

Listener = Callable[[Notification], None]


class RangeSelectionEngine:
    """Command-driven range selection state machine.

    States: Idle (CompleteRange) and PickingEnd. The Presentation Layer calls
    the command methods and receives Notification objects through
    `subscribe`; it never touches selection or anchor state directly.
    """

    def __init__(
        self,
        options: Any,
        *,
        clock: Optional[Callable[[], DateTime]] = None,
    ) -> None:
        self.options: PickerOptions = normalize_options(options)
        self._clock = clock or (lambda: pendulum.now(self.options.tz))

        opts = self.options
        self._current: Selection = CompleteRange(opts.start_date, opts.end_date)
        self._committed: CompleteRange = self._current

        c = opts.constraints
        self._coordinator = LinkedCalendarCoordinator(
            opts.start_date,
            linked=opts.linked_calendars,
            single_date=opts.single_date,
            min_date=c.min_date,
            max_date=c.max_date,
            min_year=c.min_year,
            max_year=c.max_year,
        )
        self._coordinator.sync_to_selection(self._current)

        self._times: Dict[Side, Tuple[int, int, int]] = {}
        self._sync_times()

        self._is_open = False
        self._hover: Optional[DateTime] = None
        self._show_calendars = opts.always_show_calendars or not opts.ranges
        self._chosen_label = self._match_label()
        self._listeners: List[Listener] = []

    # --- state accessors -----------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def selection(self) -> RangeSelection:
        return RangeSelection(current=self._current, committed=self._committed)

    @property
    def state(self) -> SelectionState:
        return self.selection.state

    @property
    def start(self) -> DateTime:
        return self._current.start

    @property
    def end(self) -> Optional[DateTime]:
        return selection_end(self._current)

    @property
    def chosen_label(self) -> Optional[str]:
        return self._chosen_label

    @property
    def left_anchor(self) -> DateTime:
        return self._coordinator.left

    @property
    def right_anchor(self) -> DateTime:
        return self._coordinator.right

    @property
    def coordinator(self) -> LinkedCalendarCoordinator:
        return self._coordinator

    @property
    def apply_enabled(self) -> bool:
        return is_committable(self._current)

    # --- notifications -------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, kind: str, *, snapshot: Optional[RenderSnapshot] = None) -> None:
        n = Notification(
            kind=kind,
            start=self._current.start,
            end=selection_end(self._current),
            label=self._chosen_label,
            snapshot=snapshot,
        )
        for fn in list(self._listeners):
            fn(n)

    def _changed(self) -> None:
        if self._is_open:
            self._emit("selection_changed", snapshot=self.snapshot())

    def _commit_if_closed(self) -> None:
        # Programmatic edits on a closed picker become the committed range.
        if not self._is_open:
            self._committed = self._current

    # --- endpoint normalization ----------------------------------------------

    def _coerce(self, value: Any) -> DateTime:
        d = coerce_datetime(value, self.options.tz, self.options.locale)
        if d is None:
            raise ValueError("a date is required")
        return d

    def _clamp_start(self, value: DateTime) -> DateTime:
        tc, c = self.options.time, self.options.constraints
        value = snap_to_increment(value, tc.increment) if tc.enabled else value.start_of("day")
        if c.min_date is not None and value < c.min_date:
            value = c.min_date
        if c.max_date is not None and value > c.max_date:
            value = c.max_date
        return value

    def _clamp_end(self, value: DateTime, start: DateTime) -> DateTime:
        tc, c = self.options.time, self.options.constraints
        value = snap_to_increment(value, tc.increment) if tc.enabled else value.end_of("day")
        if c.max_date is not None and value > c.max_date:
            value = c.max_date
        if c.max_span is not None:
            cap = span_cap(start, c.max_span, whole_days=not tc.enabled)
            if value > cap:
                value = cap
        if value < start:
            value = start if tc.enabled else start.end_of("day")
        return value

    def _single(self, value: DateTime) -> CompleteRange:
        start = self._clamp_start(value)
        return CompleteRange(start, start if self.options.time.enabled else start.end_of("day"))

    def _range(self, a: DateTime, b: DateTime) -> Selection:
        if self.options.single_date:
            return self._single(a)
        # Inverted input is swapped rather than producing an unrenderable range.
        if b < a:
            a, b = b, a
        start = self._clamp_start(a)
        return CompleteRange(start, self._clamp_end(b, start))

    def _with_time(self, value: DateTime, side: Side) -> DateTime:
        if not self.options.time.enabled:
            return value
        h, m, s = self._times[side]
        return value.set(hour=h, minute=m, second=s, microsecond=0)

    # --- derived state -------------------------------------------------------

    def _match_label(self) -> Optional[str]:
        return match_label(
            self._current,
            self.options.ranges,
            custom_label=self.options.locale.custom_range_label,
            show_custom=self.options.show_custom_range_label,
        )

    def _sync_times(self) -> None:
        cur = self._current
        self._times[Side.PRIMARY] = (cur.start.hour, cur.start.minute, cur.start.second)
        if isinstance(cur, CompleteRange):
            self._times[Side.SECONDARY] = (cur.end.hour, cur.end.minute, cur.end.second)

    def _after_mutation(self, *, sync_anchors: bool = True) -> None:
        self._sync_times()
        if sync_anchors:
            self._coordinator.sync_to_selection(self._current)
        if not isinstance(self._current, PickingEnd):
            self._hover = None
        self._chosen_label = self._match_label()

    def is_available(self, value: Any, side: Any = Side.PRIMARY) -> bool:
        d = self._coerce(value)
        side = Side.parse(side)
        flags = classify_cell(
            d,
            self._coordinator.anchor(side),
            self._current,
            self.options.constraints,
            side,
            today=self._clock(),
        )
        return flags.is_available

    # --- commands: visibility ------------------------------------------------

    def open(self) -> None:
        if self._is_open:
            return
        if isinstance(self._current, CompleteRange):
            self._committed = self._current
        self._coordinator.sync_to_selection(self._current)
        self._is_open = True
        logger.debug("open: %s .. %s", self._committed.start, self._committed.end)
        self._emit("opened")
        self._changed()

    def close(self) -> None:
        """Hide without applying: uncommitted edits are discarded."""
        if not self._is_open:
            return
        self._current = self._committed
        self._after_mutation()
        self._is_open = False
        logger.debug("close: restored %s .. %s", self._committed.start, self._committed.end)
        self._emit("closed")

    def toggle(self) -> None:
        if self._is_open:
            self.close()
        else:
            self.open()

    def apply(self) -> None:
        cur = self._current
        if not isinstance(cur, CompleteRange) or not is_committable(cur):
            logger.debug("apply ignored: selection is not committable (%s)", self.state.value)
            return
        self._committed = cur
        logger.debug("apply: %s .. %s label=%r", cur.start, cur.end, self._chosen_label)
        self._emit("applied")
        self.close()

    def cancel(self) -> None:
        self._current = self._committed
        self._after_mutation()
        logger.debug("cancel: restored %s .. %s", self._committed.start, self._committed.end)
        self._emit("cancelled")
        self.close()

    # --- commands: selection -------------------------------------------------

    def choose_date(self, value: Any, side: Any = Side.PRIMARY) -> None:
        side = Side.parse(side)
        d = self._coerce(value)
        if not self.is_available(d, side):
            logger.debug("choose_date ignored: %s is not available on the %s calendar", d.to_date_string(), side.value)
            return

        opts = self.options
        if opts.single_date:
            self._current = self._single(self._with_time(d, Side.PRIMARY))
            self._after_mutation()
            if opts.auto_apply and not opts.time.enabled:
                self.apply()
            else:
                self._changed()
            return

        cur = self._current
        if isinstance(cur, CompleteRange) or d < cur.start.start_of("day"):
            self._current = PickingEnd(self._clamp_start(self._with_time(d, Side.PRIMARY)))
            logger.debug("choose_date: start=%s, picking end", self._current.start)
            self._after_mutation()
            self._changed()
            return

        end = self._with_time(d, Side.SECONDARY)
        if end < cur.start:
            # Same day as the start with an earlier end time.
            end = cur.start
        self._current = self._range(cur.start, end)
        logger.debug("choose_date: range %s .. %s", self._current.start, selection_end(self._current))
        self._after_mutation()
        if opts.auto_apply:
            self.apply()
        else:
            self._changed()

    def set_start(self, value: Any) -> None:
        d = self._coerce(value)
        cur = self._current
        if self.options.single_date:
            self._current = self._single(d)
        elif isinstance(cur, CompleteRange):
            self._current = self._range(d, cur.end)
        else:
            self._current = PickingEnd(self._clamp_start(d))
        self._after_mutation()
        self._commit_if_closed()
        self._changed()

    def set_end(self, value: Any) -> None:
        d = self._coerce(value)
        if self.options.single_date:
            self._current = self._single(self._current.start)
        else:
            self._current = self._range(self._current.start, d)
        self._after_mutation()
        self._commit_if_closed()
        self._changed()

    def hover_date(self, value: Any, side: Any = Side.PRIMARY) -> None:
        if not isinstance(self._current, PickingEnd):
            return
        side = Side.parse(side)
        d = self._coerce(value)
        if not self.is_available(d, side):
            return
        self._hover = d
        self._changed()

    def clear_hover(self) -> None:
        if self._hover is None:
            return
        self._hover = None
        self._changed()

    def choose_preset(self, label: str) -> None:
        opts = self.options
        if label == opts.locale.custom_range_label:
            self._chosen_label = label
            self._show_calendars = True
            self._changed()
            return

        preset = self._preset(label)
        self._current = self._range(preset.start, preset.end)
        self._after_mutation()
        self._chosen_label = label
        if not opts.always_show_calendars:
            self._show_calendars = False
        self.apply()

    def _preset(self, label: str) -> PresetRange:
        for p in self.options.ranges:
            if p.label == label:
                return p
        raise ValueError(f"Unknown preset range: {label!r}")

    def external_text_changed(self, raw: Optional[str]) -> None:
        opts = self.options
        parsed = parse_range_text(raw, opts.locale, opts.tz, single=opts.single_date)
        if parsed is None:
            logger.debug("external text ignored: %r", raw)
            return
        start, end = parsed
        self._current = self._range(start, end)
        self._commit_if_closed()
        self._after_mutation()
        self._changed()

    # --- commands: navigation ------------------------------------------------

    def navigate_prev(self, side: Any = Side.PRIMARY) -> None:
        self._coordinator.prev(Side.parse(side))
        self._changed()

    def navigate_next(self, side: Any = Side.PRIMARY) -> None:
        self._coordinator.next(Side.parse(side))
        self._changed()

    def change_month_year(self, side: Any, month: int, year: int) -> None:
        self._coordinator.set_month_year(Side.parse(side), month, year, start=self._current.start)
        self._changed()

    def change_time(
        self,
        side: Any,
        *,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        second: Optional[int] = None,
        meridiem: Optional[str] = None,
    ) -> None:
        tc = self.options.time
        if not tc.enabled:
            logger.debug("change_time ignored: time picker disabled")
            return
        side = Side.parse(side)
        cur = self._current
        if side is Side.SECONDARY and isinstance(cur, PickingEnd):
            logger.debug("change_time ignored: end time is locked until the end date is chosen")
            return

        subject = cur.start if side is Side.PRIMARY else cur.end
        h, m, s = subject.hour, subject.minute, subject.second
        if tc.hour_mode == 12:
            shown, mer = from_24h(h)
            h = to_24h(hour if hour is not None else shown, meridiem if meridiem is not None else mer)
        elif hour is not None:
            h = int(hour)
            if not 0 <= h <= 23:
                raise ValueError(f"24-hour value must be 0..23; got {h}")
        if minute is not None:
            if not 0 <= int(minute) <= 59:
                raise ValueError(f"minute must be 0..59; got {minute}")
            m = floor_minute(int(minute), tc.increment)
        if second is not None and tc.seconds:
            if not 0 <= int(second) <= 59:
                raise ValueError(f"second must be 0..59; got {second}")
            s = int(second)

        value = subject.set(hour=h, minute=m, second=s, microsecond=0)
        if self.options.single_date:
            self._current = self._single(value)
        elif side is Side.PRIMARY:
            if isinstance(cur, CompleteRange):
                self._current = self._range(value, cur.end)
            else:
                self._current = PickingEnd(self._clamp_start(value))
        else:
            self._current = self._range(cur.start, value)
        self._after_mutation(sync_anchors=False)
        self._changed()

    # --- rendering -----------------------------------------------------------

    def snapshot(self) -> RenderSnapshot:
        opts = self.options
        cur = self._current
        today = self._clock().in_timezone(opts.tz)
        left_anchor, right_anchor = self._coordinator.left, self._coordinator.right

        left_matrix = build_calendar(left_anchor, opts.locale.first_day)
        right_matrix = build_calendar(right_anchor, opts.locale.first_day)
        common = dict(
            today=today,
            linked=opts.linked_calendars,
            single_date=opts.single_date,
            show_week_numbers=opts.show_week_numbers,
        )
        left = build_view(left_anchor, cur, opts.constraints, Side.PRIMARY, opts.locale, matrix=left_matrix, **common)
        right = build_view(right_anchor, cur, opts.constraints, Side.SECONDARY, opts.locale, matrix=right_matrix, **common)

        left_time = right_time = None
        if opts.time.enabled:
            left_time = compute_time_options(cur.start, cur, opts.constraints, Side.PRIMARY, opts.time)
            if not opts.single_date:
                subject = cur.end if isinstance(cur, CompleteRange) else right_anchor
                right_time = compute_time_options(subject, cur, opts.constraints, Side.SECONDARY, opts.time)

        hover = None
        if self._hover is not None and isinstance(cur, PickingEnd):
            hover = HoverPreview(
                hovered=self._hover,
                left=preview_matrix(left_matrix, cur.start, self._hover),
                right=preview_matrix(right_matrix, cur.start, self._hover),
            )

        if isinstance(cur, CompleteRange):
            text = format_range_text(cur.start, cur.end, opts.locale, single=opts.single_date)
        else:
            text = format_date(cur.start, opts.locale) + opts.locale.separator

        return RenderSnapshot(
            left=left,
            right=right,
            left_time=left_time,
            right_time=right_time,
            selected_label=self._chosen_label,
            apply_enabled=is_committable(cur),
            selected_text=text,
            show_calendars=self._show_calendars,
            state=self.state,
            hover=hover,
        )

    def element_text(self) -> str:
        """Committed selection as it should appear in the bound text input."""
        c = self._committed
        return format_range_text(c.start, c.end, self.options.locale, single=self.options.single_date)
