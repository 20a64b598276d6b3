"""rangepicker.api

Stable *library* entrypoint for rangepicker.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pendulum import DateTime

from rangepicker.coordinator import LinkedCalendarCoordinator
from rangepicker.engine import RangeSelectionEngine
from rangepicker.grid import build_calendar, build_view, classify_cell, preview_matrix
from rangepicker.labels import match_label
from rangepicker.model import (
    CalendarView,
    CellFlags,
    CompleteRange,
    Constraints,
    Locale,
    Notification,
    PickingEnd,
    PresetRange,
    RenderSnapshot,
    SelectionState,
    Side,
    TimeConfig,
    TimeOptions,
)
from rangepicker.options import OptionsError, PickerOptions, normalize_options, validate_options
from rangepicker.predicates import CustomDatePredicate, InvalidDatePredicate
from rangepicker.render import dumps_snapshot, month_text, snapshot_to_dict
from rangepicker.timeopts import compute_time_options
from rangepicker.util.timeparse import format_range_text, parse_range_text
from rangepicker.util.tz import resolve_tz

JsonPath = Union[str, Path]


def load_options_from_json(path: JsonPath, *, now: Optional[DateTime] = None) -> PickerOptions:
    """Load a JSON options object from disk and normalize it.

    Predicate options (`invalid_date`, `custom_date`) cannot be expressed in
    JSON; pass them through `normalize_options` instead.
    """
    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8", errors="replace"))
    if not isinstance(raw, dict):
        raise OptionsError(f"options JSON must be an object/dict; got {type(raw).__name__}")
    return normalize_options(raw, now=now)


def create_engine(options: Union[Dict[str, Any], PickerOptions, None] = None, **kwargs: Any) -> RangeSelectionEngine:
    """Build an engine from an options dict (or already-normalized options)."""
    return RangeSelectionEngine(options if options is not None else {}, **kwargs)


# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
_PUBLIC_EXPORTS = (
    "CalendarView",
    "CellFlags",
    "CompleteRange",
    "Constraints",
    "CustomDatePredicate",
    "InvalidDatePredicate",
    "LinkedCalendarCoordinator",
    "Locale",
    "Notification",
    "OptionsError",
    "PickerOptions",
    "PickingEnd",
    "PresetRange",
    "RangeSelectionEngine",
    "RenderSnapshot",
    "SelectionState",
    "Side",
    "TimeConfig",
    "TimeOptions",
    "build_calendar",
    "build_view",
    "classify_cell",
    "compute_time_options",
    "create_engine",
    "dumps_snapshot",
    "format_range_text",
    "load_options_from_json",
    "match_label",
    "month_text",
    "normalize_options",
    "parse_range_text",
    "preview_matrix",
    "resolve_tz",
    "snapshot_to_dict",
    "validate_options",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
