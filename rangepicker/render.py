# rangepicker/render.py
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from pendulum import DateTime

from .grid import COLS
from .model import CalendarView, Notification, RenderSnapshot

try:
    import orjson  # type: ignore
except Exception:  # pragma: no cover
    orjson = None  # type: ignore


def _plain(value: Any) -> Any:
    if isinstance(value, DateTime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    return value


def snapshot_to_dict(snapshot: RenderSnapshot) -> Dict[str, Any]:
    """JSON-safe dict: datetimes as ISO-8601 strings, enums as their values."""
    if not isinstance(snapshot, RenderSnapshot):
        raise TypeError(f"snapshot must be RenderSnapshot, got {type(snapshot).__name__}")
    return _plain(snapshot)


def notification_to_dict(n: Notification, *, include_snapshot: bool = False) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "kind": n.kind,
        "start": _plain(n.start),
        "end": _plain(n.end),
        "label": n.label,
    }
    if include_snapshot and n.snapshot is not None:
        out["snapshot"] = snapshot_to_dict(n.snapshot)
    return out


def dumps_json(obj: Any) -> str:
    if orjson is not None:
        return orjson.dumps(obj, option=orjson.OPT_SORT_KEYS).decode("utf-8")
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def dumps_snapshot(snapshot: RenderSnapshot) -> str:
    return dumps_json(snapshot_to_dict(snapshot))


def _cell_text(cell, hover_row: Optional[Sequence[bool]], col: int) -> str:
    f = cell.flags
    day = f"{cell.date.day:2d}"
    if f.is_start or f.is_end:
        return f"[{day}]"
    if f.is_disabled:
        return "  --"
    if f.is_in_range or (hover_row is not None and hover_row[col]):
        return f"+{day} "
    if f.is_off_month:
        return f"({day})"
    return f" {day} "


def month_text(view: CalendarView, *, hover: Optional[Sequence[Sequence[bool]]] = None) -> str:
    """Plain-text month grid for terminals.

    [dd] start/end, +dd in range (or hover preview), (dd) other month, -- disabled.
    """
    h = view.header
    width = COLS * 4
    lines = [h.title.center(width).rstrip()]
    lines.append("".join(f" {w[:2]:>2} " for w in h.weekday_labels).rstrip())
    for r, row in enumerate(view.cells):
        hover_row = hover[r] if hover is not None else None
        lines.append("".join(_cell_text(c, hover_row, i) for i, c in enumerate(row)).rstrip())
    return "\n".join(lines)


__all__ = [
    "dumps_json",
    "dumps_snapshot",
    "month_text",
    "notification_to_dict",
    "snapshot_to_dict",
]
