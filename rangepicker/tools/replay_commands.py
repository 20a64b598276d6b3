#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List

from rangepicker.cli import configure_logging
from rangepicker.engine import RangeSelectionEngine
from rangepicker.model import Notification
from rangepicker.options import OptionsError
from rangepicker.render import dumps_json, notification_to_dict


def _die(msg: str, rc: int = 2) -> int:
    print(f"[rangepicker-replay] ERROR: {msg}", file=sys.stderr)
    return rc


def _load_script(path: Path) -> Dict[str, Any]:
    obj = json.loads(path.read_text(encoding="utf-8", errors="replace"))
    if not isinstance(obj, dict):
        raise ValueError(f"script must be a JSON object; got {type(obj).__name__}")
    if not isinstance(obj.get("commands", []), list):
        raise ValueError("script.commands must be a list")
    return obj


def _dispatch(engine: RangeSelectionEngine) -> Dict[str, Callable[[Dict[str, Any]], None]]:
    return {
        "open": lambda c: engine.open(),
        "close": lambda c: engine.close(),
        "toggle": lambda c: engine.toggle(),
        "apply": lambda c: engine.apply(),
        "cancel": lambda c: engine.cancel(),
        "choose_date": lambda c: engine.choose_date(c["date"], c.get("side", "left")),
        "hover_date": lambda c: engine.hover_date(c["date"], c.get("side", "left")),
        "clear_hover": lambda c: engine.clear_hover(),
        "navigate_prev": lambda c: engine.navigate_prev(c.get("side", "left")),
        "navigate_next": lambda c: engine.navigate_next(c.get("side", "left")),
        "change_month_year": lambda c: engine.change_month_year(c.get("side", "left"), c["month"], c["year"]),
        "change_time": lambda c: engine.change_time(
            c.get("side", "left"),
            hour=c.get("hour"),
            minute=c.get("minute"),
            second=c.get("second"),
            meridiem=c.get("meridiem"),
        ),
        "choose_preset": lambda c: engine.choose_preset(c["label"]),
        "external_text_changed": lambda c: engine.external_text_changed(c.get("text")),
        "set_start": lambda c: engine.set_start(c["date"]),
        "set_end": lambda c: engine.set_end(c["date"]),
    }


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="rangepicker-replay",
        description="Replay a JSON command script through the selection engine; print notifications as JSON lines.",
    )
    ap.add_argument("--in", dest="in_json", required=True, help="Script JSON: {\"options\": {...}, \"commands\": [...]}")
    ap.add_argument("--snapshots", action="store_true", help="Include render snapshots in selection_changed lines")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    ns = ap.parse_args(argv)

    configure_logging(ns.log_level)

    in_path = Path(ns.in_json)
    if not in_path.exists():
        return _die(f"Missing input JSON: {in_path}")
    try:
        script = _load_script(in_path)
    except Exception as e:
        return _die(f"Failed to load JSON: {in_path} ({e})")

    try:
        engine = RangeSelectionEngine(script.get("options") or {})
    except OptionsError as e:
        return _die(f"Invalid options: {e}")

    def _print(n: Notification) -> None:
        print(dumps_json(notification_to_dict(n, include_snapshot=bool(ns.snapshots))))

    engine.subscribe(_print)
    table = _dispatch(engine)

    for i, cmd in enumerate(script.get("commands") or []):
        if not isinstance(cmd, dict) or cmd.get("cmd") not in table:
            return _die(f"commands[{i}]: unknown command {cmd!r}")
        try:
            table[cmd["cmd"]](cmd)
        except (KeyError, ValueError) as e:
            return _die(f"commands[{i}] ({cmd['cmd']}): {e}", rc=3)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
