from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from .engine import RangeSelectionEngine
from .options import OptionsError
from .render import dumps_snapshot, month_text
from .util.tz import normalize_tz_name

logger = logging.getLogger(__name__)


def _die(msg: str, rc: int = 2) -> int:
    print(f"[rangepicker] ERROR: {msg}", file=sys.stderr)
    return rc


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load_config(path: str | None) -> Dict[str, Any]:
    if not path:
        return {}
    p = Path(path).expanduser()
    obj = json.loads(p.read_text(encoding="utf-8", errors="replace"))
    if not isinstance(obj, dict):
        raise ValueError(f"config must be a JSON object; got {type(obj).__name__}")
    return obj


def _side_by_side(left: str, right: str, gap: int = 4) -> str:
    a, b = left.splitlines(), right.splitlines()
    width = max(len(s) for s in a) + gap
    rows = max(len(a), len(b))
    a += [""] * (rows - len(a))
    b += [""] * (rows - len(b))
    return "\n".join((x.ljust(width) + y).rstrip() for x, y in zip(a, b))


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="rangepicker",
        description="Show the two-month range picker view for a configuration.",
    )
    ap.add_argument("--config", default=None, help="Options JSON file (default: built-in defaults)")
    ap.add_argument(
        "--tz",
        default=os.getenv("RANGEPICKER_TZ", None),
        help="Timezone for all dates (default: env RANGEPICKER_TZ, the config's tz, or 'local')",
    )
    ap.add_argument("--start", default=None, help="Selection start (locale format or ISO-8601)")
    ap.add_argument("--end", default=None, help="Selection end (locale format or ISO-8601)")
    ap.add_argument("--text", default=None, help="Range text as typed into the input, e.g. '03/01/2024 - 03/09/2024'")
    ap.add_argument("--json", action="store_true", help="Print the render snapshot as JSON")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    ns = ap.parse_args(argv)

    configure_logging(ns.log_level)

    try:
        raw = _load_config(ns.config)
    except Exception as e:
        return _die(f"Failed to load config: {ns.config} ({e})")

    if ns.tz:
        raw["tz"] = normalize_tz_name(ns.tz)
    if ns.start:
        raw["start_date"] = ns.start
    if ns.end:
        raw["end_date"] = ns.end

    try:
        engine = RangeSelectionEngine(raw)
    except OptionsError as e:
        return _die(f"Invalid options: {e}")

    if ns.text is not None:
        before = (engine.start, engine.end)
        engine.external_text_changed(ns.text)
        if (engine.start, engine.end) == before:
            logger.info("text %r left the selection unchanged", ns.text)

    snap = engine.snapshot()
    if ns.json:
        print(dumps_snapshot(snap))
        return 0

    if engine.options.single_date:
        print(month_text(snap.left))
    else:
        print(_side_by_side(month_text(snap.left), month_text(snap.right)))
    print()
    print(snap.selected_text)
    if snap.selected_label:
        print(f"({snap.selected_label})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
