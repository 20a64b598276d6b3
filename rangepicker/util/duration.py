# rangepicker/util/duration.py
from __future__ import annotations

import datetime as dt
import re
from typing import Any, Mapping, Optional

import pendulum
from pendulum import Duration

# ISO-8601 durations: P7D, P1M, P1Y2M, PT12H, P1DT6H30M, P2W.
_ISO_RE = re.compile(
    r"^P(?:(\d+)Y)?(?:(\d+)M)?(?:(\d+)W)?(?:(\d+)D)?"
    r"(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$",
    re.IGNORECASE,
)

_DURATION_FIELDS = ("years", "months", "weeks", "days", "hours", "minutes", "seconds")


def parse_iso_duration(s: str | None) -> Optional[Duration]:
    if not s:
        return None
    ss = str(s).strip()
    if not ss or ss.upper() in {"P", "PT"}:
        return None

    m = _ISO_RE.match(ss)
    if not m:
        return None

    values = [int(g or 0) for g in m.groups()]
    if not any(values):
        return None
    return pendulum.duration(**dict(zip(_DURATION_FIELDS, values)))


def coerce_duration(value: Any) -> Optional[Duration]:
    """Turn a configured span into a pendulum Duration.

    Accepts a Duration, a timedelta, a number of days, an ISO-8601 duration
    string or a mapping of duration fields ({"days": 7}). False/None/empty
    mean "no span". Raises ValueError for anything else.
    """
    if value is None or value is False:
        return None
    if isinstance(value, Duration):
        return value
    if isinstance(value, dt.timedelta):
        return pendulum.duration(days=value.days, seconds=value.seconds, microseconds=value.microseconds)
    if isinstance(value, bool):
        raise ValueError("max_span must not be True")
    if isinstance(value, (int, float)):
        if value <= 0:
            raise ValueError(f"max_span must be positive; got {value!r}")
        return pendulum.duration(days=value)
    if isinstance(value, str):
        if not value.strip():
            return None
        d = parse_iso_duration(value)
        if d is None:
            raise ValueError(f"Invalid ISO-8601 duration: {value!r}")
        return d
    if isinstance(value, Mapping):
        unknown = [k for k in value if k not in _DURATION_FIELDS]
        if unknown:
            raise ValueError(f"Unknown duration fields: {', '.join(sorted(map(str, unknown)))}")
        fields = {k: value[k] for k in _DURATION_FIELDS if k in value}
        if not fields:
            return None
        return pendulum.duration(**fields)
    raise ValueError(f"Unsupported max_span value: {type(value).__name__}")
