# rangepicker/util/tz.py
from __future__ import annotations

import re
from typing import Optional, Union

import pendulum
from pendulum.tz.timezone import FixedTimezone, Timezone

TzInfo = Union[Timezone, FixedTimezone]

_ALIASES = {
    "": "local",
    "local": "local",
    "system": "local",
    "native": "local",
    "utc": "UTC",
    "z": "UTC",
    "gmt": "UTC",
    "utc0": "UTC",
    "utc+0": "UTC",
}

# +HH:MM / +HHMM / -HH:MM / -HHMM
_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def normalize_tz_name(name: Optional[str]) -> str:
    """Canonical timezone string for options: "local", "UTC", an IANA name or an offset.

    None and blank strings mean "local"; "system"/"native" are aliases of it,
    and "Z"/"GMT" of "UTC". Anything else is returned stripped.
    """
    s = "" if name is None else str(name).strip()
    return _ALIASES.get(s.lower(), s)


def _fixed_offset(sign: str, hours: str, minutes: str, raw: str) -> FixedTimezone:
    hh, mm = int(hours), int(minutes)
    if hh > 23 or mm > 59:
        raise ValueError(f"Invalid timezone offset: {raw!r}")
    seconds = hh * 3600 + mm * 60
    return pendulum.fixed_timezone(seconds if sign == "+" else -seconds)


def resolve_tz(name: Optional[str]) -> TzInfo:
    """Resolve a timezone name (see normalize_tz_name) into a pendulum timezone.

    Raises ValueError for unknown zones and out-of-range offsets.
    """
    tz_name = normalize_tz_name(name)
    if tz_name == "UTC":
        return pendulum.UTC
    if tz_name == "local":
        return pendulum.local_timezone()

    m = _OFFSET_RE.match(tz_name)
    if m:
        return _fixed_offset(*m.groups(), raw=tz_name)

    try:
        return pendulum.timezone(tz_name)
    except Exception as ex:
        raise ValueError(f"Invalid timezone identifier: {tz_name!r}") from ex
