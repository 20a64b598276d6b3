# rangepicker/util/timeparse.py
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Optional, Tuple

import pendulum
from pendulum import DateTime

from rangepicker.model import Locale

from .tz import TzInfo

logger = logging.getLogger(__name__)


def format_date(value: DateTime, locale: Locale) -> str:
    return value.format(locale.format, locale=locale.lang)


def format_range_text(start: DateTime, end: Optional[DateTime], locale: Locale, *, single: bool = False) -> str:
    """`start<sep>end` (or just `start` in single-date mode) in the locale format."""
    out = format_date(start, locale)
    if not single and end is not None:
        out += locale.separator + format_date(end, locale)
    return out


def parse_date_text(raw: str, locale: Locale, tz: TzInfo) -> Optional[DateTime]:
    try:
        return pendulum.from_format(raw, locale.format, tz=tz, locale=locale.lang)
    except ValueError as e:
        logger.debug("date text %r does not match %r: %s", raw, locale.format, e)
        return None


def parse_range_text(
    raw: Optional[str],
    locale: Locale,
    tz: TzInfo,
    *,
    single: bool = False,
) -> Optional[Tuple[DateTime, DateTime]]:
    """Parse `format + separator + format` exactly (or `format` alone in single-date mode).

    Returns None for partial or malformed input; never raises for bad text.
    """
    if not isinstance(raw, str) or not raw:
        return None

    if single:
        parts = [raw]
    else:
        parts = raw.split(locale.separator)
        if len(parts) != 2:
            logger.debug("range text %r: expected one %r separator", raw, locale.separator)
            return None

    parsed = []
    for p in parts:
        d = parse_date_text(p, locale, tz)
        if d is None:
            return None
        # from_format tolerates unpadded fields; external text must match the layout exactly.
        if format_date(d, locale) != p:
            logger.debug("date text %r is not in canonical %r form", p, locale.format)
            return None
        parsed.append(d)

    return parsed[0], parsed[-1]


def coerce_datetime(value: Any, tz: TzInfo, locale: Optional[Locale] = None) -> Optional[DateTime]:
    """Turn a configured date value into an aware pendulum DateTime in `tz`.

    Accepts pendulum/stdlib datetimes (naive ones are read as wall time in
    `tz`), dates, strings in the locale format, or ISO-8601 strings.
    None/False/"" mean "not set". Raises ValueError for anything else.
    """
    if value is None or value is False:
        return None
    if isinstance(value, DateTime):
        return value.in_timezone(tz)
    if isinstance(value, dt.datetime):
        if value.tzinfo is None:
            return pendulum.instance(value, tz=tz)
        return pendulum.instance(value).in_timezone(tz)
    if isinstance(value, dt.date):
        return pendulum.datetime(value.year, value.month, value.day, tz=tz)
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if locale is not None:
            d = parse_date_text(s, locale, tz)
            if d is not None:
                return d
        try:
            parsed = pendulum.parse(s, tz=tz)
        except Exception as ex:
            raise ValueError(f"Unparseable date: {value!r}") from ex
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Not a date/datetime: {value!r}")
        return parsed.in_timezone(tz)
    raise ValueError(f"Unsupported date value: {type(value).__name__}")
