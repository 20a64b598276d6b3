"""Picker configuration: validation and normalization (library-facing)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pendulum
from pendulum import DateTime

from rangepicker.interval import span_cap
from rangepicker.model import (
    DEFAULT_DAY_NAMES,
    DEFAULT_MONTH_NAMES,
    Constraints,
    Locale,
    PresetRange,
    TimeConfig,
)
from rangepicker.predicates import as_custom_predicate, as_invalid_predicate
from rangepicker.timeopts import snap_to_increment
from rangepicker.util.duration import coerce_duration
from rangepicker.util.timeparse import coerce_datetime
from rangepicker.util.tz import TzInfo, normalize_tz_name, resolve_tz


class OptionsError(ValueError):
    """Raised when picker options fail validation."""


KNOWN_KEYS = frozenset(
    {
        "start_date",
        "end_date",
        "min_date",
        "max_date",
        "max_span",
        "single_date",
        "time_picker",
        "linked_calendars",
        "auto_apply",
        "min_year",
        "max_year",
        "ranges",
        "locale",
        "show_custom_range_label",
        "show_week_numbers",
        "always_show_calendars",
        "invalid_date",
        "custom_date",
        "tz",
    }
)

_LOCALE_KEYS = frozenset(
    {
        "format",
        "separator",
        "first_day",
        "month_names",
        "day_names",
        "apply_label",
        "cancel_label",
        "week_label",
        "custom_range_label",
        "lang",
    }
)


@dataclass(frozen=True)
class PickerOptions:
    tz_name: str
    tz: TzInfo
    start_date: DateTime
    end_date: DateTime
    constraints: Constraints
    time: TimeConfig
    locale: Locale
    ranges: Tuple[PresetRange, ...] = ()
    single_date: bool = False
    linked_calendars: bool = True
    auto_apply: bool = False
    show_custom_range_label: bool = True
    show_week_numbers: bool = False
    always_show_calendars: bool = False


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _time_config(raw: Any, errs: List[str]) -> TimeConfig:
    if raw is None or raw is False:
        return TimeConfig()
    if raw is True:
        return TimeConfig(enabled=True)
    if not isinstance(raw, Mapping):
        errs.append("time_picker must be bool or object")
        return TimeConfig()

    enabled = bool(raw.get("enabled", True))
    increment = raw.get("increment", 1)
    hour_mode = raw.get("hour_mode", 12)

    _require(_is_int(increment) and 1 <= increment <= 60, "time_picker.increment must be int in 1..60", errs)
    _require(hour_mode in (12, 24), "time_picker.hour_mode must be 12 or 24", errs)
    if errs:
        return TimeConfig()
    return TimeConfig(enabled=enabled, increment=int(increment), seconds=bool(raw.get("seconds", False)), hour_mode=int(hour_mode))


def _default_format(tc: TimeConfig) -> str:
    fmt = "MM/DD/YYYY"
    if not tc.enabled:
        return fmt
    if tc.hour_mode == 24:
        return fmt + (" HH:mm:ss" if tc.seconds else " HH:mm")
    return fmt + (" h:mm:ss A" if tc.seconds else " h:mm A")


def _locale(raw: Any, tc: TimeConfig, errs: List[str]) -> Locale:
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        errs.append("locale must be an object")
        return Locale(format=_default_format(tc))

    for k in raw:
        _require(k in _LOCALE_KEYS, f"locale: unknown key: {k}", errs)

    fields: Dict[str, Any] = {"format": _default_format(tc)}
    for k in ("format", "separator", "apply_label", "cancel_label", "week_label", "custom_range_label", "lang"):
        if k in raw:
            v = raw[k]
            _require(isinstance(v, str) and bool(v), f"locale.{k} must be non-empty string", errs)
            fields[k] = v

    if "first_day" in raw:
        fd = raw["first_day"]
        _require(_is_int(fd) and 0 <= fd <= 6, "locale.first_day must be int in 0..6 (0=Sunday)", errs)
        fields["first_day"] = fd

    for k, n in (("month_names", 12), ("day_names", 7)):
        if k in raw:
            v = raw[k]
            ok = isinstance(v, (list, tuple)) and len(v) == n and all(isinstance(x, str) for x in v)
            _require(ok, f"locale.{k} must be a list of {n} strings", errs)
            fields[k] = tuple(v) if ok else (DEFAULT_MONTH_NAMES if n == 12 else DEFAULT_DAY_NAMES)

    if errs:
        return Locale(format=_default_format(tc))
    return Locale(**fields)


def _date(raw: Mapping[str, Any], key: str, tz: TzInfo, locale: Locale, errs: List[str]) -> Optional[DateTime]:
    try:
        return coerce_datetime(raw.get(key), tz, locale)
    except ValueError as e:
        errs.append(f"{key}: {e}")
        return None


def _sanitize_endpoints(
    start: DateTime,
    end: DateTime,
    constraints: Constraints,
    tc: TimeConfig,
    single: bool,
) -> Tuple[DateTime, DateTime]:
    if end < start:
        start, end = end, start

    if not tc.enabled:
        start = start.start_of("day")
        end = end.end_of("day")
    else:
        start = snap_to_increment(start, tc.increment)
        end = snap_to_increment(end, tc.increment)

    lo, hi = constraints.min_date, constraints.max_date
    if lo is not None and start < lo:
        start = lo
    if hi is not None and start > hi:
        start = hi
    if hi is not None and end > hi:
        end = hi
    if constraints.max_span is not None:
        cap = span_cap(start, constraints.max_span, whole_days=not tc.enabled)
        if end > cap:
            end = cap

    if single or end < start:
        end = start if tc.enabled else start.end_of("day")
    return start, end


def _iter_raw_ranges(raw: Any, errs: List[str]):
    if raw is None:
        return
    if isinstance(raw, Mapping):
        for label, pair in raw.items():
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                errs.append(f"ranges[{label!r}] must be a [start, end] pair")
                continue
            yield label, pair[0], pair[1]
        return
    if not isinstance(raw, (list, tuple)):
        errs.append("ranges must be a list or object")
        return
    for i, r in enumerate(raw):
        if not isinstance(r, Mapping):
            errs.append(f"ranges[{i}] must be an object")
            continue
        yield r.get("label"), r.get("start"), r.get("end")


def _presets(
    raw: Any,
    tz: TzInfo,
    locale: Locale,
    constraints: Constraints,
    tc: TimeConfig,
    errs: List[str],
) -> Tuple[PresetRange, ...]:
    out: List[PresetRange] = []
    seen = set()
    for label, raw_start, raw_end in _iter_raw_ranges(raw, errs):
        if not isinstance(label, str) or not label:
            errs.append("ranges: label must be non-empty string")
            continue
        if label == locale.custom_range_label:
            errs.append(f"ranges: label {label!r} is reserved for the custom range")
            continue
        if label in seen:
            errs.append(f"ranges: duplicate label {label!r}")
            continue
        seen.add(label)

        try:
            start = coerce_datetime(raw_start, tz, locale)
            end = coerce_datetime(raw_end, tz, locale)
        except ValueError as e:
            errs.append(f"ranges[{label!r}]: {e}")
            continue
        if start is None or end is None:
            errs.append(f"ranges[{label!r}]: start and end are required")
            continue
        if end < start:
            start, end = end, start

        if constraints.min_date is not None and start < constraints.min_date:
            start = constraints.min_date

        limit = constraints.max_date
        if constraints.max_span is not None:
            cap = start + constraints.max_span
            if limit is None or cap < limit:
                limit = cap
        if limit is not None and end > limit:
            end = limit

        # Entirely outside [min_date, max_date]: not offered at all.
        unit = "minute" if tc.enabled else "day"
        if constraints.min_date is not None and end.start_of(unit) < constraints.min_date.start_of(unit):
            continue
        if constraints.max_date is not None and start.start_of(unit) > constraints.max_date.start_of(unit):
            continue

        if not tc.enabled:
            start = start.start_of("day")
            end = end.end_of("day")
        out.append(PresetRange(label=label, start=start, end=end))
    return tuple(out)


def _build(raw: Any, now: Optional[DateTime]) -> Tuple[Optional[PickerOptions], List[str]]:
    errs: List[str] = []
    if not isinstance(raw, Mapping):
        return None, ["options must be a dict/object"]

    for k in raw:
        _require(k in KNOWN_KEYS, f"unknown option: {k}", errs)

    tz_name = normalize_tz_name(raw.get("tz"))
    try:
        tz = resolve_tz(tz_name)
    except ValueError as e:
        return None, errs + [f"tz: {e}"]

    tc = _time_config(raw.get("time_picker"), errs)
    locale = _locale(raw.get("locale"), tc, errs)
    if not errs and locale.separator in locale.format:
        errs.append("locale.separator must not occur inside locale.format")

    now = (now or pendulum.now(tz)).in_timezone(tz)

    start = _date(raw, "start_date", tz, locale, errs)
    end = _date(raw, "end_date", tz, locale, errs)
    min_date = _date(raw, "min_date", tz, locale, errs)
    max_date = _date(raw, "max_date", tz, locale, errs)
    if min_date is not None and max_date is not None:
        _require(min_date <= max_date, "min_date must not be after max_date", errs)

    try:
        max_span = coerce_duration(raw.get("max_span"))
    except ValueError as e:
        errs.append(f"max_span: {e}")
        max_span = None

    min_year = raw.get("min_year", now.year - 100)
    max_year = raw.get("max_year", now.year + 100)
    _require(_is_int(min_year), "min_year must be int", errs)
    _require(_is_int(max_year), "max_year must be int", errs)
    if _is_int(min_year) and _is_int(max_year):
        _require(min_year <= max_year, "min_year must not be after max_year", errs)

    try:
        invalid_date = as_invalid_predicate(raw.get("invalid_date"))
        custom_date = as_custom_predicate(raw.get("custom_date"))
    except ValueError as e:
        errs.append(str(e))

    if errs:
        return None, errs

    constraints = Constraints(
        min_date=min_date,
        max_date=max_date,
        max_span=max_span,
        min_year=int(min_year),
        max_year=int(max_year),
        invalid_date=invalid_date,
        custom_date=custom_date,
    )

    single = bool(raw.get("single_date", False))
    start, end = _sanitize_endpoints(
        start or now.start_of("day"),
        end or now.end_of("day"),
        constraints,
        tc,
        single,
    )

    ranges = _presets(raw.get("ranges"), tz, locale, constraints, tc, errs)
    if errs:
        return None, errs

    return (
        PickerOptions(
            tz_name=tz_name,
            tz=tz,
            start_date=start,
            end_date=end,
            constraints=constraints,
            time=tc,
            locale=locale,
            ranges=ranges,
            single_date=single,
            linked_calendars=bool(raw.get("linked_calendars", True)),
            auto_apply=bool(raw.get("auto_apply", False)),
            show_custom_range_label=bool(raw.get("show_custom_range_label", True)),
            show_week_numbers=bool(raw.get("show_week_numbers", False)),
            always_show_calendars=bool(raw.get("always_show_calendars", False)),
        ),
        [],
    )


def validate_options(raw: Any) -> List[str]:
    _opts, errs = _build(raw, None)
    return errs


def normalize_options(raw: Any, *, now: Optional[DateTime] = None) -> PickerOptions:
    if isinstance(raw, PickerOptions):
        return raw
    opts, errs = _build(raw, now)
    if errs or opts is None:
        raise OptionsError(errs[0] if errs else "invalid options")
    return opts


__all__ = [
    "KNOWN_KEYS",
    "OptionsError",
    "PickerOptions",
    "normalize_options",
    "validate_options",
]
