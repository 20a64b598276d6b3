"""Date predicate strategies (invalid dates, custom cell tags).

Both predicates are consulted read-only during classification. Exceptions
raised by a predicate are configuration errors and are never swallowed.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Protocol, Tuple

from pendulum import DateTime


class InvalidDatePredicate(Protocol):
    def is_invalid(self, date: DateTime) -> bool:
        """Return True when `date` must not be selectable."""


class CustomDatePredicate(Protocol):
    def tags_for(self, date: DateTime) -> Any:
        """Return extra tags for `date`: False/None, a string or an iterable of strings."""


class NeverInvalid:
    """Baseline predicate: every date is selectable."""

    def is_invalid(self, date: DateTime) -> bool:
        return False


class NoCustomTags:
    """Baseline predicate: no cell gets extra tags."""

    def tags_for(self, date: DateTime) -> Any:
        return False


NEVER_INVALID = NeverInvalid()
NO_CUSTOM_TAGS = NoCustomTags()


class _InvalidDateFunc:
    def __init__(self, fn: Callable[[DateTime], bool]) -> None:
        self._fn = fn

    def is_invalid(self, date: DateTime) -> bool:
        return bool(self._fn(date))

    def __repr__(self) -> str:
        return f"InvalidDateFunc({self._fn!r})"


class _CustomDateFunc:
    def __init__(self, fn: Callable[[DateTime], Any]) -> None:
        self._fn = fn

    def tags_for(self, date: DateTime) -> Any:
        return self._fn(date)

    def __repr__(self) -> str:
        return f"CustomDateFunc({self._fn!r})"


def as_invalid_predicate(value: Any) -> InvalidDatePredicate:
    if value is None or value is False:
        return NEVER_INVALID
    if hasattr(value, "is_invalid"):
        return value
    if callable(value):
        return _InvalidDateFunc(value)
    raise ValueError(f"invalid_date must be callable or provide is_invalid(); got {type(value).__name__}")


def as_custom_predicate(value: Any) -> CustomDatePredicate:
    if value is None or value is False:
        return NO_CUSTOM_TAGS
    if hasattr(value, "tags_for"):
        return value
    if callable(value):
        return _CustomDateFunc(value)
    raise ValueError(f"custom_date must be callable or provide tags_for(); got {type(value).__name__}")


def normalize_tags(raw: Any) -> Tuple[str, ...]:
    if raw is None or raw is False:
        return ()
    if isinstance(raw, str):
        return (raw,) if raw else ()
    if isinstance(raw, Iterable):
        return tuple(str(x) for x in raw if x)
    raise TypeError(f"custom date tags must be False, a string or strings; got {type(raw).__name__}")
