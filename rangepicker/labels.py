# rangepicker/labels.py
from __future__ import annotations

from typing import Iterable, Optional

from .model import CompleteRange, PresetRange, Selection


def match_label(
    selection: Selection,
    presets: Iterable[PresetRange],
    *,
    custom_label: Optional[str] = None,
    show_custom: bool = True,
) -> Optional[str]:
    """Label of the first preset whose days equal the selection's days.

    The reserved custom label is never matched as a preset; it is the
    fallback when nothing matches and the custom entry is shown.
    """
    if isinstance(selection, CompleteRange):
        for p in presets:
            if custom_label is not None and p.label == custom_label:
                continue
            if p.start.is_same_day(selection.start) and p.end.is_same_day(selection.end):
                return p.label

    if show_custom and custom_label:
        return custom_label
    return None
