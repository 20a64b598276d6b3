"""rangepicker Python package.

Public API:
  - import from `rangepicker.api` (preferred) or `import rangepicker` (re-export)
"""

from __future__ import annotations

from .api import *  # noqa: F401,F403
from . import api as _api

__all__ = list(_api.__all__)

from .api import (
    RangeSelectionEngine,
    create_engine,
    load_options_from_json,
    normalize_options,
    validate_options,
)
