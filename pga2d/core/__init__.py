"""
Core module for PGA2D.

Contains:
- Constants: basis layout, metric, numeric defaults
- Types: Type aliases for slot values
- Errors: ShapeMismatchError
"""

from .constants import (
    SLOT_NAMES,
    NUM_SLOTS,
    SLOT_INDEX,
    SLOT_GRADES,
    NUM_GRADES,
    METRIC,
    IDX_S, IDX_E0, IDX_E1, IDX_E2,
    IDX_E01, IDX_E02, IDX_E12, IDX_E012,
    DEFAULT_DTYPE,
    DEFAULT_DEVICE,
    DEFAULT_ATOL,
    TABLE_CAYLEY,
    TABLE_TRANSCRIBED,
)

from .types import (
    ValueLike,
    SlotKey,
)

from .errors import ShapeMismatchError

__all__ = [
    # Constants
    "SLOT_NAMES",
    "NUM_SLOTS",
    "SLOT_INDEX",
    "SLOT_GRADES",
    "NUM_GRADES",
    "METRIC",
    "IDX_S", "IDX_E0", "IDX_E1", "IDX_E2",
    "IDX_E01", "IDX_E02", "IDX_E12", "IDX_E012",
    "DEFAULT_DTYPE",
    "DEFAULT_DEVICE",
    "DEFAULT_ATOL",
    "TABLE_CAYLEY",
    "TABLE_TRANSCRIBED",
    # Types
    "ValueLike",
    "SlotKey",
    # Errors
    "ShapeMismatchError",
]
