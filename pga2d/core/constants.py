"""
Centralized constants for PGA2D.

The basis of G(2,0,1) has eight elements, always stored in this order:

    [s, e0, e1, e2, e01, e02, e12, e012]
     0   1   2   3   4    5    6    7

Usage:
    from pga2d.core.constants import SLOT_NAMES, IDX_E12
"""

import torch


# =============================================================================
# Basis Layout
# =============================================================================

SLOT_NAMES = ("s", "e0", "e1", "e2", "e01", "e02", "e12", "e012")
NUM_SLOTS: int = len(SLOT_NAMES)

IDX_S = 0      # Scalar (grade 0)
IDX_E0 = 1     # e₀ (null direction, e₀² = 0)
IDX_E1 = 2     # e₁
IDX_E2 = 3     # e₂
IDX_E01 = 4    # e₀₁
IDX_E02 = 5    # e₀₂
IDX_E12 = 6    # e₁₂
IDX_E012 = 7   # e₀₁₂ (pseudoscalar)

SLOT_INDEX = {name: idx for idx, name in enumerate(SLOT_NAMES)}

# Grade of each slot
SLOT_GRADES = (0, 1, 1, 1, 2, 2, 2, 3)
NUM_GRADES: int = 4

# Metric signature (2,0,1): square of each grade-1 generator
METRIC = {"e0": 0, "e1": 1, "e2": 1}


# =============================================================================
# Numeric Defaults
# =============================================================================

# Matches the 32-bit floats the rest of the application uses
DEFAULT_DTYPE: torch.dtype = torch.float32
DEFAULT_DEVICE: str = "cpu"

# Default tolerance for allclose()
DEFAULT_ATOL: float = 1e-6

# Lower bound on |weight| when dividing by a point weight
DEFAULT_EPS: float = 1e-12


# =============================================================================
# Product Table Names
# =============================================================================

TABLE_CAYLEY: str = "cayley"
TABLE_TRANSCRIBED: str = "transcribed"
