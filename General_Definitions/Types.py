# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: General_Definitions/Types.py
#  Purpose: Define numpy type aliases for metric and unit-flag arrays.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import numpy as np

FLOAT64     :   type[np.float64]    = np.float64

BOOL                                = np.bool_
