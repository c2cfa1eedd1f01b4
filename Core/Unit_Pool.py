# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Core/Unit_Pool.py
#  Purpose: Track idle / busy response units and hand out idle ones.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import numbers
from typing import List, Optional

import numpy as np

from Core.Errors import Invalid_Configuration, Invalid_Unit
from General_Definitions.Types import BOOL


class Unit_Pool:

    def __init__(self, num_units_i32: int) -> None:
        if int(num_units_i32) < 1:
            raise Invalid_Configuration("There must be at least one unit to dispatch.")
        self._busy_arr_bool: np.ndarray = np.zeros(int(num_units_i32), dtype=BOOL)

    def Acquire_Idle_Unit(self) -> Optional[int]:
        # lowest idle id first; None means every unit is busy
        idle_idx_arr = np.flatnonzero(~self._busy_arr_bool)
        if idle_idx_arr.size == 0:
            return None
        unit_id_i32 = int(idle_idx_arr[0])
        self._busy_arr_bool[unit_id_i32] = True
        return unit_id_i32

    def _Checked_Unit_Id(self, unit_id_any) -> int:
        if isinstance(unit_id_any, bool) or not isinstance(unit_id_any, numbers.Integral):
            raise Invalid_Unit(f"Unit id must be an integer, got {unit_id_any!r}.")
        unit_id_i32 = int(unit_id_any)
        if not (0 <= unit_id_i32 < self._busy_arr_bool.size):
            raise Invalid_Unit(f"Unit {unit_id_i32} is out of range [0, {self._busy_arr_bool.size}).")
        return unit_id_i32

    def Release(self, unit_id_i32: int) -> None:
        unit_id_i32 = self._Checked_Unit_Id(unit_id_i32)
        if not self._busy_arr_bool[unit_id_i32]:
            raise Invalid_Unit(f"Unit {unit_id_i32} is already idle.")
        self._busy_arr_bool[unit_id_i32] = False

    def Is_Busy(self, unit_id_i32: int) -> bool:
        return bool(self._busy_arr_bool[self._Checked_Unit_Id(unit_id_i32)])

    def Busy_Units(self) -> List[int]:
        return [int(u) for u in np.flatnonzero(self._busy_arr_bool)]

    def Busy_Count(self) -> int:
        return int(np.count_nonzero(self._busy_arr_bool))

    def Idle_Count(self) -> int:
        return int(self._busy_arr_bool.size - self.Busy_Count())

    def Size(self) -> int:
        return int(self._busy_arr_bool.size)

    def __len__(self) -> int:
        return self.Size()
