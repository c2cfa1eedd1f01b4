# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Core/Incident.py
#  Purpose: Define the Incident data model, its lifecycle and priority keys.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import numbers
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from Core.Errors import Invalid_Incident
from Models.Categories import Incident_Category


_FROZEN_ONCE_DISPATCHED = frozenset(
    {
        "incident_id_i32_opt",
        "report_time",
        "category",
        "duration",
        "dispatch_time_i32_opt",
        "unit_id_i32_opt",
    }
)

_INTEGER_FIELDS = frozenset({"incident_id_i32_opt", "report_time", "duration"})


def _Is_Integer(value_any: Any) -> bool:
    # numpy integer scalars count, bools do not
    return isinstance(value_any, numbers.Integral) and not isinstance(value_any, bool)


@dataclass(frozen=True)
class Incident_Snapshot:

    incident_id_i32_opt   : Optional[int]
    report_time           : int
    category              : Incident_Category
    category_label_str    : str
    duration              : int
    dispatch_time_i32_opt : Optional[int]
    unit_id_i32_opt       : Optional[int]

    @property
    def Resolution_Time(self) -> Optional[int]:
        if not self.Is_Dispatched:
            return None
        return self.dispatch_time_i32_opt + self.duration

    @property
    def Is_Dispatched(self) -> bool:
        return self.dispatch_time_i32_opt is not None and self.unit_id_i32_opt is not None


@dataclass
class Incident:

    report_time : int
    category    : Incident_Category
    duration    : int

    incident_id_i32_opt : Optional[int] = None

    dispatch_time_i32_opt : Optional[int] = field(default=None, init=False)
    unit_id_i32_opt       : Optional[int] = field(default=None, init=False)

    def __setattr__(self, name_str: str, value_any: Any) -> None:
        if name_str in _FROZEN_ONCE_DISPATCHED and self.__dict__.get("dispatch_time_i32_opt") is not None:
            raise Invalid_Incident(f"Incident {self.incident_id_i32_opt} is dispatched; '{name_str}' is immutable.")
        if name_str in _INTEGER_FIELDS and _Is_Integer(value_any):
            value_any = int(value_any)
        super().__setattr__(name_str, value_any)

    def Is_Dispatched(self) -> bool:
        return self.dispatch_time_i32_opt is not None and self.unit_id_i32_opt is not None

    def Mark_Dispatched(self, now_i32: int, unit_id_i32: int) -> None:
        if self.Is_Dispatched():
            raise Invalid_Incident(f"Incident {self.incident_id_i32_opt} was already dispatched.")
        if now_i32 < self.report_time:
            raise Invalid_Incident(
                f"Incident {self.incident_id_i32_opt} cannot be dispatched at {now_i32} before its report time {self.report_time}."
            )
        # unit first: once dispatch time is set every lifecycle field locks
        self.unit_id_i32_opt = int(unit_id_i32)
        self.dispatch_time_i32_opt = int(now_i32)

    @property
    def Resolution_Time(self) -> Optional[int]:
        if not self.Is_Dispatched():
            return None
        return self.dispatch_time_i32_opt + self.duration

    @property
    def Temporal_Key(self) -> int:
        if self.Is_Dispatched():
            return self.Resolution_Time
        return self.report_time

    def Triage_Key(self, severity_rank_i32: int) -> Tuple[int, int]:
        return (int(severity_rank_i32), self.report_time)

    @property
    def Waiting_Time(self) -> Optional[int]:
        if self.dispatch_time_i32_opt is None:
            return None
        return self.dispatch_time_i32_opt - self.report_time

    @property
    def Response_Time(self) -> Optional[int]:
        resolution_time_i32_opt = self.Resolution_Time
        if resolution_time_i32_opt is None:
            return None
        return resolution_time_i32_opt - self.report_time

    def Validate_For_Submission(self) -> None:
        if self.dispatch_time_i32_opt is not None or self.unit_id_i32_opt is not None:
            raise Invalid_Incident(
                f"Incident {self.incident_id_i32_opt} already carries dispatch state "
                f"(dispatch time {self.dispatch_time_i32_opt}, unit {self.unit_id_i32_opt}); "
                "only undispatched incidents can be submitted."
            )
        if self.incident_id_i32_opt is not None and not _Is_Integer(self.incident_id_i32_opt):
            raise Invalid_Incident(f"Incident id must be an integer, got {self.incident_id_i32_opt!r}.")
        if not _Is_Integer(self.report_time):
            raise Invalid_Incident(f"Report time must be an integer, got {self.report_time!r}.")
        if not _Is_Integer(self.duration):
            raise Invalid_Incident(f"Duration must be an integer, got {self.duration!r}.")
        if self.report_time < 0:
            raise Invalid_Incident(f"Report time must be >= 0, got {self.report_time}.")
        if self.duration <= 0:
            raise Invalid_Incident(f"Duration must be > 0, got {self.duration}.")
        if not isinstance(self.category, Incident_Category):
            raise Invalid_Incident(f"Unknown incident category {self.category!r}.")

    def Snapshot(self, category_label_str: Optional[str] = None) -> Incident_Snapshot:
        return Incident_Snapshot(
            incident_id_i32_opt=self.incident_id_i32_opt,
            report_time=self.report_time,
            category=self.category,
            category_label_str=category_label_str if category_label_str is not None else self.category.value,
            duration=self.duration,
            dispatch_time_i32_opt=self.dispatch_time_i32_opt,
            unit_id_i32_opt=self.unit_id_i32_opt,
        )
