# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Models/Policies.py
#  Purpose: Implement triage-ordering policies (severity-first and baselines).
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from dataclasses import dataclass
from typing import Optional, Tuple

from Configurations import DEFAULT_TIME_HORIZON_I32, POLICY_NAMES
from Core.Errors import Invalid_Configuration
from Core.Incident import Incident
from Models.Policy_Base import Triage_Policy


@dataclass(frozen=True)
class Severity_First_Policy(Triage_Policy):
    name: str = "severity_first"

    def Triage_Key(self, incident: Incident, severity_rank_i32: int) -> Tuple[int, int]:
        return incident.Triage_Key(severity_rank_i32)


@dataclass(frozen=True)
class Fcfs_Policy(Triage_Policy):
    name: str = "fcfs"

    def Triage_Key(self, incident: Incident, severity_rank_i32: int) -> Tuple[int]:
        return (incident.report_time,)


@dataclass(frozen=True)
class Horizon_Encoded_Policy(Triage_Policy):
    """
    Single-integer key rank * horizon + report_time. Orders exactly like
    Severity_First_Policy as long as every report time is below the horizon,
    which Admits() enforces at submission.
    """

    horizon_i32 : int = DEFAULT_TIME_HORIZON_I32
    name        : str = "horizon_encoded"

    def __post_init__(self) -> None:
        if int(self.horizon_i32) <= 0:
            raise Invalid_Configuration("horizon_i32 must be > 0.")

    def Admits(self, incident: Incident) -> bool:
        return incident.report_time < self.horizon_i32

    def Triage_Key(self, incident: Incident, severity_rank_i32: int) -> int:
        return int(severity_rank_i32) * int(self.horizon_i32) + incident.report_time


def Build_Policy(policy_name_str: str, horizon_i32_opt: Optional[int] = None) -> Triage_Policy:
    if policy_name_str == "severity_first":
        return Severity_First_Policy()
    if policy_name_str == "fcfs":
        return Fcfs_Policy()
    if policy_name_str == "horizon_encoded":
        if horizon_i32_opt is None:
            return Horizon_Encoded_Policy()
        return Horizon_Encoded_Policy(horizon_i32=int(horizon_i32_opt))
    raise Invalid_Configuration(f"Unknown policy '{policy_name_str}'. Expected one of {', '.join(POLICY_NAMES)}.")
