# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Models/Policy_Base.py
#  Purpose: Define the triage-ordering policy interface.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from typing import Protocol

from Core.Incident import Incident
from Core.Priority_Queue import Priority_Key


class Triage_Policy(Protocol):
    """
    Decides the standby-queue order. The engine always pops the smallest key, so a
    policy only has to map an incident (plus its severity rank) to a comparable key.

    Policies may also define Admits(incident) -> bool; the engine rejects any
    submission a policy does not admit.
    """

    name: str

    def Triage_Key(self, incident: Incident, severity_rank_i32: int) -> Priority_Key:
        ...
