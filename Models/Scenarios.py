# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Models/Scenarios.py
#  Purpose: Build the canned reference incident batches.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from typing import Callable, Dict, List

from Core.Incident import Incident
from Models.Categories import Incident_Category


def Staggered_Arrivals_Scenario() -> List[Incident]:
    # four wellness checks that all finish at t=10; a 4-unit fleet never queues
    return [
        Incident(report_time=0, category=Incident_Category.WELLNESS_CHECK, duration=10),
        Incident(report_time=1, category=Incident_Category.WELLNESS_CHECK, duration=9),
        Incident(report_time=2, category=Incident_Category.WELLNESS_CHECK, duration=8),
        Incident(report_time=3, category=Incident_Category.WELLNESS_CHECK, duration=7),
    ]


def Saturation_Scenario() -> List[Incident]:
    """
    Staggered arrivals keep a 4-unit fleet busy until t=10 while one incident of
    every category is reported at each of t=5..8. From t=10 on the backlog is
    served one category per clock tick, most severe first.
    """
    incidents_list_incident = Staggered_Arrivals_Scenario()
    for report_time_i32 in (5, 6, 7, 8):
        for category_ in (
            Incident_Category.WELLNESS_CHECK,
            Incident_Category.TRAFFIC_COLLISION,
            Incident_Category.ROBBERY,
            Incident_Category.MURDER,
        ):
            incidents_list_incident.append(Incident(report_time=report_time_i32, category=category_, duration=1))
    return incidents_list_incident


SCENARIOS: Dict[str, Callable[[], List[Incident]]] = {
    "staggered": Staggered_Arrivals_Scenario,
    "saturation": Saturation_Scenario,
}
