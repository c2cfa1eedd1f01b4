# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Core/Events.py
#  Purpose: Define notification types and the incident event timeline.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Tuple

from Core.Incident import Incident, Incident_Snapshot
from Core.Priority_Queue import Min_Priority_Queue


class Notification_Type(str, Enum):
    REPORT     = "report"
    DISPATCH   = "dispatch"
    RESOLUTION = "resolution"


@dataclass(frozen=True)
class Notification:

    time              : int
    seq               : int
    notification_type : Notification_Type
    incident          : Incident_Snapshot

    def Key(self) -> Tuple[int, int]:
        return (self.time, self.seq)

    @property
    def Unit_Id(self) -> Optional[int]:
        return self.incident.unit_id_i32_opt

    @property
    def Report_Time(self) -> int:
        return self.incident.report_time

    @property
    def Resolution_Time(self) -> Optional[int]:
        return self.incident.Resolution_Time


class Notification_Listener(Protocol):

    def On_Notification(self, notification: Notification) -> None:
        ...


class Event_Timeline:
    """
    Pending report / resolution events. An incident sits here keyed by its temporal
    key: report time while undispatched, resolution time once dispatched.
    """

    def __init__(self) -> None:
        self._queue_min_priority_queue: Min_Priority_Queue[Incident] = Min_Priority_Queue()

    def Schedule(self, incident: Incident) -> None:
        self._queue_min_priority_queue.Insert(incident, incident.Temporal_Key)

    def Pop_Next(self) -> Optional[Tuple[int, Incident]]:
        if self._queue_min_priority_queue.Is_Empty():
            return None
        time_i32 = int(self._queue_min_priority_queue.Peek_Key())
        return time_i32, self._queue_min_priority_queue.Extract_Min()

    def Peek_Time(self) -> Optional[int]:
        if self._queue_min_priority_queue.Is_Empty():
            return None
        return int(self._queue_min_priority_queue.Peek_Key())

    def __len__(self) -> int:
        return len(self._queue_min_priority_queue)
