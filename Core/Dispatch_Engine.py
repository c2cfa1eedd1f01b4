# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Core/Dispatch_Engine.py
#  Purpose: Run the multi-unit discrete-event dispatch simulation.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from enum import Enum
from typing import Callable, List, Optional, Sequence, Set, Union

from loguru import logger

from Configurations import Dispatch_Config
from Core.Errors import Dispatch_Error, Invalid_Configuration, Invalid_Incident
from Core.Events import Event_Timeline, Notification, Notification_Listener, Notification_Type
from Core.Incident import Incident, Incident_Snapshot
from Core.Priority_Queue import Min_Priority_Queue
from Core.Unit_Pool import Unit_Pool
from Metrics.Collector import Dispatch_Metrics_Collector
from Models.Categories import DEFAULT_SEVERITY_TABLE, Severity_Table
from Models.Policies import Build_Policy
from Models.Policy_Base import Triage_Policy


Listener = Union[Notification_Listener, Callable[[Notification], None]]


class Engine_State(str, Enum):
    IDLE    = "idle"
    RUNNING = "running"
    DRAINED = "drained"


class Dispatch_Engine:
    """
    Owns the event timeline, the triage (standby) queue and the unit pool.

    Every reported incident goes through triage, even when a unit is idle at the
    moment it arrives: after each timeline event the engine hands idle units to the
    best waiting incidents, so a fresh arrival can never jump ahead of a more urgent
    incident that is already waiting.
    """

    def __init__(
        self,
        cfg_dispatch_config            : Dispatch_Config,
        severity_table_severity_table  : Severity_Table = DEFAULT_SEVERITY_TABLE,
        policy_triage_policy_opt       : Optional[Triage_Policy] = None,
        metrics_collector_opt          : Optional[Dispatch_Metrics_Collector] = None,
        listeners_seq_opt              : Optional[Sequence[Listener]] = None,
    ) -> None:
        if int(cfg_dispatch_config.num_units_i32) < 1:
            raise Invalid_Configuration("There must be at least one unit to dispatch.")

        self.cfg_dispatch_config           = cfg_dispatch_config
        self.severity_table_severity_table = severity_table_severity_table
        self.policy_triage_policy          = (
            policy_triage_policy_opt
            if policy_triage_policy_opt is not None
            else Build_Policy(cfg_dispatch_config.policy_name_str, cfg_dispatch_config.time_horizon_i32_opt)
        )

        self.metrics_dispatch_metrics_collector = (
            metrics_collector_opt if metrics_collector_opt is not None else Dispatch_Metrics_Collector()
        )
        self.metrics_dispatch_metrics_collector.Set_Fleet_Size(cfg_dispatch_config.num_units_i32)

        self.timeline_event_timeline                      = Event_Timeline()
        self.triage_min_priority_queue: Min_Priority_Queue[Incident] = Min_Priority_Queue()
        self.unit_pool_unit_pool                          = Unit_Pool(cfg_dispatch_config.num_units_i32)

        self._listeners_list_listener: List[Listener] = list(listeners_seq_opt or [])

        self._now_i32               : int = 0
        self._state_engine_state    : Engine_State = Engine_State.IDLE
        self._in_run_bool           : bool = False
        self._next_incident_id_i32  : int = 0
        self._notification_seq_i32  : int = 0
        self._submitted_ids_set_i32 : Set[int] = set()

    @classmethod
    def With_Units(cls, num_units_i32: int, **kwargs) -> "Dispatch_Engine":
        return cls(Dispatch_Config(num_units_i32=num_units_i32), **kwargs)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def now(self) -> int:
        return self._now_i32

    @property
    def state(self) -> Engine_State:
        return self._state_engine_state

    @property
    def Units(self) -> Unit_Pool:
        return self.unit_pool_unit_pool

    @property
    def Metrics(self) -> Dispatch_Metrics_Collector:
        return self.metrics_dispatch_metrics_collector

    def Triage_Length(self) -> int:
        return len(self.triage_min_priority_queue)

    def Pending_Events(self) -> int:
        return len(self.timeline_event_timeline)

    def Waiting_Incidents(self) -> List[Incident_Snapshot]:
        return [self._Snapshot(incident_) for _, incident_ in self.triage_min_priority_queue.Items()]

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def Subscribe(self, listener: Listener) -> None:
        self._listeners_list_listener.append(listener)

    def Submit(self, incident: Incident) -> None:
        incident.Validate_For_Submission()

        if not self.severity_table_severity_table.Knows(incident.category):
            raise Invalid_Incident(f"Category {incident.category!r} is not in the severity table.")

        if incident.report_time < self._now_i32:
            raise Invalid_Incident(
                f"Report time {incident.report_time} is earlier than the simulation clock ({self._now_i32})."
            )

        horizon_i32_opt = self.cfg_dispatch_config.time_horizon_i32_opt
        if horizon_i32_opt is not None and incident.report_time >= horizon_i32_opt:
            raise Invalid_Incident(
                f"Report time {incident.report_time} is not below the time horizon {horizon_i32_opt}."
            )

        admits_opt = getattr(self.policy_triage_policy, "Admits", None)
        if callable(admits_opt) and not admits_opt(incident):
            raise Invalid_Incident(
                f"Policy '{self.policy_triage_policy.name}' does not admit an incident reported at {incident.report_time}."
            )

        if incident.incident_id_i32_opt is None:
            while self._next_incident_id_i32 in self._submitted_ids_set_i32:
                self._next_incident_id_i32 += 1
            incident.incident_id_i32_opt = self._next_incident_id_i32
            self._next_incident_id_i32 += 1
        elif incident.incident_id_i32_opt in self._submitted_ids_set_i32:
            raise Invalid_Incident(f"Incident {incident.incident_id_i32_opt} was already submitted.")

        self._submitted_ids_set_i32.add(int(incident.incident_id_i32_opt))
        self.timeline_event_timeline.Schedule(incident)

        if self._state_engine_state == Engine_State.DRAINED:
            self._state_engine_state = Engine_State.IDLE

    def Step(self) -> bool:
        next_opt = self.timeline_event_timeline.Pop_Next()
        if next_opt is None:
            self._state_engine_state = Engine_State.DRAINED
            self.metrics_dispatch_metrics_collector.Set_End_Time(self._now_i32)
            return False

        self._state_engine_state = Engine_State.RUNNING
        time_i32, incident_ = next_opt
        self._now_i32 = int(time_i32)

        if incident_.Is_Dispatched():
            self._Handle_Resolution(incident_)
        else:
            self._Handle_Report(incident_)

        self._Drain_Triage()

        self.metrics_dispatch_metrics_collector.Record_Triage_Length(self._now_i32, self.Triage_Length())
        self.metrics_dispatch_metrics_collector.Record_Busy_Units(self._now_i32, self.unit_pool_unit_pool.Busy_Count())
        return True

    def Run(self) -> dict:
        if self._in_run_bool:
            raise Dispatch_Error("Run() is not re-entrant.")

        self._in_run_bool = True
        logger.info(
            "Dispatch run started: units={} policy={} pending_events={}",
            self.cfg_dispatch_config.num_units_i32,
            self.policy_triage_policy.name,
            self.Pending_Events(),
        )
        try:
            while self.Step():
                pass
        finally:
            self._in_run_bool = False

        agg_dict_obj = self.metrics_dispatch_metrics_collector.Aggregate()
        logger.info(
            "Dispatch run drained at t={}: resolved={} unresolved={}",
            self._now_i32,
            agg_dict_obj["n_resolved"],
            agg_dict_obj["n_unresolved"],
        )
        return agg_dict_obj

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _Handle_Report(self, incident: Incident) -> None:
        self._Emit(Notification_Type.REPORT, incident)

        rank_i32 = self.severity_table_severity_table.Rank(incident.category)
        key_any = self.policy_triage_policy.Triage_Key(incident, rank_i32)
        self.triage_min_priority_queue.Insert(incident, key_any)
        logger.debug("t={}: incident {} queued for triage with key {}", self._now_i32, incident.incident_id_i32_opt, key_any)

    def _Handle_Resolution(self, incident: Incident) -> None:
        self.unit_pool_unit_pool.Release(incident.unit_id_i32_opt)
        self._Emit(Notification_Type.RESOLUTION, incident)
        logger.debug("t={}: unit {} released by incident {}", self._now_i32, incident.unit_id_i32_opt, incident.incident_id_i32_opt)

    def _Drain_Triage(self) -> None:
        while not self.triage_min_priority_queue.Is_Empty():
            unit_id_i32_opt = self.unit_pool_unit_pool.Acquire_Idle_Unit()
            if unit_id_i32_opt is None:
                logger.debug("t={}: no unit available, {} incident(s) waiting", self._now_i32, self.Triage_Length())
                return

            incident_ = self.triage_min_priority_queue.Extract_Min()
            incident_.Mark_Dispatched(self._now_i32, unit_id_i32_opt)
            self._Emit(Notification_Type.DISPATCH, incident_)
            self.timeline_event_timeline.Schedule(incident_)
            logger.debug(
                "t={}: unit {} dispatched to incident {} until t={}",
                self._now_i32,
                unit_id_i32_opt,
                incident_.incident_id_i32_opt,
                incident_.Resolution_Time,
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _Snapshot(self, incident: Incident) -> Incident_Snapshot:
        return incident.Snapshot(self.severity_table_severity_table.Label(incident.category))

    def _Emit(self, notification_type: Notification_Type, incident: Incident) -> None:
        self._notification_seq_i32 += 1
        notification_ = Notification(
            time=self._now_i32,
            seq=self._notification_seq_i32,
            notification_type=notification_type,
            incident=self._Snapshot(incident),
        )

        self.metrics_dispatch_metrics_collector.On_Notification(notification_)
        for listener_ in list(self._listeners_list_listener):
            on_notification_opt = getattr(listener_, "On_Notification", None)
            if callable(on_notification_opt):
                on_notification_opt(notification_)
            else:
                listener_(notification_)
