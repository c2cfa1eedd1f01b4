# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Metrics/Collector.py
#  Purpose: Collect per-incident metrics and aggregate statistics.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from Core.Events import Notification, Notification_Type
from Core.Incident import Incident_Snapshot
from General_Definitions.Types import FLOAT64


@dataclass
class SummaryStats:

    count_i32 : int   = 0
    mean_f64  : float = float("nan")
    p50_f64   : float = float("nan")
    p90_f64   : float = float("nan")
    p95_f64   : float = float("nan")
    p99_f64   : float = float("nan")

    @staticmethod
    def From_Samples(samples_list_f64: List[float]) -> "SummaryStats":
        if not samples_list_f64:
            return SummaryStats(count_i32=0)

        arr_f64 = np.asarray(samples_list_f64, dtype=FLOAT64)

        return SummaryStats(
            count_i32=int(arr_f64.size),
            mean_f64=float(arr_f64.mean()),
            p50_f64=float(np.percentile(arr_f64, 50)),
            p90_f64=float(np.percentile(arr_f64, 90)),
            p95_f64=float(np.percentile(arr_f64, 95)),
            p99_f64=float(np.percentile(arr_f64, 99)),
        )


@dataclass
class Dispatch_Metrics_Collector:

    num_units_i32    : int           = 1
    end_time_i32_opt : Optional[int] = None

    reported_count_i32   : int = 0
    dispatched_count_i32 : int = 0
    resolved_count_i32   : int = 0

    resolved_list_incident_snapshot : List[Incident_Snapshot] = field(default_factory=list)
    first_report_time_i32_opt       : Optional[int] = None

    triage_len_sample_times_list_i32 : List[int] = field(default_factory=list)
    triage_len_samples_list_i32      : List[int] = field(default_factory=list)

    busy_units_sample_times_list_i32 : List[int] = field(default_factory=list)
    busy_units_samples_list_i32      : List[int] = field(default_factory=list)

    def Set_Fleet_Size(self, num_units_i32: int) -> None:
        self.num_units_i32 = int(num_units_i32)

    def Set_End_Time(self, now_i32: int) -> None:
        self.end_time_i32_opt = int(now_i32)

    def On_Notification(self, notification: Notification) -> None:
        if notification.notification_type == Notification_Type.REPORT:
            self.reported_count_i32 += 1
            if self.first_report_time_i32_opt is None or notification.time < self.first_report_time_i32_opt:
                self.first_report_time_i32_opt = int(notification.time)
        elif notification.notification_type == Notification_Type.DISPATCH:
            self.dispatched_count_i32 += 1
        elif notification.notification_type == Notification_Type.RESOLUTION:
            self.resolved_count_i32 += 1
            self.resolved_list_incident_snapshot.append(notification.incident)
        else:
            raise ValueError(f"Unknown notification type: {notification.notification_type}")

    def Record_Triage_Length(self, now_i32: int, triage_len_i32: int) -> None:
        self.triage_len_sample_times_list_i32.append(int(now_i32))
        self.triage_len_samples_list_i32.append(int(triage_len_i32))

    def Record_Busy_Units(self, now_i32: int, busy_units_i32: int) -> None:
        self.busy_units_sample_times_list_i32.append(int(now_i32))
        self.busy_units_samples_list_i32.append(int(busy_units_i32))

    def Waiting_Count(self) -> int:
        return self.reported_count_i32 - self.dispatched_count_i32

    def Unresolved_Count(self) -> int:
        return self.dispatched_count_i32 - self.resolved_count_i32

    def Aggregate(self) -> Dict[str, object]:
        waiting_list_f64 = [
            float(s.dispatch_time_i32_opt - s.report_time)
            for s in self.resolved_list_incident_snapshot
        ]
        response_list_f64 = [
            float(s.Resolution_Time - s.report_time)
            for s in self.resolved_list_incident_snapshot
        ]

        by_category_dict_list_f64: Dict[str, List[float]] = {}
        for snapshot_ in self.resolved_list_incident_snapshot:
            by_category_dict_list_f64.setdefault(snapshot_.category.value, []).append(
                float(snapshot_.dispatch_time_i32_opt - snapshot_.report_time)
            )
        waiting_by_category_dict_f64 = {
            category_str: float(np.mean(values_list_f64))
            for category_str, values_list_f64 in sorted(by_category_dict_list_f64.items())
        }

        triage_arr_f64 = np.asarray(self.triage_len_samples_list_i32, dtype=FLOAT64)
        triage_mean_f64 = float(triage_arr_f64.mean()) if triage_arr_f64.size else float("nan")
        triage_p90_f64  = float(np.percentile(triage_arr_f64, 90)) if triage_arr_f64.size else float("nan")
        triage_max_i32  = int(triage_arr_f64.max()) if triage_arr_f64.size else 0

        end_time_f64 = float(self.end_time_i32_opt) if self.end_time_i32_opt is not None else float("nan")
        if self.first_report_time_i32_opt is not None and end_time_f64 == end_time_f64:
            makespan_f64 = end_time_f64 - float(self.first_report_time_i32_opt)
        else:
            makespan_f64 = float("nan")

        busy_unit_time_f64 = float(sum(s.duration for s in self.resolved_list_incident_snapshot))
        if makespan_f64 == makespan_f64 and makespan_f64 > 0.0:
            utilization_f64 = busy_unit_time_f64 / (float(self.num_units_i32) * makespan_f64)
        else:
            utilization_f64 = float("nan")

        return {
            "n_reported": self.reported_count_i32,
            "n_dispatched": self.dispatched_count_i32,
            "n_resolved": self.resolved_count_i32,
            "n_waiting": self.Waiting_Count(),
            "n_unresolved": self.Unresolved_Count(),
            "waiting_time": SummaryStats.From_Samples(waiting_list_f64),
            "response_time": SummaryStats.From_Samples(response_list_f64),
            "waiting_time_by_category": waiting_by_category_dict_f64,
            "triage_len_mean": triage_mean_f64,
            "triage_len_p90": triage_p90_f64,
            "triage_len_max": triage_max_i32,
            "fleet_utilization": utilization_f64,
            "makespan": makespan_f64,
            "end_time": end_time_f64,
        }
