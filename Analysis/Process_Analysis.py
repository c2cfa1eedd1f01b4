"""
This script produces, for one dispatch run:

- Triage density over simulation time (time series plot of triage queue length)

- Waiting times by incident category (summary stats + histogram)

- Fleet utilization (time-weighted busy units over the observed horizon)

- Idle-unit anomaly detection (time a unit was idle while incidents waited in triage;
  the dispatch engine drains triage after every event, so this must come out as zero)

- Full summary statistics from the collector

Metrics are implemented as plugins that consume a shared Analysis_Context.
Adding a new metric is adding one new class implementing Compute().
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from Core.Incident import Incident_Snapshot
from Metrics.Collector import Dispatch_Metrics_Collector, SummaryStats


# -----------------------------
# Data contract between sim and Analysis
# -----------------------------

@dataclass(frozen=True)
class Timeline_Series:
    """
    Generic time-series container.
    times: non-decreasing time points
    values: same length as times
    """

    times  : Sequence[float]
    values : Sequence[float]

    def As_Arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        t_arr_f64 = np.asarray(self.times, dtype=float)
        v_arr_f64 = np.asarray(self.values, dtype=float)
        if t_arr_f64.size != v_arr_f64.size:
            raise ValueError("Timeline_Series times/values length mismatch.")
        return t_arr_f64, v_arr_f64


@dataclass(frozen=True)
class Simulation_Artifacts:
    """
    Minimal artifacts needed for Analysis.

    Required:
      - aggregate: headline metrics dict from Dispatch_Metrics_Collector.Aggregate()
      - resolved_incidents: snapshots of every resolved incident
      - num_units_i32: fleet size of the run

    Optional:
      - triage_length_timeline: triage queue length sampled after every engine step
      - busy_units_timeline: busy unit count sampled after every engine step
    """

    aggregate          : Dict[str, object]
    resolved_incidents : Sequence[Incident_Snapshot]
    num_units_i32      : int

    triage_length_timeline : Optional[Timeline_Series] = None
    busy_units_timeline    : Optional[Timeline_Series] = None


def Artifacts_From_Collector(
    metrics_dispatch_metrics_collector: Dispatch_Metrics_Collector,
    aggregate_dict_obj: Optional[Dict[str, object]] = None,
) -> Simulation_Artifacts:
    collector_ = metrics_dispatch_metrics_collector
    return Simulation_Artifacts(
        aggregate=aggregate_dict_obj if aggregate_dict_obj is not None else collector_.Aggregate(),
        resolved_incidents=list(collector_.resolved_list_incident_snapshot),
        num_units_i32=int(collector_.num_units_i32),
        triage_length_timeline=Timeline_Series(
            collector_.triage_len_sample_times_list_i32,
            collector_.triage_len_samples_list_i32,
        ),
        busy_units_timeline=Timeline_Series(
            collector_.busy_units_sample_times_list_i32,
            collector_.busy_units_samples_list_i32,
        ),
    )


@dataclass
class Analysis_Context:
    """
    Shared context passed to all plugins.
    """

    artifacts : Simulation_Artifacts

    def Waiting_Times_By_Category(self) -> Dict[str, List[float]]:
        by_category_dict_list_f64: Dict[str, List[float]] = {}
        for snapshot_ in self.artifacts.resolved_incidents:
            by_category_dict_list_f64.setdefault(snapshot_.category.value, []).append(
                float(snapshot_.dispatch_time_i32_opt - snapshot_.report_time)
            )
        return by_category_dict_list_f64


# -----------------------------
# Plugin interface (extensible metrics)
# -----------------------------

class Metric_Plugin(Protocol):
    """
    Each plugin can compute numbers and/or emit plots.
    """

    name : str

    def Compute(self, ctx_analysis_context: Analysis_Context) -> Dict[str, object]:
        ...

    def Plot(self, ctx_analysis_context: Analysis_Context, results_path: str) -> None:
        """
        Optional plotting hook. If not needed, return without plotting.
        """
        return


# -----------------------------
# Helpers
# -----------------------------

def _Summary_Stats(samples_seq_f64: Sequence[float]) -> SummaryStats:
    return SummaryStats.From_Samples([float(x_f64) for x_f64 in samples_seq_f64])


def _Locf_Resample(src_t_arr_f64: np.ndarray, src_v_arr_f64: np.ndarray, new_t_arr_f64: np.ndarray) -> np.ndarray:
    """
    Last-Observation-Carried-Forward resampling from (src_t, src_v) to new_t.
    Assumes src_t non-decreasing; with repeated times the last sample at a time wins.
    """
    src_t_arr_f64 = np.asarray(src_t_arr_f64, dtype=float)
    src_v_arr_f64 = np.asarray(src_v_arr_f64, dtype=float)
    new_t_arr_f64 = np.asarray(new_t_arr_f64, dtype=float)

    idx_arr = np.searchsorted(src_t_arr_f64, new_t_arr_f64, side="right") - 1
    idx_arr = np.clip(idx_arr, 0, src_v_arr_f64.size - 1)
    return src_v_arr_f64[idx_arr]


def _Step_Series(tl_timeline_series: Timeline_Series) -> Tuple[np.ndarray, np.ndarray]:
    # one value per distinct time: the state after the last engine step at that time
    t_arr_f64, v_arr_f64 = tl_timeline_series.As_Arrays()
    if t_arr_f64.size == 0:
        return t_arr_f64, v_arr_f64
    t_unique_arr_f64 = np.unique(t_arr_f64)
    return t_unique_arr_f64, _Locf_Resample(t_arr_f64, v_arr_f64, t_unique_arr_f64)


def _Save_Current_Figure(results_path: str, file_name_str: str) -> None:
    os.makedirs(results_path, exist_ok=True)
    plt.tight_layout()
    plt.savefig(os.path.join(results_path, file_name_str))
    plt.close()


# -----------------------------
# Built-in plugins
# -----------------------------

class Triage_Density_Plot_Plugin:
    name = "triage_density_plot"

    def Compute(self, ctx_analysis_context: Analysis_Context) -> Dict[str, object]:
        tl_timeline_series_opt = ctx_analysis_context.artifacts.triage_length_timeline
        if tl_timeline_series_opt is None:
            return {"triage_density_plot_available": False}

        _, q_arr_f64 = _Step_Series(tl_timeline_series_opt)

        return {
            "triage_density_plot_available": True,
            "triage_length_samples": int(q_arr_f64.size),
            "triage_length_mean_sampled": float(np.mean(q_arr_f64)) if q_arr_f64.size else float("nan"),
            "triage_length_max_sampled": float(np.max(q_arr_f64)) if q_arr_f64.size else float("nan"),
        }

    def Plot(self, ctx_analysis_context: Analysis_Context, results_path: str) -> None:
        tl_timeline_series_opt = ctx_analysis_context.artifacts.triage_length_timeline
        if tl_timeline_series_opt is None:
            return

        t_arr_f64, q_arr_f64 = _Step_Series(tl_timeline_series_opt)
        if t_arr_f64.size == 0:
            return

        plt.figure()
        plt.step(t_arr_f64, q_arr_f64, where="post")
        plt.xlabel("Simulation time")
        plt.ylabel("Incidents waiting in triage")
        plt.title("Triage density over time")
        _Save_Current_Figure(results_path, "triage_density_plot.png")


class Waiting_Times_By_Category_Plugin:
    """
    Report -> dispatch waiting time per incident category, on resolved incidents.
    """

    name = "waiting_times_by_category"

    def Compute(self, ctx_analysis_context: Analysis_Context) -> Dict[str, object]:
        return {
            category_str: _Summary_Stats(values_list_f64)
            for category_str, values_list_f64 in sorted(ctx_analysis_context.Waiting_Times_By_Category().items())
        }

    def Plot(self, ctx_analysis_context: Analysis_Context, results_path: str) -> None:
        by_category_dict_list_f64 = ctx_analysis_context.Waiting_Times_By_Category()
        if not by_category_dict_list_f64:
            return

        plt.figure()
        for category_str, values_list_f64 in sorted(by_category_dict_list_f64.items()):
            plt.hist(np.asarray(values_list_f64, dtype=float), bins=30, alpha=0.5, label=category_str)
        plt.xlabel("Waiting time (report -> dispatch)")
        plt.ylabel("Count")
        plt.title("Waiting time distribution by category")
        plt.legend()
        _Save_Current_Figure(results_path, "waiting_time_by_category.png")


class Fleet_Utilization_Plugin:
    """
    Time-weighted mean of busy units, normalised by fleet size, over the span of
    the busy-units timeline.
    """

    name = "fleet_utilization"

    def Compute(self, ctx_analysis_context: Analysis_Context) -> Dict[str, object]:
        busy_tl_opt = ctx_analysis_context.artifacts.busy_units_timeline
        if busy_tl_opt is None:
            return {"fleet_utilization_available": False, "time_weighted_utilization": float("nan")}

        t_arr_f64, busy_arr_f64 = _Step_Series(busy_tl_opt)
        if t_arr_f64.size < 2:
            return {"fleet_utilization_available": True, "time_weighted_utilization": float("nan")}

        durations_arr_f64 = np.diff(t_arr_f64)
        busy_unit_time_f64 = float(np.sum(durations_arr_f64 * busy_arr_f64[:-1]))
        horizon_f64 = float(t_arr_f64[-1] - t_arr_f64[0])
        n_units_f64 = float(max(ctx_analysis_context.artifacts.num_units_i32, 1))

        return {
            "fleet_utilization_available": True,
            "busy_unit_time": busy_unit_time_f64,
            "time_weighted_utilization": busy_unit_time_f64 / (n_units_f64 * horizon_f64),
            "peak_busy_units": int(np.max(busy_arr_f64)),
        }

    def Plot(self, ctx_analysis_context: Analysis_Context, results_path: str) -> None:
        busy_tl_opt = ctx_analysis_context.artifacts.busy_units_timeline
        if busy_tl_opt is None:
            return

        t_arr_f64, busy_arr_f64 = _Step_Series(busy_tl_opt)
        if t_arr_f64.size == 0:
            return

        plt.figure()
        plt.step(t_arr_f64, busy_arr_f64, where="post")
        plt.axhline(ctx_analysis_context.artifacts.num_units_i32, color="tab:red", linestyle="--", label="fleet size")
        plt.xlabel("Simulation time")
        plt.ylabel("Busy units")
        plt.title("Busy units over time")
        plt.legend()
        _Save_Current_Figure(results_path, "busy_units_plot.png")


class Idle_Unit_Anomaly_Plugin:
    """
    Detects whether any unit sat idle while incidents waited in triage.

    Metric:
      - idle_with_backlog_time: total time where (busy_units < fleet size and triage length > 0)
      - idle_with_backlog_fraction_of_horizon: normalised by the observed horizon
    """

    name = "idle_unit_anomaly"

    def Compute(self, ctx_analysis_context: Analysis_Context) -> Dict[str, object]:
        busy_tl_opt   = ctx_analysis_context.artifacts.busy_units_timeline
        triage_tl_opt = ctx_analysis_context.artifacts.triage_length_timeline

        if busy_tl_opt is None or triage_tl_opt is None:
            return {
                "idle_unit_anomaly_available": False,
                "idle_with_backlog_time": float("nan"),
                "idle_with_backlog_fraction_of_horizon": float("nan"),
            }

        t_busy_arr_f64, busy_arr_f64     = _Step_Series(busy_tl_opt)
        t_triage_arr_f64, triage_arr_f64 = _Step_Series(triage_tl_opt)

        if t_busy_arr_f64.size == 0 or t_triage_arr_f64.size == 0:
            return {
                "idle_unit_anomaly_available": True,
                "idle_with_backlog_time": 0.0,
                "idle_with_backlog_fraction_of_horizon": 0.0,
            }

        t_arr_f64 = np.unique(np.concatenate([t_busy_arr_f64, t_triage_arr_f64]))
        busy_aligned_arr_f64   = _Locf_Resample(t_busy_arr_f64, busy_arr_f64, t_arr_f64)
        triage_aligned_arr_f64 = _Locf_Resample(t_triage_arr_f64, triage_arr_f64, t_arr_f64)

        if t_arr_f64.size < 2:
            return {
                "idle_unit_anomaly_available": True,
                "idle_with_backlog_time": 0.0,
                "idle_with_backlog_fraction_of_horizon": 0.0,
            }

        n_units_f64 = float(ctx_analysis_context.artifacts.num_units_i32)
        durations_arr_f64 = np.diff(t_arr_f64)
        idle_with_backlog_arr_f64 = (
            (busy_aligned_arr_f64[:-1] < n_units_f64) & (triage_aligned_arr_f64[:-1] > 0.0)
        ).astype(float)

        idle_time_f64 = float(np.sum(durations_arr_f64 * idle_with_backlog_arr_f64))
        horizon_f64 = float(t_arr_f64[-1] - t_arr_f64[0])
        frac_f64 = (idle_time_f64 / horizon_f64) if horizon_f64 > 0 else 0.0

        return {
            "idle_unit_anomaly_available": True,
            "idle_with_backlog_time": idle_time_f64,
            "idle_with_backlog_fraction_of_horizon": frac_f64,
        }

    def Plot(self, ctx_analysis_context: Analysis_Context, results_path: str) -> None:
        return


class Full_Summary_Stats_Plugin:
    """
    Re-exposes the collector aggregate so Analysis outputs are self-contained.
    """

    name = "full_summary_stats"

    def Compute(self, ctx_analysis_context: Analysis_Context) -> Dict[str, object]:
        agg_dict_obj = dict(ctx_analysis_context.artifacts.aggregate)
        agg_dict_obj["n_resolved_observed"] = len(ctx_analysis_context.artifacts.resolved_incidents)
        return agg_dict_obj

    def Plot(self, ctx_analysis_context: Analysis_Context, results_path: str) -> None:
        return


# -----------------------------
# Orchestrator
# -----------------------------

class Process_Analyzer:
    """
    Runs a suite of plugins and returns a combined results dict.
    """

    def __init__(self, plugins_seq_opt: Optional[Sequence[Metric_Plugin]] = None, results_path_str: str = "Results") -> None:
        self.results_path = results_path_str
        if plugins_seq_opt is None:
            plugins_seq_opt = [
                Triage_Density_Plot_Plugin(),
                Waiting_Times_By_Category_Plugin(),
                Fleet_Utilization_Plugin(),
                Idle_Unit_Anomaly_Plugin(),
                Full_Summary_Stats_Plugin(),
            ]
        self.plugins_list_plugin = list(plugins_seq_opt)

    def Analyze(
        self,
        artifacts_simulation_artifacts: Simulation_Artifacts,
        make_plots_bool: bool = True,
    ) -> Dict[str, object]:
        ctx_analysis_context = Analysis_Context(artifacts=artifacts_simulation_artifacts)

        results_dict_obj: Dict[str, object] = {"plugins": [p_plugin.name for p_plugin in self.plugins_list_plugin]}
        for p_plugin in self.plugins_list_plugin:
            out_dict_obj = p_plugin.Compute(ctx_analysis_context)
            results_dict_obj[p_plugin.name] = out_dict_obj
            if make_plots_bool:
                p_plugin.Plot(ctx_analysis_context, self.results_path)

        return results_dict_obj
