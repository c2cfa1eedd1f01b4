# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Analysis/Fleet_Size_Sweep.py
#  Purpose: Sweep fleet sizes and triage policies on a shared synthetic workload.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import csv
import os
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
from loguru import logger
from tqdm import tqdm

from Configurations import POLICY_NAMES, Dispatch_Config, Workload_Config
from Core.Dispatch_Engine import Dispatch_Engine
from Metrics.Collector import SummaryStats
from Models.Distributions import Generate_Workload


DEFAULT_UNIT_COUNTS: Sequence[int] = (1, 2, 3, 4, 6, 8)


def _Apply_Plot_Style() -> None:
    plt.rcParams.update(
        {
            "figure.dpi": 120,
            "savefig.dpi": 300,
            "font.family": "serif",
            "font.serif": ["Times New Roman", "Times", "DejaVu Serif"],
            "font.size": 11,
            "axes.titlesize": 12,
            "axes.labelsize": 11,
            "legend.fontsize": 9,
            "lines.linewidth": 2.0,
            "lines.markersize": 5,
            "figure.facecolor": "white",
            "axes.facecolor": "white",
        }
    )


def _Run_Policy(
    num_units_i32: int,
    policy_name: str,
    workload_cfg: Workload_Config,
    seed_i32: int,
) -> Dict[str, float]:
    engine_dispatch_engine = Dispatch_Engine(Dispatch_Config(num_units_i32=num_units_i32, policy_name_str=policy_name))
    # same seed for every cell so all policies see the same incident stream
    for incident_ in Generate_Workload(workload_cfg, seed_i32):
        engine_dispatch_engine.Submit(incident_)
    agg = engine_dispatch_engine.Run()

    wait_summary_stats: SummaryStats = agg["waiting_time"]
    by_category_dict_f64 = agg.get("waiting_time_by_category") or {}
    return {
        "n_resolved": int(agg["n_resolved"]),
        "mean_waiting_time": float(wait_summary_stats.mean_f64),
        "p90_waiting_time": float(wait_summary_stats.p90_f64),
        "mean_waiting_time_murder": float(by_category_dict_f64.get("murder", float("nan"))),
        "triage_len_mean": float(agg["triage_len_mean"]),
        "fleet_utilization": float(agg["fleet_utilization"]),
    }


def _Write_Table(rows: List[Dict[str, object]], out_path: str) -> None:
    if not rows:
        return
    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        w.writeheader()
        for row in rows:
            w.writerow(row)


def _Plot(results: List[Dict[str, object]], policy_names: Sequence[str], out_path: str) -> None:
    _Apply_Plot_Style()

    fig, axes = plt.subplots(1, 2, figsize=(11, 4), sharex=True)
    for policy_name in policy_names:
        rows = [r for r in results if r["policy_name"] == policy_name]
        n_vals = [int(r["num_units"]) for r in rows]
        axes[0].plot(n_vals, [float(r["mean_waiting_time"]) for r in rows], marker="o", label=policy_name)
        axes[1].plot(n_vals, [float(r["mean_waiting_time_murder"]) for r in rows], marker="o", label=policy_name)

    axes[0].set_xlabel("Fleet size (units)")
    axes[0].set_ylabel("Mean waiting time")
    axes[0].grid(True, alpha=0.3)
    axes[0].legend(fontsize=9)

    axes[1].set_xlabel("Fleet size (units)")
    axes[1].set_ylabel("Mean waiting time (murder)")
    axes[1].grid(True, alpha=0.3)
    axes[1].legend(fontsize=9)

    plt.tight_layout()
    plt.savefig(out_path)
    plt.close(fig)


def Run_Fleet_Size_Sweep(
    unit_counts: Sequence[int],
    policy_names: Sequence[str],
    out_dir: str,
    workload_cfg: Optional[Workload_Config] = None,
    seed_i32: int = 1453,
    make_plots_bool: bool = True,
) -> List[Dict[str, object]]:
    os.makedirs(out_dir, exist_ok=True)
    if workload_cfg is None:
        workload_cfg = Workload_Config()

    cells = [(int(n), str(p)) for n in unit_counts for p in policy_names]
    logger.info("Fleet size sweep: {} cell(s) into {}", len(cells), out_dir)

    results: List[Dict[str, object]] = []
    for num_units_i32, policy_name in tqdm(cells, desc="fleet sweep"):
        cell_metrics = _Run_Policy(num_units_i32, policy_name, workload_cfg, seed_i32)
        results.append({"policy_name": policy_name, "num_units": num_units_i32, **cell_metrics})

    table_path = os.path.join(out_dir, "fleet_size_sweep_table.csv")
    _Write_Table(results, table_path)

    if make_plots_bool:
        plot_path = os.path.join(out_dir, "fleet_size_sweep.png")
        _Plot(results, policy_names, plot_path)

    return results


if __name__ == "__main__":
    Run_Fleet_Size_Sweep(DEFAULT_UNIT_COUNTS, ("severity_first", "fcfs"), out_dir="Results/fleet_size_sweep")
