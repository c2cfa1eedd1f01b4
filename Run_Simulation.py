# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Run_Simulation.py
#  Purpose: Run dispatch scenarios or synthetic replications and write outputs.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from loguru import logger
from tqdm import tqdm

from Analysis.Process_Analysis import Artifacts_From_Collector, Process_Analyzer
from Configurations import POLICY_NAMES, Dispatch_Config, Experiment_Config, Workload_Config
from Core.Dispatch_Engine import Dispatch_Engine
from Core.Errors import Dispatch_Error
from Core.Incident import Incident
from Metrics.Collector import SummaryStats
from Metrics.Reports import Console_Notification_Logger, Format_Summary
from Models.Distributions import Generate_Workload
from Models.Scenarios import SCENARIOS


SCENARIO_CHOICES = tuple(SCENARIOS.keys()) + ("synthetic",)

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

RESULTS_HEADER = ("Replication,Seed,Policy,Units,Reported,Dispatched,Resolved,Unresolved,"
                  "AvgWT,WTP50,WTP90,AvgResponseTime,ResponseTimeP90,"
                  "Avg_TriageLength,Max_TriageLength,FleetUtilization,EndTime")


def _Build_Parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Emergency unit dispatch simulation.")
    parser.add_argument("--scenario", choices=SCENARIO_CHOICES, default="saturation",
                        help="Canned incident batch, or a synthetic Poisson workload.")
    parser.add_argument("--units", type=int, default=4, help="Number of dispatchable units.")
    parser.add_argument("--policy", choices=POLICY_NAMES, default="severity_first", help="Triage ordering policy.")
    parser.add_argument("--horizon", type=int, default=None,
                        help="Time horizon; report times must stay below it.")
    parser.add_argument("--replications", type=int, default=1, help="Synthetic replications.")
    parser.add_argument("--seed", type=int, default=1453, help="Base seed for synthetic workloads.")
    parser.add_argument("--outdir", default="Results", help="Output directory for results and plots.")
    parser.add_argument("--no-plots", action="store_true", help="Skip matplotlib output.")
    parser.add_argument("--quiet", action="store_true", help="Do not print notification lines.")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING",
                        help="loguru level for diagnostics on stderr.")
    return parser


def _Configure_Logging(level_str: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level_str)


def _Dispatch_Config_From_Args(args: argparse.Namespace) -> Dispatch_Config:
    return Dispatch_Config(
        num_units_i32=int(args.units),
        time_horizon_i32_opt=args.horizon,
        policy_name_str=str(args.policy),
    )


def _Experiment_Config_From_Args(args: argparse.Namespace) -> Experiment_Config:
    return Experiment_Config(
        seed_i32=int(args.seed),
        replications_i32=int(args.replications),
        results_dir_str=str(args.outdir),
        make_plots_bool=not bool(args.no_plots),
        dispatch_config=_Dispatch_Config_From_Args(args),
        workload_config=Workload_Config(),
    )


def Run_Scenario(
    incidents_seq_incident: Sequence[Incident],
    cfg_dispatch_config: Dispatch_Config,
    quiet_bool: bool = False,
) -> Dict[str, object]:
    """
    Submits one incident batch to a fresh engine, runs it to exhaustion and
    prints the summary. Notification lines are printed unless quiet_bool.
    """
    listeners_list = [] if quiet_bool else [Console_Notification_Logger()]
    engine_dispatch_engine = Dispatch_Engine(cfg_dispatch_config, listeners_seq_opt=listeners_list)
    for incident_ in incidents_seq_incident:
        engine_dispatch_engine.Submit(incident_)

    agg_dict_obj = engine_dispatch_engine.Run()

    print()
    print(Format_Summary(agg_dict_obj))
    return agg_dict_obj


def _Append_Result_Row(results_path: Path, replication_i32: int, seed_i32: int,
                       cfg_dispatch_config: Dispatch_Config, agg_dict_obj: Dict[str, object]) -> None:
    wait_summary_stats: SummaryStats = agg_dict_obj.get("waiting_time")
    resp_summary_stats: SummaryStats = agg_dict_obj.get("response_time")

    if not results_path.exists():
        with open(results_path, "a", encoding="utf-8", newline="") as results_file:
            print(RESULTS_HEADER, file=results_file)

    with open(results_path, "a", encoding="utf-8", newline="") as results_file:
        print(
            f"{replication_i32},{seed_i32},{cfg_dispatch_config.policy_name_str},{cfg_dispatch_config.num_units_i32},"
            f"{agg_dict_obj.get('n_reported')},{agg_dict_obj.get('n_dispatched')},{agg_dict_obj.get('n_resolved')},"
            f"{agg_dict_obj.get('n_unresolved')},"
            f"{wait_summary_stats.mean_f64},{wait_summary_stats.p50_f64},{wait_summary_stats.p90_f64},"
            f"{resp_summary_stats.mean_f64},{resp_summary_stats.p90_f64},"
            f"{agg_dict_obj.get('triage_len_mean')},{agg_dict_obj.get('triage_len_max')},"
            f"{agg_dict_obj.get('fleet_utilization')},{agg_dict_obj.get('end_time')}",
            file=results_file,
        )


def Run_Synthetic(cfg_experiment_config: Experiment_Config) -> List[Dict[str, object]]:
    base = Path(cfg_experiment_config.results_dir_str)
    base.mkdir(parents=True, exist_ok=True)
    results_path = base / "results.csv"

    cfg_dispatch_config = cfg_experiment_config.dispatch_config
    aggregates_list: List[Dict[str, object]] = []

    for k_i32 in tqdm(range(int(cfg_experiment_config.replications_i32)), desc="replications"):
        seed_i32 = int(cfg_experiment_config.seed_i32) + k_i32
        engine_dispatch_engine = Dispatch_Engine(cfg_dispatch_config)
        for incident_ in Generate_Workload(cfg_experiment_config.workload_config, seed_i32):
            engine_dispatch_engine.Submit(incident_)
        agg_dict_obj = engine_dispatch_engine.Run()
        aggregates_list.append(agg_dict_obj)

        _Append_Result_Row(results_path, k_i32, seed_i32, cfg_dispatch_config, agg_dict_obj)

        if k_i32 == 0:
            analyzer_process_analyzer = Process_Analyzer(results_path_str=str(base))
            analysis_results_dict_obj = analyzer_process_analyzer.Analyze(
                Artifacts_From_Collector(engine_dispatch_engine.Metrics, agg_dict_obj),
                make_plots_bool=cfg_experiment_config.make_plots_bool,
            )
            anomaly_dict_obj = analysis_results_dict_obj["idle_unit_anomaly"]
            logger.info("Idle-unit-with-backlog time: {}", anomaly_dict_obj["idle_with_backlog_time"])

            print(Format_Summary(agg_dict_obj))
            print()

    return aggregates_list


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _Build_Parser().parse_args(argv)
    _Configure_Logging(args.log_level)

    try:
        if args.scenario == "synthetic":
            Run_Synthetic(_Experiment_Config_From_Args(args))
        else:
            Run_Scenario(SCENARIOS[args.scenario](), _Dispatch_Config_From_Args(args), quiet_bool=args.quiet)
    except Dispatch_Error as exc:
        logger.error("{}: {}", type(exc).__name__, exc)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
