# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Configurations.py
#  Purpose: Define configuration dataclasses for engine, workload and experiments.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from Core.Errors import Invalid_Configuration
from Models.Categories import Incident_Category


POLICY_NAMES: Tuple[str, ...] = ("severity_first", "fcfs", "horizon_encoded")

# default bound on report times for the single-integer triage key
DEFAULT_TIME_HORIZON_I32: int = 200_000


@dataclass(frozen=True)
class Dispatch_Config:

    num_units_i32        : int           = 4
    time_horizon_i32_opt : Optional[int] = None
    policy_name_str      : str           = "severity_first"

    def __post_init__(self) -> None:
        if int(self.num_units_i32) < 1:
            raise Invalid_Configuration("There must be at least one unit to dispatch.")
        if self.time_horizon_i32_opt is not None and int(self.time_horizon_i32_opt) <= 0:
            raise Invalid_Configuration("time_horizon_i32_opt must be > 0 when set.")
        if self.policy_name_str not in POLICY_NAMES:
            raise Invalid_Configuration(
                f"Unknown policy '{self.policy_name_str}'. Expected one of {', '.join(POLICY_NAMES)}."
            )


def _Default_Category_Weights() -> Mapping[Incident_Category, float]:
    return {
        Incident_Category.MURDER            : 0.05,
        Incident_Category.ROBBERY           : 0.15,
        Incident_Category.TRAFFIC_COLLISION : 0.30,
        Incident_Category.WELLNESS_CHECK    : 0.50,
    }


@dataclass(frozen=True)
class Workload_Config:

    lambda_rate_f64          : float = 0.20
    duration_logn_mu_f64     : float = 2.5
    duration_logn_sigma_f64  : float = 0.5
    min_duration_i32         : int   = 1
    until_time_i32           : int   = 2_000
    max_incidents_i32_opt    : Optional[int] = None

    category_weights : Mapping[Incident_Category, float] = field(default_factory=_Default_Category_Weights)

    def __post_init__(self) -> None:
        if self.lambda_rate_f64 <= 0.0:
            raise Invalid_Configuration("lambda_rate_f64 must be > 0.")
        if self.duration_logn_sigma_f64 <= 0.0:
            raise Invalid_Configuration("duration_logn_sigma_f64 must be > 0.")
        if int(self.min_duration_i32) < 1:
            raise Invalid_Configuration("min_duration_i32 must be >= 1.")
        if int(self.until_time_i32) <= 0:
            raise Invalid_Configuration("until_time_i32 must be > 0.")
        if self.max_incidents_i32_opt is not None and int(self.max_incidents_i32_opt) < 0:
            raise Invalid_Configuration("max_incidents_i32_opt must be >= 0 when set.")
        if not self.category_weights:
            raise Invalid_Configuration("category_weights must not be empty.")


@dataclass(frozen=True)
class Experiment_Config:

    seed_i32          : int  = 1453
    replications_i32  : int  = 1
    results_dir_str   : str  = "Results"
    make_plots_bool   : bool = True

    dispatch_config : Dispatch_Config = Dispatch_Config()
    workload_config : Workload_Config = Workload_Config()

    def __post_init__(self) -> None:
        if int(self.replications_i32) < 1:
            raise Invalid_Configuration("replications_i32 must be >= 1.")
        if (
            self.dispatch_config.time_horizon_i32_opt is not None
            and self.workload_config.until_time_i32 > self.dispatch_config.time_horizon_i32_opt
        ):
            raise Invalid_Configuration("Workload until_time_i32 must not exceed the dispatch time horizon.")


"""
Notes (implementation choices embedded in config):

Durations use a lognormal rounded up to whole clock units so every incident has duration >= 1.

time_horizon_i32_opt is only required by the horizon-encoded triage key; the default composite
(rank, report time) key has no horizon assumption.
"""
