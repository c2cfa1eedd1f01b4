# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Models/Distributions.py
#  Purpose: Define interarrival, duration and category models for workloads.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import math
from dataclasses import dataclass, field
from typing import List, Mapping, Protocol

import numpy as np

from Configurations import Workload_Config
from Core.Errors import Invalid_Configuration
from Core.Incident import Incident
from Models.Categories import Incident_Category


class Interarrival_Model(Protocol):
    def Sample(self, rng_generator: np.random.Generator) -> float:
        ...


class Duration_Model(Protocol):
    def Sample(self, rng_generator: np.random.Generator) -> int:
        ...


@dataclass(frozen=True)
class Exponential_Interarrival:

    lambda_rate_f64 : float

    def __post_init__(self) -> None:
        if self.lambda_rate_f64 <= 0:
            raise Invalid_Configuration("lambda_rate must be > 0.")

    def Sample(self, rng_generator: np.random.Generator) -> float:
        return float(rng_generator.exponential(scale=1.0 / self.lambda_rate_f64))


@dataclass(frozen=True)
class Lognormal_Durations:

    mu_f64           : float
    sigma_f64        : float
    min_duration_i32 : int = 1

    def __post_init__(self) -> None:
        if self.sigma_f64 <= 0:
            raise Invalid_Configuration("Lognormal sigma must be > 0.")
        if int(self.min_duration_i32) < 1:
            raise Invalid_Configuration("min_duration must be >= 1.")

    def Sample(self, rng_generator: np.random.Generator) -> int:
        d_f64 = float(rng_generator.lognormal(mean=self.mu_f64, sigma=self.sigma_f64))
        return max(int(math.ceil(d_f64)), int(self.min_duration_i32))

    def Expected(self) -> float:
        return float(np.exp(self.mu_f64 + 0.5 * (self.sigma_f64 ** 2)))


@dataclass(frozen=True)
class Category_Mix:

    weights_dict_category_f64 : Mapping[Incident_Category, float]

    _categories_list_category : List[Incident_Category] = field(init=False, repr=False)
    _probabilities_arr_f64    : np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.weights_dict_category_f64:
            raise Invalid_Configuration("Category weights must not be empty.")

        categories_list_category: List[Incident_Category] = []
        weights_list_f64: List[float] = []
        for category_, weight_f64 in self.weights_dict_category_f64.items():
            if not isinstance(category_, Incident_Category):
                raise Invalid_Configuration(f"Unknown incident category {category_!r}.")
            if float(weight_f64) < 0.0:
                raise Invalid_Configuration(f"Weight for {category_.value} must be >= 0.")
            categories_list_category.append(category_)
            weights_list_f64.append(float(weight_f64))

        total_f64 = float(sum(weights_list_f64))
        if total_f64 <= 0.0:
            raise Invalid_Configuration("Category weights must sum to a positive value.")

        object.__setattr__(self, "_categories_list_category", categories_list_category)
        object.__setattr__(self, "_probabilities_arr_f64", np.asarray(weights_list_f64, dtype=float) / total_f64)

    def Probability(self, category: Incident_Category) -> float:
        if category not in self._categories_list_category:
            return 0.0
        return float(self._probabilities_arr_f64[self._categories_list_category.index(category)])

    def Sample(self, rng_generator: np.random.Generator) -> Incident_Category:
        idx_i32 = int(rng_generator.choice(len(self._categories_list_category), p=self._probabilities_arr_f64))
        return self._categories_list_category[idx_i32]


class Workload_Generator:
    """
    Poisson stream of incidents on the integer clock.

    Gaps are sampled in continuous time and floored onto the clock, so several
    incidents can share a report time. Every report time is strictly below
    until_time_i32.
    """

    def __init__(self, cfg_workload_config: Workload_Config) -> None:
        self.cfg_workload_config = cfg_workload_config
        self.interarrival_model  = Exponential_Interarrival(cfg_workload_config.lambda_rate_f64)
        self.duration_model      = Lognormal_Durations(
            mu_f64=cfg_workload_config.duration_logn_mu_f64,
            sigma_f64=cfg_workload_config.duration_logn_sigma_f64,
            min_duration_i32=cfg_workload_config.min_duration_i32,
        )
        self.category_mix        = Category_Mix(cfg_workload_config.category_weights)

    def Sample_Report_Times(self, rng_generator: np.random.Generator) -> List[int]:
        until_i32 = int(self.cfg_workload_config.until_time_i32)
        cap_i32_opt = self.cfg_workload_config.max_incidents_i32_opt

        report_times_list_i32: List[int] = []
        t_f64 = 0.0
        while True:
            if cap_i32_opt is not None and len(report_times_list_i32) >= int(cap_i32_opt):
                break
            t_f64 += self.interarrival_model.Sample(rng_generator)
            t_i32 = int(math.floor(t_f64))
            if t_i32 >= until_i32:
                break
            report_times_list_i32.append(t_i32)
        return report_times_list_i32

    def Generate(self, rng_generator: np.random.Generator) -> List[Incident]:
        incidents_list_incident: List[Incident] = []
        for report_time_i32 in self.Sample_Report_Times(rng_generator):
            incidents_list_incident.append(
                Incident(
                    report_time=int(report_time_i32),
                    category=self.category_mix.Sample(rng_generator),
                    duration=int(self.duration_model.Sample(rng_generator)),
                )
            )
        return incidents_list_incident


def Generate_Workload(cfg_workload_config: Workload_Config, seed_i32: int) -> List[Incident]:
    return Workload_Generator(cfg_workload_config).Generate(np.random.default_rng(seed_i32))
