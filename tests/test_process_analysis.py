# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: tests/test_process_analysis.py
#  Purpose: Tests for plugin-based post-run analysis.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

import numpy as np
import pytest

from Analysis.Process_Analysis import (
    Artifacts_From_Collector,
    Full_Summary_Stats_Plugin,
    Process_Analyzer,
    Simulation_Artifacts,
    Timeline_Series,
    _Locf_Resample,
)
from Configurations import Workload_Config
from Core.Dispatch_Engine import Dispatch_Engine
from Models.Distributions import Generate_Workload
from Models.Scenarios import Saturation_Scenario, Staggered_Arrivals_Scenario


def _artifacts(incidents, units=4):
    engine = Dispatch_Engine.With_Units(units)
    for inc in incidents:
        engine.Submit(inc)
    agg = engine.Run()
    return Artifacts_From_Collector(engine.Metrics, agg)


class TestHelpers:
    def test_locf_resample(self):
        src_t = np.array([0.0, 2.0, 5.0])
        src_v = np.array([1.0, 3.0, 0.0])
        out = _Locf_Resample(src_t, src_v, np.array([0.0, 1.0, 2.0, 4.9, 5.0, 9.0]))
        assert out.tolist() == [1.0, 1.0, 3.0, 3.0, 0.0, 0.0]

    def test_timeline_length_mismatch(self):
        with pytest.raises(ValueError):
            Timeline_Series([0, 1], [1]).As_Arrays()


class TestAnalyzer:
    def test_default_plugins_run(self, tmp_path):
        results = Process_Analyzer(results_path_str=str(tmp_path)).Analyze(
            _artifacts(Saturation_Scenario()), make_plots_bool=False
        )
        assert results["plugins"] == [
            "triage_density_plot",
            "waiting_times_by_category",
            "fleet_utilization",
            "idle_unit_anomaly",
            "full_summary_stats",
        ]
        assert list(tmp_path.iterdir()) == []

    def test_triage_density(self):
        results = Process_Analyzer().Analyze(_artifacts(Saturation_Scenario()), make_plots_bool=False)
        density = results["triage_density_plot"]
        assert density["triage_density_plot_available"]
        assert density["triage_length_max_sampled"] == 16.0

    def test_waiting_by_category(self):
        results = Process_Analyzer().Analyze(_artifacts(Saturation_Scenario()), make_plots_bool=False)
        by_cat = results["waiting_times_by_category"]
        assert by_cat["murder"].count_i32 == 4
        assert by_cat["murder"].mean_f64 == pytest.approx(3.5)
        assert by_cat["robbery"].mean_f64 == pytest.approx(4.5)

    def test_time_weighted_utilization_matches_collector(self):
        results = Process_Analyzer().Analyze(_artifacts(Staggered_Arrivals_Scenario()), make_plots_bool=False)
        util = results["fleet_utilization"]
        assert util["time_weighted_utilization"] == pytest.approx(0.85)
        assert util["peak_busy_units"] == 4
        assert results["full_summary_stats"]["fleet_utilization"] == pytest.approx(0.85)

    @pytest.mark.parametrize("units", [1, 3])
    def test_no_idle_unit_while_backlog(self, units):
        incidents = Generate_Workload(Workload_Config(lambda_rate_f64=0.5, until_time_i32=300), 9)
        results = Process_Analyzer().Analyze(_artifacts(incidents, units=units), make_plots_bool=False)
        anomaly = results["idle_unit_anomaly"]
        assert anomaly["idle_unit_anomaly_available"]
        assert anomaly["idle_with_backlog_time"] == 0.0

    def test_missing_timelines(self):
        artifacts = Simulation_Artifacts(aggregate={}, resolved_incidents=[], num_units_i32=2)
        results = Process_Analyzer().Analyze(artifacts, make_plots_bool=True)
        assert results["triage_density_plot"] == {"triage_density_plot_available": False}
        assert not results["idle_unit_anomaly"]["idle_unit_anomaly_available"]
        assert results["waiting_times_by_category"] == {}

    def test_plots_written(self, tmp_path):
        Process_Analyzer(results_path_str=str(tmp_path)).Analyze(_artifacts(Saturation_Scenario()))
        names = {p.name for p in tmp_path.iterdir()}
        assert names == {"triage_density_plot.png", "waiting_time_by_category.png", "busy_units_plot.png"}

    def test_custom_plugin_list(self):
        results = Process_Analyzer(plugins_seq_opt=[Full_Summary_Stats_Plugin()]).Analyze(
            _artifacts(Staggered_Arrivals_Scenario()), make_plots_bool=False
        )
        assert results["plugins"] == ["full_summary_stats"]
        assert results["full_summary_stats"]["n_resolved_observed"] == 4
