# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: tests/test_dispatch_engine.py
#  Purpose: Tests for the dispatch engine loop and its invariants.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from collections import defaultdict

import numpy as np
import pytest

from Configurations import Dispatch_Config, Workload_Config
from Core.Dispatch_Engine import Dispatch_Engine, Engine_State
from Core.Errors import Dispatch_Error, Invalid_Configuration, Invalid_Incident
from Core.Events import Notification_Type
from Core.Incident import Incident
from Models.Categories import DEFAULT_SEVERITY_TABLE, Incident_Category, Severity_Table
from Models.Distributions import Generate_Workload
from Models.Policies import Fcfs_Policy
from Models.Scenarios import Saturation_Scenario, Staggered_Arrivals_Scenario


REPORT = Notification_Type.REPORT
DISPATCH = Notification_Type.DISPATCH
RESOLUTION = Notification_Type.RESOLUTION


def _run(incidents, recorder, units=4, **engine_kwargs):
    engine = Dispatch_Engine(Dispatch_Config(num_units_i32=units), listeners_seq_opt=[recorder], **engine_kwargs)
    for inc in incidents:
        engine.Submit(inc)
    agg = engine.Run()
    return engine, agg, recorder.notifications_list_notification


def _of_type(notifications, kind):
    return [n for n in notifications if n.notification_type == kind]


def _by_time(notifications, kind):
    out = defaultdict(list)
    for n in _of_type(notifications, kind):
        out[n.time].append(n)
    return out


# ===========================================================================
# Reference scenarios
# ===========================================================================

class TestStaggeredArrivals:
    """Four wellness checks on four units: nobody ever waits."""

    def test_each_report_dispatched_immediately(self, recorder):
        _, _, notes = _run(Staggered_Arrivals_Scenario(), recorder)
        dispatches = _of_type(notes, DISPATCH)
        assert [n.time for n in dispatches] == [0, 1, 2, 3]
        assert [n.Report_Time for n in dispatches] == [0, 1, 2, 3]
        assert len({n.Unit_Id for n in dispatches}) == 4

    def test_all_resolve_at_ten(self, recorder):
        _, _, notes = _run(Staggered_Arrivals_Scenario(), recorder)
        resolutions = _of_type(notes, RESOLUTION)
        assert len(resolutions) == 4
        assert {n.time for n in resolutions} == {10}

    def test_triage_empty_after_every_step(self, recorder):
        engine = Dispatch_Engine(Dispatch_Config(num_units_i32=4), listeners_seq_opt=[recorder])
        for inc in Staggered_Arrivals_Scenario():
            engine.Submit(inc)
        while engine.Step():
            assert engine.Triage_Length() == 0
        assert engine.state == Engine_State.DRAINED

    def test_aggregate(self, recorder):
        _, agg, _ = _run(Staggered_Arrivals_Scenario(), recorder)
        assert agg["n_reported"] == 4
        assert agg["n_resolved"] == 4
        assert agg["n_unresolved"] == 0
        assert agg["waiting_time"].mean_f64 == 0.0
        assert agg["end_time"] == 10.0
        assert agg["fleet_utilization"] == pytest.approx(34 / 40)


class TestSaturation:
    """Sixteen incidents arrive while every unit is busy."""

    def test_reports_at_five_to_eight_not_dispatched(self, recorder):
        _, _, notes = _run(Saturation_Scenario(), recorder)
        reports = _by_time(notes, REPORT)
        for t in (5, 6, 7, 8):
            assert len(reports[t]) == 4
        dispatch_times = {n.time for n in _of_type(notes, DISPATCH)}
        assert dispatch_times.isdisjoint({4, 5, 6, 7, 8, 9})

    def test_backlog_served_most_severe_first(self, recorder):
        _, _, notes = _run(Saturation_Scenario(), recorder)
        dispatches = _by_time(notes, DISPATCH)
        expected = {
            10: "murder",
            11: "robbery",
            12: "traffic collision",
            13: "wellness check",
        }
        for t, label in expected.items():
            batch = dispatches[t]
            assert len(batch) == 4
            assert {n.incident.category_label_str for n in batch} == {label}
            assert sorted(n.Report_Time for n in batch) == [5, 6, 7, 8]

    def test_murders_dispatched_in_report_order(self, recorder):
        _, _, notes = _run(Saturation_Scenario(), recorder)
        murders = _by_time(notes, DISPATCH)[10]
        assert [n.Report_Time for n in murders] == [5, 6, 7, 8]

    def test_resolutions_one_tick_after_dispatch(self, recorder):
        _, _, notes = _run(Saturation_Scenario(), recorder)
        resolutions = _by_time(notes, RESOLUTION)
        assert len(resolutions[10]) == 4
        for t in (11, 12, 13, 14):
            assert len(resolutions[t]) == 4
        assert max(n.time for n in notes) == 14

    def test_aggregate(self, recorder):
        _, agg, _ = _run(Saturation_Scenario(), recorder)
        assert agg["n_reported"] == 20
        assert agg["n_dispatched"] == 20
        assert agg["n_resolved"] == 20
        assert agg["n_waiting"] == 0
        assert agg["triage_len_max"] == 16
        assert agg["end_time"] == 14.0
        assert agg["waiting_time_by_category"]["murder"] == pytest.approx(3.5)
        assert agg["waiting_time_by_category"]["wellness_check"] == pytest.approx(3.25)


# ===========================================================================
# Invariants over every run
# ===========================================================================

def _workload_runs():
    cfg = Workload_Config(lambda_rate_f64=0.8, until_time_i32=200)
    return [Generate_Workload(cfg, seed) for seed in (1, 2, 3)]


class TestInvariants:
    @pytest.mark.parametrize("units", [1, 2, 4])
    def test_notification_times_non_decreasing(self, recorder, units):
        for incidents in _workload_runs()[:1]:
            _, _, notes = _run(incidents, recorder, units=units)
            times = [n.time for n in notes]
            assert times == sorted(times)

    def test_every_dispatch_resolved_once(self, recorder):
        _, _, notes = _run(_workload_runs()[1], recorder, units=3)
        dispatched = {n.incident.incident_id_i32_opt: n for n in _of_type(notes, DISPATCH)}
        resolved = {}
        for n in _of_type(notes, RESOLUTION):
            assert n.incident.incident_id_i32_opt not in resolved
            resolved[n.incident.incident_id_i32_opt] = n
        assert dispatched.keys() == resolved.keys()
        for iid, d in dispatched.items():
            r = resolved[iid]
            assert r.time == d.time + d.incident.duration
            assert r.Unit_Id == d.Unit_Id

    def test_unit_never_double_booked(self, recorder):
        _, _, notes = _run(_workload_runs()[2], recorder, units=2)
        busy = set()
        for n in notes:
            if n.notification_type == DISPATCH:
                assert n.Unit_Id not in busy
                busy.add(n.Unit_Id)
            elif n.notification_type == RESOLUTION:
                busy.remove(n.Unit_Id)
        assert busy == set()

    def test_each_dispatch_takes_best_waiting_incident(self, recorder):
        engine, _, notes = _run(_workload_runs()[0], recorder, units=2)
        waiting = {}
        for n in notes:
            iid = n.incident.incident_id_i32_opt
            if n.notification_type == REPORT:
                waiting[iid] = n.incident
            elif n.notification_type == DISPATCH:
                best = min(
                    (DEFAULT_SEVERITY_TABLE.Rank(s.category), s.report_time) for s in waiting.values()
                )
                assert (DEFAULT_SEVERITY_TABLE.Rank(n.incident.category), n.Report_Time) == best
                del waiting[iid]
        assert waiting == {}

    def test_dispatch_never_before_report(self, recorder):
        _, _, notes = _run(_workload_runs()[1], recorder, units=1)
        for n in _of_type(notes, DISPATCH):
            assert n.time >= n.Report_Time


# ===========================================================================
# Edge cases
# ===========================================================================

class TestEdgeCases:
    def test_empty_run_emits_nothing(self, recorder):
        engine, agg, notes = _run([], recorder)
        assert notes == []
        assert agg["n_reported"] == 0
        assert engine.state == Engine_State.DRAINED
        assert engine.now == 0

    def test_single_unit_single_incident(self, recorder):
        inc = Incident(report_time=2, category=Incident_Category.ROBBERY, duration=3)
        _, _, notes = _run([inc], recorder, units=1)
        assert [(n.notification_type, n.time) for n in notes] == [
            (REPORT, 2),
            (DISPATCH, 2),
            (RESOLUTION, 5),
        ]
        assert notes[1].Unit_Id == 0
        assert notes[1].Resolution_Time == 5

    def test_single_unit_serialises_work(self, recorder):
        incidents = [Incident(report_time=0, category=Incident_Category.WELLNESS_CHECK, duration=2) for _ in range(3)]
        _, agg, notes = _run(incidents, recorder, units=1)
        assert [n.time for n in _of_type(notes, DISPATCH)] == [0, 2, 4]
        assert agg["end_time"] == 6.0

    def test_fcfs_policy_ignores_severity(self, recorder):
        incidents = [
            Incident(report_time=0, category=Incident_Category.WELLNESS_CHECK, duration=5),
            Incident(report_time=1, category=Incident_Category.WELLNESS_CHECK, duration=1),
            Incident(report_time=2, category=Incident_Category.MURDER, duration=1),
        ]
        _, _, notes = _run(incidents, recorder, units=1, policy_triage_policy_opt=Fcfs_Policy())
        labels = [n.incident.category_label_str for n in _of_type(notes, DISPATCH)]
        assert labels == ["wellness check", "wellness check", "murder"]

    def test_severity_first_overtakes_earlier_reports(self, recorder):
        incidents = [
            Incident(report_time=0, category=Incident_Category.WELLNESS_CHECK, duration=5),
            Incident(report_time=1, category=Incident_Category.WELLNESS_CHECK, duration=1),
            Incident(report_time=2, category=Incident_Category.MURDER, duration=1),
        ]
        _, _, notes = _run(incidents, recorder, units=1)
        labels = [n.incident.category_label_str for n in _of_type(notes, DISPATCH)]
        assert labels == ["wellness check", "murder", "wellness check"]

    def test_plain_callable_listener(self):
        seen = []
        engine = Dispatch_Engine.With_Units(1)
        engine.Subscribe(seen.append)
        engine.Submit(Incident(report_time=0, category=Incident_Category.MURDER, duration=1))
        engine.Run()
        assert [n.notification_type for n in seen] == [REPORT, DISPATCH, RESOLUTION]

    def test_resubmit_after_drain(self, recorder):
        engine = Dispatch_Engine(Dispatch_Config(num_units_i32=1), listeners_seq_opt=[recorder])
        engine.Submit(Incident(report_time=0, category=Incident_Category.ROBBERY, duration=2))
        engine.Run()
        engine.Submit(Incident(report_time=5, category=Incident_Category.ROBBERY, duration=2))
        assert engine.state == Engine_State.IDLE
        engine.Run()
        assert engine.now == 7
        assert len(_of_type(recorder.notifications_list_notification, RESOLUTION)) == 2

    def test_auto_assigned_ids_unique(self, recorder):
        _, _, notes = _run(Saturation_Scenario(), recorder)
        ids = {n.incident.incident_id_i32_opt for n in _of_type(notes, REPORT)}
        assert len(ids) == 20

    def test_waiting_incidents_in_triage_order(self):
        engine = Dispatch_Engine.With_Units(4)
        for inc in Saturation_Scenario():
            engine.Submit(inc)
        while engine.now < 8 or engine.Pending_Events() > 4:
            engine.Step()
        waiting = engine.Waiting_Incidents()
        assert len(waiting) == 16
        assert [s.category_label_str for s in waiting[:4]] == ["murder"] * 4
        assert [s.report_time for s in waiting[:4]] == [5, 6, 7, 8]
        assert engine.Units.Busy_Count() == 4


# ===========================================================================
# Error taxonomy
# ===========================================================================

class TestErrors:
    @pytest.mark.parametrize("units", [0, -3])
    def test_needs_a_unit(self, units):
        with pytest.raises(Invalid_Configuration):
            Dispatch_Engine.With_Units(units)

    def test_negative_report_time(self):
        with pytest.raises(Invalid_Incident):
            Dispatch_Engine.With_Units(1).Submit(Incident(report_time=-1, category=Incident_Category.MURDER, duration=1))

    def test_non_positive_duration(self):
        with pytest.raises(Invalid_Incident):
            Dispatch_Engine.With_Units(1).Submit(Incident(report_time=0, category=Incident_Category.MURDER, duration=0))

    def test_already_dispatched_incident(self):
        inc = Incident(report_time=0, category=Incident_Category.MURDER, duration=1)
        inc.Mark_Dispatched(0, 0)
        with pytest.raises(Invalid_Incident):
            Dispatch_Engine.With_Units(1).Submit(inc)

    def test_duplicate_submission(self):
        engine = Dispatch_Engine.With_Units(1)
        inc = Incident(report_time=0, category=Incident_Category.MURDER, duration=1)
        engine.Submit(inc)
        with pytest.raises(Invalid_Incident):
            engine.Submit(inc)
        assert engine.Pending_Events() == 1

    def test_unknown_category(self):
        table = Severity_Table({Incident_Category.MURDER: 0})
        engine = Dispatch_Engine(Dispatch_Config(num_units_i32=1), severity_table_severity_table=table)
        with pytest.raises(Invalid_Incident):
            engine.Submit(Incident(report_time=0, category=Incident_Category.ROBBERY, duration=1))

    def test_report_time_before_clock(self):
        engine = Dispatch_Engine.With_Units(1)
        engine.Submit(Incident(report_time=5, category=Incident_Category.MURDER, duration=1))
        engine.Run()
        with pytest.raises(Invalid_Incident):
            engine.Submit(Incident(report_time=3, category=Incident_Category.MURDER, duration=1))

    def test_report_time_beyond_horizon(self):
        engine = Dispatch_Engine(Dispatch_Config(num_units_i32=1, time_horizon_i32_opt=10))
        with pytest.raises(Invalid_Incident):
            engine.Submit(Incident(report_time=10, category=Incident_Category.MURDER, duration=1))
        engine.Submit(Incident(report_time=9, category=Incident_Category.MURDER, duration=1))

    def test_horizon_policy_rejects_out_of_range(self):
        engine = Dispatch_Engine(Dispatch_Config(num_units_i32=1, policy_name_str="horizon_encoded", time_horizon_i32_opt=50))
        with pytest.raises(Invalid_Incident):
            engine.Submit(Incident(report_time=60, category=Incident_Category.MURDER, duration=1))

    def test_run_not_reentrant(self):
        engine = Dispatch_Engine.With_Units(1)

        def reenter(_notification):
            engine.Run()

        engine.Subscribe(reenter)
        engine.Submit(Incident(report_time=0, category=Incident_Category.MURDER, duration=1))
        with pytest.raises(Dispatch_Error):
            engine.Run()

    def test_all_errors_share_base(self):
        for exc in (Invalid_Configuration, Invalid_Incident):
            assert issubclass(exc, Dispatch_Error)

    def test_dispatch_time_without_unit_rejected_before_queueing(self):
        engine = Dispatch_Engine.With_Units(1)
        inc = Incident(report_time=0, category=Incident_Category.MURDER, duration=1, incident_id_i32_opt=7)
        inc.dispatch_time_i32_opt = 0
        with pytest.raises(Invalid_Incident, match="dispatch state"):
            engine.Submit(inc)
        assert engine.Pending_Events() == 0
        engine.Run()
        assert engine.Units.Busy_Count() == 0

    def test_dispatch_time_without_unit_or_id_rejected(self):
        inc = Incident(report_time=0, category=Incident_Category.MURDER, duration=1)
        inc.dispatch_time_i32_opt = 0
        with pytest.raises(Invalid_Incident, match="dispatch state"):
            Dispatch_Engine.With_Units(1).Submit(inc)

    def test_unit_without_dispatch_time_rejected(self):
        inc = Incident(report_time=0, category=Incident_Category.MURDER, duration=1)
        inc.unit_id_i32_opt = 3
        with pytest.raises(Invalid_Incident):
            Dispatch_Engine.With_Units(1).Submit(inc)


class TestNumpyInputs:
    def test_numpy_integer_incident_runs(self, recorder):
        inc = Incident(report_time=np.int64(3), category=Incident_Category.MURDER, duration=np.int64(2))
        _, agg, notes = _run([inc], recorder, units=1)
        assert [(n.notification_type, n.time) for n in notes] == [
            (REPORT, 3),
            (DISPATCH, 3),
            (RESOLUTION, 5),
        ]
        assert agg["n_resolved"] == 1
