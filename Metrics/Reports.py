# =============================================================================
#  EMERGENCY UNIT DISPATCH SIMULATION (EUDS)
#  Product Signature: EUDS
# ------------------------------------------------------------------------------
#  File: Metrics/Reports.py
#  Purpose: Format notifications and aggregated metrics into report strings.
#  Author: Muhammet Ali Ozturk
#  Generated: 2026-10-19
#  Environment: Python 3.9.13
# =============================================================================

from typing import Any, Callable, Dict, List

from Core.Events import Notification, Notification_Type
from Metrics.Collector import SummaryStats


def _Fmt_Float(x_any: Any, nd_i32: int = 4) -> str:
    if x_any is None:
        return "NA"

    if isinstance(x_any, float):
        if x_any != x_any:
            return "NA"
        return f"{x_any:.{nd_i32}f}"

    return str(x_any)


def Format_Notification(notification: Notification) -> str:
    snapshot_ = notification.incident
    label_str = snapshot_.category_label_str

    if notification.notification_type == Notification_Type.REPORT:
        return f"Time {notification.time}: {label_str} reported (duration: {snapshot_.duration})"

    if notification.notification_type == Notification_Type.DISPATCH:
        return (
            f"Time {notification.time}: unit {snapshot_.unit_id_i32_opt} dispatched to the {label_str} "
            f"reported at time {snapshot_.report_time}; will be resolved at time {snapshot_.Resolution_Time}"
        )

    if notification.notification_type == Notification_Type.RESOLUTION:
        return (
            f"Time {notification.time}: unit {snapshot_.unit_id_i32_opt} resolved the {label_str} "
            f"reported at time {snapshot_.report_time}"
        )

    raise ValueError(f"Unknown notification type: {notification.notification_type}")


class Console_Notification_Logger:
    """
    Prints one line per notification, in emission order.
    """

    def __init__(self, writer_callable: Callable[[str], None] = print) -> None:
        self.writer_callable = writer_callable
        self.lines_list_str: List[str] = []

    def On_Notification(self, notification: Notification) -> None:
        line_str = Format_Notification(notification)
        self.lines_list_str.append(line_str)
        self.writer_callable(line_str)


def Format_Summary(agg_dict_obj: Dict[str, object]) -> str:
    wait_summary_stats: SummaryStats = agg_dict_obj.get("waiting_time")
    resp_summary_stats: SummaryStats = agg_dict_obj.get("response_time")

    lines_list_str = []
    lines_list_str.append("=== Dispatch Simulation Summary ===")
    lines_list_str.append(f"Reported:            {agg_dict_obj.get('n_reported')}")
    lines_list_str.append(f"Dispatched:          {agg_dict_obj.get('n_dispatched')}")
    lines_list_str.append(f"Resolved:            {agg_dict_obj.get('n_resolved')}")
    lines_list_str.append(f"Still waiting:       {agg_dict_obj.get('n_waiting')}")
    lines_list_str.append(f"Unresolved:          {agg_dict_obj.get('n_unresolved')}")
    lines_list_str.append(f"End time:            {_Fmt_Float(agg_dict_obj.get('end_time'), 0)}")
    lines_list_str.append("")

    lines_list_str.append("Waiting time (report -> dispatch, resolved only):")
    lines_list_str.append(
        f"  n={wait_summary_stats.count_i32} "
        f"mean={_Fmt_Float(wait_summary_stats.mean_f64)} "
        f"p50={_Fmt_Float(wait_summary_stats.p50_f64)} "
        f"p90={_Fmt_Float(wait_summary_stats.p90_f64)} "
        f"p99={_Fmt_Float(wait_summary_stats.p99_f64)}"
    )

    lines_list_str.append("Response time (report -> resolution, resolved only):")
    lines_list_str.append(
        f"  n={resp_summary_stats.count_i32} "
        f"mean={_Fmt_Float(resp_summary_stats.mean_f64)} "
        f"p50={_Fmt_Float(resp_summary_stats.p50_f64)} "
        f"p90={_Fmt_Float(resp_summary_stats.p90_f64)} "
        f"p99={_Fmt_Float(resp_summary_stats.p99_f64)}"
    )
    lines_list_str.append("")

    by_category_dict_obj = agg_dict_obj.get("waiting_time_by_category") or {}
    if by_category_dict_obj:
        lines_list_str.append("Mean waiting time by category:")
        for category_str, mean_f64 in by_category_dict_obj.items():
            lines_list_str.append(f"  {category_str:<20} {_Fmt_Float(mean_f64)}")
        lines_list_str.append("")

    lines_list_str.append(f"Triage length mean:  {_Fmt_Float(agg_dict_obj.get('triage_len_mean'))}")
    lines_list_str.append(f"Triage length p90:   {_Fmt_Float(agg_dict_obj.get('triage_len_p90'))}")
    lines_list_str.append(f"Triage length max:   {agg_dict_obj.get('triage_len_max')}")
    lines_list_str.append(f"Fleet utilization:   {_Fmt_Float(agg_dict_obj.get('fleet_utilization'))}")

    return "\n".join(lines_list_str)
