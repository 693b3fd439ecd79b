"""
Log Metric Filters
===================
Pattern alarms watch a metric fed by two CloudWatch Logs metric
filters on the function's log group: one writes 1 for every line
matching the pattern, the other writes 0 for every line, so the
metric has datapoints even while nothing matches.
"""

from typing import Any, Dict

from function_alerts.naming import log_metric_filter_logical_id, pattern_metric_name
from function_alerts.service import FunctionContext


def _metric_filter(
    pattern: str, value: int, context: FunctionContext, namespace: str, metric_name: str
) -> Dict[str, Any]:
    return {
        "Type": "AWS::Logs::MetricFilter",
        "DependsOn": context.log_group_logical_id,
        "Properties": {
            "FilterPattern": pattern,
            "LogGroupName": context.log_group_name,
            "MetricTransformations": [
                {
                    "MetricValue": value,
                    "MetricNamespace": namespace,
                    "MetricName": metric_name,
                }
            ],
        },
    }


def build_log_metric_filters(
    alarm: Dict[str, Any], context: FunctionContext, stack_name: str
) -> Dict[str, Dict[str, Any]]:
    """ALERT and OK metric filters for a pattern alarm; empty for any other alarm."""
    if not alarm.get("pattern"):
        return {}

    base_id = log_metric_filter_logical_id(context.logical_id, alarm["name"])
    metric_name = pattern_metric_name(alarm.get("metric") or "", context.logical_id)

    return {
        f"{base_id}ALERT": _metric_filter(alarm["pattern"], 1, context, stack_name, metric_name),
        f"{base_id}OK": _metric_filter("", 0, context, stack_name, metric_name),
    }
