"""
CloudWatch Alarms
==================
Builds the ``AWS::CloudWatch::Alarm`` declaration for one resolved
alarm on one function. Three shapes are supported:

- ``static``            plain metric threshold
- ``anomalyDetection``  threshold band from ANOMALY_DETECTION_BAND
- ``successRate``       metric math over Errors / Invocations
"""

from typing import Any, Dict, List, Optional

from function_alerts.definitions.defaults import LAMBDA_NAMESPACE
from function_alerts.errors import InvalidTopicReference, UnsupportedAlarmType
from function_alerts.naming import (
    DEFAULT_NAME_TEMPLATE,
    dimensions_list,
    pattern_metric_name,
    render_alarm_name,
)
from function_alerts.sns.notifications import SEVERITIES

STANDARD_STATISTICS = ("SampleCount", "Average", "Sum", "Minimum", "Maximum")

# Alarm spec key holding the topic groups for each severity
ACTION_OVERRIDES = {
    "ok": "okActions",
    "alarm": "alarmActions",
    "insufficientData": "insufficientDataActions",
}


def _compact(properties: Dict[str, Any]) -> Dict[str, Any]:
    """Drop properties that were not configured."""
    return {key: value for key, value in properties.items() if value is not None}


def collect_actions(alert_topics: Dict[str, Any], spec: Dict[str, Any]) -> Dict[str, List[Any]]:
    """
    Action list per severity: the ungrouped topic first, then the topics
    of every group named in the spec's action overrides.

    Raises
    ------
    InvalidTopicReference
        An override names a group, or a severity within a group, that has
        no topic.
    """
    actions: Dict[str, List[Any]] = {}
    for severity in SEVERITIES:
        severity_actions = []
        default_topic = alert_topics.get(severity)
        if default_topic:
            severity_actions.append(default_topic)

        for group in spec.get(ACTION_OVERRIDES[severity]) or []:
            group_topics = alert_topics.get(group)
            if not isinstance(group_topics, dict) or severity not in group_topics:
                raise InvalidTopicReference(group, severity, spec.get("name"))
            severity_actions.append(group_topics[severity])

        actions[severity] = severity_actions
    return actions


def _static_properties(spec: Dict[str, Any], metric: Dict[str, Any]) -> Dict[str, Any]:
    properties = {
        "Namespace": metric["namespace"],
        "MetricName": metric["metric_id"],
        "Threshold": spec.get("threshold"),
        "Period": spec.get("period"),
        "Dimensions": metric["dimensions"],
    }
    statistic = spec.get("statistic")
    if statistic in STANDARD_STATISTICS:
        properties["Statistic"] = statistic
    else:
        properties["ExtendedStatistic"] = statistic
        properties["EvaluateLowSampleCountPercentile"] = spec.get("evaluateLowSampleCountPercentile")
    return properties


def _anomaly_detection_properties(spec: Dict[str, Any], metric: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "Metrics": [
            {
                "Id": "m1",
                "ReturnData": True,
                "MetricStat": {
                    "Metric": {
                        "Namespace": metric["namespace"],
                        "MetricName": metric["metric_id"],
                        "Dimensions": metric["dimensions"],
                    },
                    "Period": spec.get("period"),
                    "Stat": spec.get("statistic"),
                },
            },
            {
                "Id": "ad1",
                "Expression": f"ANOMALY_DETECTION_BAND(m1, {spec.get('threshold')})",
                "Label": f"{metric['metric_id']} (expected)",
                "ReturnData": True,
            },
        ],
        "ThresholdMetricId": "ad1",
    }


def _success_rate_properties(spec: Dict[str, Any], metric: Dict[str, Any]) -> Dict[str, Any]:
    namespace = metric["namespace"] or LAMBDA_NAMESPACE

    def lambda_sum(metric_id: str, metric_name: str) -> Dict[str, Any]:
        return {
            "Id": metric_id,
            "ReturnData": False,
            "MetricStat": {
                "Metric": {
                    "Namespace": namespace,
                    "MetricName": metric_name,
                    "Dimensions": metric["dimensions"],
                },
                "Period": spec.get("period"),
                "Stat": "Sum",
            },
        }

    return {
        "Metrics": [
            lambda_sum("errors", "Errors"),
            lambda_sum("count", "Invocations"),
            {
                "Id": "successRate",
                "Expression": "( 1 - (errors / count) ) * 100",
                "ReturnData": True,
            },
        ],
        "Threshold": spec.get("threshold"),
    }


SHAPE_BUILDERS = {
    "static": _static_properties,
    "anomalyDetection": _anomaly_detection_properties,
    "successRate": _success_rate_properties,
}


def build_alarm(
    alert_topics: Dict[str, Any],
    spec: Dict[str, Any],
    function_name: str,
    function_ref: Optional[str],
    stack_name: str,
) -> Optional[Dict[str, Any]]:
    """
    Build the alarm resource for ``spec`` attached to ``function_name``.

    Parameters
    ----------
    alert_topics : dict
        Action-topic table from ``compile_alert_topics``.
    spec : dict
        Resolved alarm spec.
    function_name : str
        Function key in the service.
    function_ref : str
        Logical id of the function resource. Nothing is built without it.
    stack_name : str
        Deployment stack name, the namespace of pattern metrics.

    Raises
    ------
    UnsupportedAlarmType
        ``spec["type"]`` is not one of the buildable shapes.
    InvalidTopicReference
        An action override points at a missing topic.
    """
    if not function_ref:
        return None

    shape_builder = SHAPE_BUILDERS.get(spec.get("type"))
    if shape_builder is None:
        raise UnsupportedAlarmType(spec.get("name"), spec.get("type"), function_name)

    actions = collect_actions(alert_topics, spec)
    is_pattern = bool(spec.get("pattern"))
    metric = {
        "namespace": stack_name if is_pattern else spec.get("namespace"),
        "metric_id": pattern_metric_name(spec.get("metric") or "", function_ref) if is_pattern else spec.get("metric"),
        "dimensions": [] if is_pattern else dimensions_list(
            spec.get("dimensions"), function_ref, spec.get("omitDefaultDimension", False)
        ),
    }

    properties = {
        "ActionsEnabled": spec.get("actionsEnabled"),
        "AlarmDescription": spec.get("description"),
        "EvaluationPeriods": spec.get("evaluationPeriods"),
        "DatapointsToAlarm": spec.get("datapointsToAlarm"),
        "ComparisonOperator": spec.get("comparisonOperator"),
        "TreatMissingData": spec.get("treatMissingData") or "missing",
        "OKActions": actions["ok"],
        "AlarmActions": actions["alarm"],
        "InsufficientDataActions": actions["insufficientData"],
    }
    properties.update(shape_builder(spec, metric))

    alarm_name = resolve_alarm_name(spec, function_name, function_ref, metric["metric_id"], stack_name)
    if alarm_name:
        properties["AlarmName"] = alarm_name

    return {
        "Type": "AWS::CloudWatch::Alarm",
        "Properties": _compact(properties),
    }


def resolve_alarm_name(
    spec: Dict[str, Any],
    function_name: str,
    function_ref: str,
    metric_id: str,
    stack_name: str,
) -> Optional[str]:
    """Physical alarm name, or None to let CloudFormation generate one."""
    if spec.get("nameTemplate"):
        template = spec["nameTemplate"]
        metric_name = spec.get("metric")
    elif spec.get("prefixTemplate"):
        template = DEFAULT_NAME_TEMPLATE
        metric_name = spec.get("name") or spec.get("metric")
    else:
        return None

    return render_alarm_name(
        template=template,
        prefix_template=spec.get("prefixTemplate"),
        function_name=function_name,
        function_logical_id=function_ref,
        metric_name=metric_name,
        metric_id=metric_id,
        stack_name=stack_name,
    )
