"""
Resource Naming
================
Deterministic logical ids and alarm names. Every function here is pure,
so repeated compiles of the same configuration yield the same ids.
"""

from typing import Any, Dict, List, Optional

DEFAULT_PREFIX_TEMPLATE = "$[stackName]"
DEFAULT_NAME_TEMPLATE = "$[functionName]-$[metricName]"


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def normalize_name(name: str) -> str:
    """Make ``name`` usable inside a logical id (``my-fn_a`` → ``MyDashfnUnderscorea``)."""
    return upper_first(name.replace("-", "Dash").replace("_", "Underscore"))


def alarm_logical_id(alarm_name: str, function_name: str) -> str:
    return f"{normalize_name(function_name)}{normalize_name(alarm_name)}Alarm"


def log_metric_filter_logical_id(function_ref: str, alarm_name: str) -> str:
    return f"{function_ref}{upper_first(alarm_name)}LogMetricFilter"


def pattern_metric_name(metric_name: str, function_ref: str) -> str:
    """Metric written by the log metric filters of a pattern alarm."""
    return f"{upper_first(metric_name)}{function_ref}"


def topic_logical_id(severity: str, group: Optional[str] = None) -> str:
    return f"AwsAlerts{upper_first(group) if group else ''}{upper_first(severity)}"


def composite_logical_id(definition_name: str) -> str:
    return f"AlertsComposite{upper_first(definition_name)}"


def composite_alarm_name(service: str, stage: str, region: str, definition_name: str) -> str:
    return f"{service}-{stage}-{region}-{upper_first(definition_name)}"


def dashboard_logical_id(template: str) -> str:
    return "AlertsDashboard" if template == "default" else f"AlertsDashboard{template}"


def dashboard_name(service: str, stage: str, region: str, template: str) -> str:
    base = f"{service}-{stage}-{region}"
    return base if template == "default" else f"{base}-{template}"


def dimensions_list(
    dimensions: Optional[List[Dict[str, Any]]],
    function_ref: str,
    omit_default_dimension: bool = False,
) -> List[Dict[str, Any]]:
    """
    Build the alarm dimensions for a function.

    Unless ``omit_default_dimension`` is set, any declared ``FunctionName``
    dimension is dropped and one pointing at the function resource is
    appended.
    """
    if omit_default_dimension:
        return list(dimensions or [])

    filtered = [dim for dim in (dimensions or []) if dim.get("Name") != "FunctionName"]
    filtered.append({"Name": "FunctionName", "Value": {"Ref": function_ref}})
    return filtered


def render_alarm_name(
    template: str,
    prefix_template: Optional[str],
    function_name: str,
    function_logical_id: str,
    metric_name: str,
    metric_id: str,
    stack_name: str,
) -> str:
    """
    Interpolate an alarm name template.

    Supported variables: ``$[functionName]``, ``$[functionId]`` (also
    spelled ``$[functionLogicalId]``), ``$[metricName]``, ``$[metricId]``
    and ``$[stackName]``. The prefix defaults to ``$[stackName]``; an
    empty prefix disables it.
    """
    variables = {
        "functionName": function_name,
        "functionId": function_logical_id,
        "functionLogicalId": function_logical_id,
        "metricName": metric_name,
        "metricId": metric_id,
        "stackName": stack_name,
    }

    def interpolate(text: str) -> str:
        for key, value in variables.items():
            text = text.replace(f"$[{key}]", str(value))
        return text

    name = interpolate(template)
    if prefix_template is None:
        prefix_template = DEFAULT_PREFIX_TEMPLATE
    prefix = interpolate(prefix_template)
    return f"{prefix}-{name}" if prefix else name
