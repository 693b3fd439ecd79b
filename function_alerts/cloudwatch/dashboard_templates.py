"""
CloudWatch Dashboard Templates
===============================
Dashboard bodies for the functions of a service. Each template is a
layout over the same Lambda metric widgets:

- ``default``   two-column grid
- ``vertical``  one full-width widget per row
"""

from typing import Any, Dict, List

from function_alerts.definitions.defaults import LAMBDA_NAMESPACE
from function_alerts.errors import UnknownDashboardTemplate

# (metric name, statistic, widget title)
LAMBDA_WIDGET_METRICS = [
    ("Invocations", "Sum", "Invocations"),
    ("Errors", "Sum", "Errors"),
    ("Throttles", "Sum", "Throttles"),
    ("Duration", "Average", "Duration (ms)"),
    ("ConcurrentExecutions", "Maximum", "Concurrent Executions"),
]

DASHBOARD_TEMPLATES = {
    "default": {"columns": 2, "width": 12, "height": 6},
    "vertical": {"columns": 1, "width": 24, "height": 6},
}

WIDGET_PERIOD = 300


def _metric_widget(
    metric_name: str,
    stat: str,
    title: str,
    deployed_names: List[str],
    region: str,
) -> Dict[str, Any]:
    return {
        "type": "metric",
        "properties": {
            "title": title,
            "metrics": [
                [LAMBDA_NAMESPACE, metric_name, "FunctionName", name, {"label": name}]
                for name in deployed_names
            ],
            "period": WIDGET_PERIOD,
            "stat": stat,
            "view": "timeSeries",
            "stacked": False,
            "region": region,
        },
    }


def create_dashboard(
    service: str,
    stage: str,
    region: str,
    functions: List[Dict[str, Any]],
    template: str,
) -> Dict[str, Any]:
    """
    Render the dashboard body for ``template``.

    Parameters
    ----------
    functions : list
        ``[{"name": <function key>}, ...]``; the deployed name of each
        function is ``<service>-<stage>-<name>``.

    Raises
    ------
    UnknownDashboardTemplate
        ``template`` has no layout.
    """
    layout = DASHBOARD_TEMPLATES.get(template)
    if layout is None:
        raise UnknownDashboardTemplate(template)

    deployed_names = [f"{service}-{stage}-{f['name']}" for f in functions]

    widgets = []
    for index, (metric_name, stat, title) in enumerate(LAMBDA_WIDGET_METRICS):
        widget = _metric_widget(metric_name, stat, title, deployed_names, region)
        widget.update({
            "x": (index % layout["columns"]) * layout["width"],
            "y": (index // layout["columns"]) * layout["height"],
            "width": layout["width"],
            "height": layout["height"],
        })
        widgets.append(widget)

    return {"start": "-PT6H", "widgets": widgets}
