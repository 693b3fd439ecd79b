"""
CloudWatch Dashboards
======================
Resolves which dashboard templates apply to the current stage and
emits one ``AWS::CloudWatch::Dashboard`` per template.

The ``dashboards`` setting accepts::

    dashboards: true                 # the default template
    dashboards: vertical             # one named template
    dashboards: [default, vertical]  # several
    dashboards:
      stages: [prod]                 # only on these stages
      templates: [default]
"""

import json
import logging
from typing import Any, Dict, List

from function_alerts.cloudwatch.dashboard_templates import create_dashboard
from function_alerts.document import ResourceDocument
from function_alerts.naming import dashboard_logical_id, dashboard_name
from function_alerts.service import Deployment

logger = logging.getLogger(__name__)


def get_dashboard_templates(config_dashboards: Any, stage: str) -> List[str]:
    if isinstance(config_dashboards, bool):
        return ["default"]
    if isinstance(config_dashboards, str):
        return [config_dashboards]
    if isinstance(config_dashboards, dict) and config_dashboards.get("stages") is not None:
        if stage not in config_dashboards["stages"]:
            logger.info("Not deploying dashboards on stage %s", stage)
            return []
        templates = config_dashboards.get("templates")
        if templates is not None:
            return list(templates) if isinstance(templates, list) else [templates]
        return ["default"]
    if isinstance(config_dashboards, list):
        return list(config_dashboards)
    return [config_dashboards]


def compile_dashboards(
    config_dashboards: Any,
    deployment: Deployment,
    function_names: List[str],
    document: ResourceDocument,
) -> None:
    """Render every distinct template for the stage and merge the dashboards into ``document``."""
    templates = get_dashboard_templates(config_dashboards, deployment.stage)
    functions = [{"name": name} for name in function_names]

    resources: Dict[str, Any] = {}
    for template in dict.fromkeys(templates):
        body = create_dashboard(
            deployment.service, deployment.stage, deployment.region, functions, template
        )
        resources[dashboard_logical_id(template)] = {
            "Type": "AWS::CloudWatch::Dashboard",
            "Properties": {
                "DashboardName": dashboard_name(
                    deployment.service, deployment.stage, deployment.region, template
                ),
                "DashboardBody": json.dumps(body),
            },
        }
        logger.info("Added dashboard %s", dashboard_logical_id(template))

    document.put(resources)
