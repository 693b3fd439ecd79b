"""
CloudWatch Composite Alarms
============================
Combines alarms that are already in the resource document into
``AWS::CloudWatch::CompositeAlarm`` resources. Runs after every
function alarm has been compiled.

Definition example::

    definitions:
      anyFunctionDown:
        type: composite
        description: Any function is failing
        alarmsToInclude:
          - ApiFunctionErrorsAlarm
          - WorkerFunctionErrorsAlarm
        alarmsActions:
          - AwsAlertsCriticalAlarm
"""

import logging
from typing import Any, Dict, List, Optional

from function_alerts.document import ResourceDocument
from function_alerts.naming import composite_alarm_name, composite_logical_id
from function_alerts.service import Deployment

logger = logging.getLogger(__name__)

ALARM_TYPE = "AWS::CloudWatch::Alarm"
COMPOSITE_ALARM_TYPE = "AWS::CloudWatch::CompositeAlarm"
TOPIC_TYPE = "AWS::SNS::Topic"

DEFAULT_ALARM_ACTIONS = ["AwsAlertsAlarm"]


def filter_resources(
    document: ResourceDocument,
    resource_type: str,
    logical_ids: Optional[List[str]] = None,
    include_disabled: bool = False,
) -> List[Dict[str, Any]]:
    """
    Resources of ``resource_type`` in document order, restricted to
    ``logical_ids`` when that list is non-empty.
    """
    matched = []
    for logical_id, resource in document.of_type(resource_type):
        properties = resource.get("Properties") or {}
        if not include_disabled and properties.get("enabled") is False:
            continue
        if logical_ids and logical_id not in logical_ids:
            continue
        matched.append({"logical_id": logical_id, "resource": resource})
    return matched


def resolve_constituents(definition: Dict[str, Any], document: ResourceDocument) -> List[Dict[str, Any]]:
    """Logical id and deployed name of every alarm the composite includes."""
    return [
        {
            "logical_id": item["logical_id"],
            "physical_id": (item["resource"].get("Properties") or {}).get("AlarmName"),
        }
        for item in filter_resources(
            document, ALARM_TYPE, definition.get("alarmsToInclude"), include_disabled=True
        )
    ]


def build_alarm_rule(constituents: List[Dict[str, Any]]) -> Any:
    """
    ``ALARM(a) OR ALARM(b) ...`` in constituent order.

    Alarms without an explicit ``AlarmName`` only get their name at deploy
    time; those are referenced through ``Fn::Sub`` on their logical id.
    """
    if all(c["physical_id"] for c in constituents):
        return " OR ".join(f"ALARM({c['physical_id']})" for c in constituents)

    def sub_operand(constituent: Dict[str, Any]) -> str:
        if constituent["physical_id"]:
            # literal ``${`` must be written as ``${!`` inside Fn::Sub
            return str(constituent["physical_id"]).replace("${", "${!")
        return "${" + constituent["logical_id"] + "}"

    return {"Fn::Sub": " OR ".join(f"ALARM({sub_operand(c)})" for c in constituents)}


def resolve_alarm_actions(definition: Dict[str, Any], document: ResourceDocument) -> List[Dict[str, str]]:
    """References to the requested topics that exist in the document and are not disabled."""
    actions = definition.get("alarmsActions") or DEFAULT_ALARM_ACTIONS

    topics = []
    for action in actions:
        resource = document.get(action)
        if resource is None or resource.get("Type") != TOPIC_TYPE:
            logger.info("Skipping composite alarm action %s: no such topic", action)
            continue
        if (resource.get("Properties") or {}).get("enabled") is False:
            continue
        topics.append({"Ref": action})
    return topics


def build_composite_alarm(
    definition_name: str,
    definition: Dict[str, Any],
    document: ResourceDocument,
    deployment: Deployment,
) -> Optional[Dict[str, Any]]:
    """Composite alarm declaration, or None when no alarm matches."""
    constituents = resolve_constituents(definition, document)
    if not constituents:
        return None

    properties = {
        "AlarmName": composite_alarm_name(
            deployment.service, deployment.stage, deployment.region, definition_name
        ),
        "AlarmDescription": definition.get("description"),
        "ActionsEnabled": definition.get("actionsEnabled"),
        "AlarmRule": build_alarm_rule(constituents),
        "AlarmActions": resolve_alarm_actions(definition, document),
    }
    return {
        "Type": COMPOSITE_ALARM_TYPE,
        "Properties": {key: value for key, value in properties.items() if value is not None},
        "DependsOn": [c["logical_id"] for c in constituents],
    }


def compile_composite_alarms(
    definitions: Dict[str, Dict[str, Any]],
    document: ResourceDocument,
    deployment: Deployment,
) -> None:
    """Emit one composite alarm per enabled ``composite`` definition."""
    for definition_name, definition in definitions.items():
        if definition.get("type") != "composite" or definition.get("enabled") is False:
            continue

        composite = build_composite_alarm(definition_name, definition, document, deployment)
        if composite is None:
            logger.info("Composite alarm %s matches no alarms, skipping", definition_name)
            continue

        logical_id = composite_logical_id(definition_name)
        document.put({logical_id: composite})
        logger.info(
            "Added composite alarm %s over %d alarms", logical_id, len(composite["DependsOn"])
        )
