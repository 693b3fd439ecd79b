"""
Function Alarm Sets
====================
Expands the global alarms and each function's own alarms into
alarm (and log metric filter) resources, one batch per function.
"""

import logging
from typing import Any, Dict, List

from function_alerts.cloudwatch.alarms import build_alarm
from function_alerts.cloudwatch.log_metrics import build_log_metric_filters
from function_alerts.definitions.resolver import get_function_alarms, get_global_alarms
from function_alerts.document import ResourceDocument
from function_alerts.merge import deep_merge
from function_alerts.naming import alarm_logical_id
from function_alerts.service import FunctionContext, ProviderNaming, ServiceInventory, build_function_context

logger = logging.getLogger(__name__)


def apply_naming_defaults(alarms: List[Dict[str, Any]], config: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Give every alarm the top-level ``nameTemplate``/``prefixTemplate`` unless it sets its own."""
    defaults = {
        "nameTemplate": config.get("nameTemplate"),
        "prefixTemplate": config.get("prefixTemplate"),
    }
    return [{**defaults, **alarm} for alarm in alarms]


def compile_function_alarms(
    context: FunctionContext,
    alarms: List[Dict[str, Any]],
    alert_topics: Dict[str, Any],
    stack_name: str,
    document: ResourceDocument,
) -> Dict[str, Any]:
    """
    Build the resource batch for one function.

    A disabled alarm removes the resource at its logical id from the batch
    and from the document, so turning an alarm off on a later deploy drops
    the alarm instead of leaving it orphaned.
    """
    statements: Dict[str, Any] = {}

    for alarm in alarms:
        key = alarm_logical_id(alarm["name"], context.function_name)

        if not alarm.get("enabled", True):
            statements.pop(key, None)
            document.delete(key)
            logger.info("Alarm %s disabled on function %s", alarm["name"], context.function_name)
            continue

        statements[key] = build_alarm(
            alert_topics, alarm, context.function_name, context.logical_id, stack_name
        )
        deep_merge(statements, build_log_metric_filters(alarm, context, stack_name))

    return statements


def compile_alarms(
    config: Dict[str, Any],
    definitions: Dict[str, Dict[str, Any]],
    alert_topics: Dict[str, Any],
    inventory: ServiceInventory,
    naming: ProviderNaming,
    document: ResourceDocument,
) -> None:
    """Merge the alarms of every function in the service into ``document``."""
    global_alarms = get_global_alarms(config, definitions)
    stack_name = naming.get_stack_name()

    for function_name in inventory.list_functions():
        context = build_function_context(function_name, inventory, naming)
        function_alarms = get_function_alarms(context.alarms, config, definitions)
        alarms = apply_naming_defaults(global_alarms + function_alarms, config)

        statements = compile_function_alarms(context, alarms, alert_topics, stack_name, document)
        document.put(statements)
        logger.info("Compiled %d resources for function %s", len(statements), function_name)
