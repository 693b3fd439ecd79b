"""
Alarm Definition Resolver
==========================
Merges user alarm definitions over the built-ins and resolves
alarm references (bare names or inline objects) into complete
alarm specs ready to be built.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from function_alerts.definitions.defaults import DEFAULT_DEFINITIONS
from function_alerts.errors import (
    InvalidAlarmReference,
    MissingConfig,
    MissingDefinitions,
    UnknownDefinition,
    UnsupportedAlarmType,
)
from function_alerts.merge import deep_merge

ALARM_TYPES = ("static", "anomalyDetection", "successRate", "composite")

ALARM_DEFAULTS = {
    "enabled": True,
    "type": "static",
}


@dataclass(frozen=True)
class AlarmName:
    """Reference to a definition by name."""
    name: str


@dataclass(frozen=True)
class InlineAlarm:
    """Partial definition, merged over the definition it names (if any)."""
    fields: Dict[str, Any]

    @property
    def name(self) -> Optional[str]:
        return self.fields.get("name")


AlarmReference = Union[AlarmName, InlineAlarm]


def parse_alarm_reference(raw: Any) -> AlarmReference:
    if isinstance(raw, str):
        return AlarmName(raw)
    if isinstance(raw, dict):
        return InlineAlarm(raw)
    raise InvalidAlarmReference(raw)


def merge_definitions(
    builtins: Optional[Dict[str, Dict[str, Any]]] = None,
    user_definitions: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Dict[str, Dict[str, Any]]:
    """Definition table: ``user_definitions`` deep-merged over ``builtins``."""
    if builtins is None:
        builtins = DEFAULT_DEFINITIONS
    return deep_merge({}, builtins, user_definitions)


def resolve_alarm(reference: AlarmReference, definitions: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(reference, AlarmName):
        definition = definitions.get(reference.name)
        if definition is None:
            raise UnknownDefinition(reference.name)
        spec = {**ALARM_DEFAULTS, **copy.deepcopy(definition), "name": reference.name}
    else:
        spec = deep_merge({}, ALARM_DEFAULTS, definitions.get(reference.name), reference.fields)

    if spec.get("type") not in ALARM_TYPES:
        raise UnsupportedAlarmType(spec.get("name"), spec.get("type"))
    return spec


def resolve_alarms(
    references: Optional[List[Any]], definitions: Dict[str, Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """
    Resolve alarm references against the definition table.

    Output order matches input order and duplicates are kept.

    Raises
    ------
    UnknownDefinition
        A bare name has no definition.
    """
    if not references:
        return []
    return [resolve_alarm(parse_alarm_reference(raw), definitions) for raw in references]


def _union(*lists: Optional[List[Any]]) -> List[Any]:
    """Concatenate, dropping repeated names; inline objects are only dropped if repeated by identity."""
    result: List[Any] = []
    seen_names = set()
    seen_objects = set()
    for items in lists:
        for item in items or []:
            if isinstance(item, str):
                if item in seen_names:
                    continue
                seen_names.add(item)
            else:
                if id(item) in seen_objects:
                    continue
                seen_objects.add(id(item))
            result.append(item)
    return result


def get_global_alarms(
    config: Optional[Dict[str, Any]], definitions: Optional[Dict[str, Dict[str, Any]]]
) -> List[Dict[str, Any]]:
    """Alarms attached to every function: ``alarms`` ∪ ``global`` ∪ ``function``."""
    if config is None:
        raise MissingConfig()
    if definitions is None:
        raise MissingDefinitions()

    references = _union(config.get("alarms"), config.get("global"), config.get("function"))
    return resolve_alarms(references, definitions)


def get_function_alarms(
    function_alarms: Optional[List[Any]],
    config: Optional[Dict[str, Any]],
    definitions: Optional[Dict[str, Dict[str, Any]]],
) -> List[Dict[str, Any]]:
    if config is None:
        raise MissingConfig()
    if definitions is None:
        raise MissingDefinitions()

    return resolve_alarms(function_alarms, definitions)
