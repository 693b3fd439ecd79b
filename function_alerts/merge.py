"""
Deep Merge
===========
Recursive dict merge used for definitions, alarm references
and resource documents.
"""

import copy
from typing import Any, Dict


def deep_merge(target: Dict[str, Any], *sources: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge ``sources`` into ``target`` left to right and return ``target``.

    Nested dicts are merged key by key; every other value (lists included)
    replaces the existing one. Values are deep-copied so the sources
    are never aliased by the result. ``None`` sources are ignored.
    """
    for source in sources:
        if not source:
            continue
        for key, value in source.items():
            current = target.get(key)
            if isinstance(value, dict) and isinstance(current, dict):
                deep_merge(current, value)
            else:
                target[key] = copy.deepcopy(value)
    return target
