"""
Resource Documents
===================
The CloudFormation ``Resources`` mapping the compiler writes into.

``ResourceDocument`` wraps the main stack template owned by the
deployment. ``ExternalStackDocument`` collects the alerting resources
into a separate stack template instead.
"""

import copy
import logging
from typing import Any, Dict, Iterator, Optional, Tuple

from function_alerts.merge import deep_merge

logger = logging.getLogger(__name__)

TEMPLATE_FORMAT_VERSION = "2010-09-09"


class ResourceDocument:
    """Logical id → resource declaration, merged in place."""

    def __init__(self, resources: Optional[Dict[str, Any]] = None):
        self.resources: Dict[str, Any] = resources if resources is not None else {}

    def merge(self, resources: Dict[str, Any]) -> None:
        deep_merge(self.resources, resources)

    def put(self, resources: Dict[str, Any]) -> None:
        """Store each resource at its logical id, replacing any previous declaration."""
        for logical_id, resource in resources.items():
            self.resources[logical_id] = copy.deepcopy(resource)

    def get(self, logical_id: str) -> Optional[Dict[str, Any]]:
        return self.resources.get(logical_id)

    def delete(self, logical_id: str) -> bool:
        """Remove a resource. Returns True when something was removed."""
        if logical_id in self.resources:
            del self.resources[logical_id]
            logger.info("Removed resource %s", logical_id)
            return True
        return False

    def items(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        return iter(list(self.resources.items()))

    def of_type(self, resource_type: str) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """Iterate resources of one CloudFormation type, in document order."""
        for logical_id, resource in self.items():
            if resource.get("Type") == resource_type:
                yield logical_id, resource

    def __contains__(self, logical_id: str) -> bool:
        return logical_id in self.resources

    def __len__(self) -> int:
        return len(self.resources)

    def to_template(self, description: str = "") -> Dict[str, Any]:
        template: Dict[str, Any] = {"AWSTemplateFormatVersion": TEMPLATE_FORMAT_VERSION}
        if description:
            template["Description"] = description
        template["Resources"] = self.resources
        return template


class ExternalStackDocument(ResourceDocument):
    """
    Alerting resources deployed as their own stack.

    Parameters
    ----------
    stack_name : str
        Name of the main deployment stack.
    name_suffix : str
        Appended to the main stack name to name the alerts stack.
    """

    def __init__(
        self,
        stack_name: str,
        name_suffix: str = "alerts",
        resources: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(resources)
        self.stack_name = f"{stack_name}-{name_suffix}"

    def to_template(self, description: str = "") -> Dict[str, Any]:
        return super().to_template(description or f"Alerts for {self.stack_name}")
