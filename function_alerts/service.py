"""
Service Collaborators
======================
Function inventory and provider naming of the deployed service.

The compiler only depends on the methods defined here; these
implementations follow the Serverless Framework conventions for
AWS Lambda services.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from function_alerts.naming import normalize_name


@dataclass(frozen=True)
class Deployment:
    """Service, stage and region the template is compiled for."""
    service: str
    stage: str
    region: str


class ProviderNaming:
    """Logical ids and physical names the provider assigns to function resources."""

    def __init__(self, deployment: Deployment):
        self.deployment = deployment

    def get_stack_name(self) -> str:
        return f"{self.deployment.service}-{self.deployment.stage}"

    def get_normalized_function_name(self, function_name: str) -> str:
        return normalize_name(function_name)

    def get_lambda_logical_id(self, function_name: str) -> str:
        return f"{self.get_normalized_function_name(function_name)}LambdaFunction"

    def get_log_group_logical_id(self, function_name: str) -> str:
        return f"{self.get_normalized_function_name(function_name)}LogGroup"

    def get_log_group_name(self, deployed_function_name: str) -> str:
        return f"/aws/lambda/{deployed_function_name}"


class ServiceInventory:
    """
    Functions declared by the service.

    Parameters
    ----------
    deployment : Deployment
        Used to derive the deployed name of functions that do not set one.
    functions : dict
        Function key → function properties (``alarms``, ``name``, ...).
    """

    def __init__(self, deployment: Deployment, functions: Optional[Dict[str, Dict[str, Any]]] = None):
        self.deployment = deployment
        self._functions = functions or {}

    def list_functions(self) -> List[str]:
        return list(self._functions.keys())

    def get_function(self, function_name: str) -> Dict[str, Any]:
        function = dict(self._functions.get(function_name) or {})
        function.setdefault(
            "name",
            f"{self.deployment.service}-{self.deployment.stage}-{function_name}",
        )
        return function


@dataclass(frozen=True)
class FunctionContext:
    """Read-only view of one function as seen by the alarm expander."""
    function_name: str
    deployed_name: str
    logical_id: str
    log_group_logical_id: str
    log_group_name: str
    alarms: List[Any]


def build_function_context(
    function_name: str, inventory: ServiceInventory, naming: ProviderNaming
) -> FunctionContext:
    function = inventory.get_function(function_name)
    return FunctionContext(
        function_name=function_name,
        deployed_name=function["name"],
        logical_id=naming.get_lambda_logical_id(function_name),
        log_group_logical_id=naming.get_log_group_logical_id(function_name),
        log_group_name=naming.get_log_group_name(function["name"]),
        alarms=list(function.get("alarms") or []),
    )
