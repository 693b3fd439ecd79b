"""
Alerts Compiler
================
Compiles the ``alerts`` configuration of a service into CloudFormation
resources, in a fixed order:

1. alarm definitions (built-ins + user)
2. SNS topics and the action-topic table
3. per-function alarms and log metric filters
4. composite alarms over the alarms emitted in step 3
5. dashboards
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from function_alerts.cloudwatch.alarm_sets import compile_alarms
from function_alerts.cloudwatch.composite import compile_composite_alarms
from function_alerts.cloudwatch.dashboards import compile_dashboards
from function_alerts.definitions.resolver import merge_definitions
from function_alerts.document import ExternalStackDocument, ResourceDocument
from function_alerts.service import Deployment, ProviderNaming, ServiceInventory
from function_alerts.sns.notifications import compile_alert_topics
from function_alerts.validators.schema_validator import SchemaValidator

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Documents touched by a compile pass."""
    document: ResourceDocument
    external: Optional[ExternalStackDocument] = None
    skipped: bool = False

    @property
    def target(self) -> ResourceDocument:
        """The document alerting resources were written to."""
        return self.external if self.external is not None else self.document


class AlertsCompiler:
    """
    Compiles alerting resources for one deployment.

    Parameters
    ----------
    config : dict or None
        The ``alerts`` section of the service configuration.
    inventory : ServiceInventory
        Functions of the service.
    naming : ProviderNaming
        Logical ids and names of function resources.
    document : ResourceDocument
        Main stack resources; alerting resources are merged here unless
        the config selects an external stack.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]],
        inventory: ServiceInventory,
        naming: ProviderNaming,
        document: Optional[ResourceDocument] = None,
        validator: Optional[SchemaValidator] = None,
    ):
        self.config = config
        self.inventory = inventory
        self.naming = naming
        self.deployment: Deployment = inventory.deployment
        self.document = document if document is not None else ResourceDocument()
        self.validator = validator or SchemaValidator()

    def _select_document(self) -> Optional[ExternalStackDocument]:
        external_config = self.config.get("externalStack")
        if external_config is None:
            return None
        external = ExternalStackDocument(
            self.naming.get_stack_name(),
            name_suffix=(external_config or {}).get("nameSuffix", "alerts"),
        )
        logger.info("Compiling alerts into external stack %s", external.stack_name)
        return external

    def _validate(self) -> None:
        functions = {
            name: self.inventory.get_function(name) for name in self.inventory.list_functions()
        }
        self.validator.validate_service(self.config, functions)

    def compile(self) -> CompileResult:
        """
        Run one compile pass.

        The pass works on a copy of the target document and only replaces
        the target's resources once every step succeeded.

        Raises
        ------
        AlertsError
            On any configuration error; the target document is left untouched.
        """
        if not self.config:
            logger.warning("No alerts configuration found, skipping")
            return CompileResult(self.document, skipped=True)

        stages = self.config.get("stages")
        if stages is not None and self.deployment.stage not in stages:
            logger.warning("Not deploying alerts on stage %s", self.deployment.stage)
            return CompileResult(self.document, skipped=True)

        self._validate()

        external = self._select_document()
        target = external if external is not None else self.document
        staging = ResourceDocument(copy.deepcopy(target.resources))

        definitions = merge_definitions(user_definitions=self.config.get("definitions"))
        alert_topics = compile_alert_topics(self.config.get("topics"), staging)

        compile_alarms(self.config, definitions, alert_topics, self.inventory, self.naming, staging)
        compile_composite_alarms(definitions, staging, self.deployment)

        if self.config.get("dashboards"):
            compile_dashboards(
                self.config["dashboards"], self.deployment, self.inventory.list_functions(), staging
            )

        target.resources.clear()
        target.resources.update(staging.resources)
        logger.info("Alerts compiled: %d resources", len(target))
        return CompileResult(self.document, external=external)
