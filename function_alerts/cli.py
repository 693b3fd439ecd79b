"""
Alerts Template Compiler
=========================
Compiles the ``custom.alerts`` section of a serverless.yml into
CloudFormation alarms, topics and dashboards.

Usage:
    python -m function_alerts.cli --config serverless.yml --stage dev --region us-east-1
    python -m function_alerts.cli --config serverless.yml --template build/stack.json \
        --output build/stack.json
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from function_alerts.compiler import AlertsCompiler
from function_alerts.document import ResourceDocument
from function_alerts.errors import AlertsError
from function_alerts.service import Deployment, ProviderNaming, ServiceInventory

logger = logging.getLogger(__name__)

DEFAULT_STAGE = "dev"
DEFAULT_REGION = "us-east-1"


def load_service_config(path: Path) -> Dict[str, Any]:
    """Load a serverless.yml-style service file."""
    with open(path) as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        raise AlertsError(f"{path} does not contain a service definition")
    return raw


def _service_name(service_config: Dict[str, Any]) -> str:
    service = service_config.get("service")
    if isinstance(service, dict):
        service = service.get("name")
    if not service:
        raise AlertsError("Service file has no 'service' name")
    return service


def load_template(path: Optional[Path]) -> Dict[str, Any]:
    if path is None or not path.exists():
        return {}
    with open(path) as f:
        return json.load(f)


def write_template(template: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(template, f, indent=2)
    logger.info("Wrote %d resources → %s", len(template.get("Resources", {})), path)


def compile_service(
    service_config: Dict[str, Any],
    stage: Optional[str] = None,
    region: Optional[str] = None,
    template: Optional[Dict[str, Any]] = None,
):
    """Compile the alerts of a parsed service file. Returns the ``CompileResult``."""
    provider = service_config.get("provider") or {}
    deployment = Deployment(
        service=_service_name(service_config),
        stage=stage or provider.get("stage") or DEFAULT_STAGE,
        region=region or provider.get("region") or DEFAULT_REGION,
    )

    template = template if template is not None else {}
    document = ResourceDocument(template.setdefault("Resources", {}))
    inventory = ServiceInventory(deployment, service_config.get("functions") or {})
    config = (service_config.get("custom") or {}).get("alerts")

    compiler = AlertsCompiler(config, inventory, ProviderNaming(deployment), document)
    return compiler.compile()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compile function alerts into CloudFormation")
    parser.add_argument("--config", default="serverless.yml", help="Service file")
    parser.add_argument("--stage", help="Deployment stage (default: provider.stage or dev)")
    parser.add_argument("--region", help="AWS region (default: provider.region or us-east-1)")
    parser.add_argument("--template", help="Existing CloudFormation template to merge into")
    parser.add_argument("--output", default="alerts-template.json")
    parser.add_argument("--external-output", default="alerts-stack-template.json",
                        help="Where the external alerts stack is written when configured")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    try:
        service_config = load_service_config(Path(args.config))
        template = load_template(Path(args.template) if args.template else None)
        result = compile_service(service_config, args.stage, args.region, template)
    except AlertsError as e:
        logger.error("%s", e)
        return 1

    template.setdefault("AWSTemplateFormatVersion", "2010-09-09")
    write_template(template, Path(args.output))
    if result.external is not None:
        write_template(result.external.to_template(), Path(args.external_output))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
