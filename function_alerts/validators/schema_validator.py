"""
Schema Validator
=================
Validates the alerts configuration and function alarm lists against
JSON schema definitions. Runs before anything is compiled.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from jsonschema import Draft7Validator

from function_alerts.errors import ConfigValidationError

logger = logging.getLogger(__name__)

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


class SchemaValidator:
    """Validates configuration sections against JSON schemas."""

    def __init__(self):
        self._schemas: Dict[str, dict] = {}
        self._validators: Dict[str, Draft7Validator] = {}
        self._load_schemas()

    def _load_schemas(self) -> None:
        """Load all JSON schema files from the schemas directory."""
        for schema_file in sorted(SCHEMAS_DIR.glob("*.json")):
            entity = schema_file.stem.replace("_schema", "")
            with open(schema_file) as f:
                schema = json.load(f)
            self._schemas[entity] = schema
            self._validators[entity] = Draft7Validator(schema)
            logger.debug("Loaded schema: %s", entity)

    @property
    def available_entities(self) -> List[str]:
        """Return list of entities with loaded schemas."""
        return list(self._schemas.keys())

    def validate_record(self, record: Any, entity: str) -> Tuple[bool, List[str]]:
        """
        Validate a configuration section against an entity schema.

        Returns
        -------
        tuple
            (is_valid, list_of_error_messages)
        """
        if entity not in self._validators:
            return False, [f"No schema found for entity: {entity}"]

        errors = [
            f"{error.json_path}: {error.message}"
            for error in self._validators[entity].iter_errors(record)
        ]
        return len(errors) == 0, errors

    def validate_service(self, config: Dict[str, Any], functions: Dict[str, Dict[str, Any]]) -> None:
        """
        Validate the alerts config and the alarms of every function.

        Raises
        ------
        ConfigValidationError
            Listing every error found, prefixed with where it was found.
        """
        errors: List[str] = []

        _, config_errors = self.validate_record(config, "alerts_config")
        errors.extend(f"alerts {e}" for e in config_errors)

        for function_name, function in functions.items():
            _, function_errors = self.validate_record(function or {}, "function")
            errors.extend(f"function {function_name} {e}" for e in function_errors)

        if errors:
            raise ConfigValidationError(errors)
