"""
Unit Tests — Configuration Schema Validation
==============================================
Tests for validating the alerts configuration and function alarms.
"""

import pytest
from pathlib import Path

# Adjust import path for the project
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from function_alerts.errors import ConfigValidationError
from function_alerts.validators.schema_validator import SchemaValidator


class TestSchemaValidator:
    """Test JSON schema validation."""

    @pytest.fixture
    def validator(self):
        return SchemaValidator()

    def test_schemas_loaded(self, validator):
        assert sorted(validator.available_entities) == ["alerts_config", "function"]

    def test_valid_config(self, validator):
        config = {
            "stages": ["production"],
            "nameTemplate": "$[functionName]-$[metricName]",
            "topics": {
                "ok": "ok-topic",
                "alarm": {
                    "topic": "alarm-topic",
                    "notifications": [{"protocol": "email", "endpoint": "ops@example.com"}],
                },
                "critical": {"alarm": "arn:aws:sns:us-east-1:123456789012:pager"},
            },
            "definitions": {
                "bunyanErrors": {
                    "metric": "BunyanErrors",
                    "pattern": "{$.level > 40}",
                    "threshold": 0,
                    "treatMissingData": "notBreaching",
                },
            },
            "alarms": ["functionErrors", {"name": "functionDuration", "threshold": 800}],
            "dashboards": {"stages": ["production"], "templates": ["default", "vertical"]},
        }
        is_valid, errors = validator.validate_record(config, "alerts_config")
        assert is_valid is True
        assert len(errors) == 0

    def test_invalid_alarm_type(self, validator):
        config = {"definitions": {"weird": {"type": "dynamic"}}}
        is_valid, errors = validator.validate_record(config, "alerts_config")
        assert is_valid is False
        assert "$.definitions.weird.type" in errors[0]

    def test_pattern_requires_metric(self, validator):
        config = {"definitions": {"logErrors": {"pattern": "ERROR"}}}
        is_valid, errors = validator.validate_record(config, "alerts_config")
        assert is_valid is False

    def test_inline_alarm_requires_name(self, validator):
        is_valid, errors = validator.validate_record({"alarms": [{"threshold": 1}]}, "alerts_config")
        assert is_valid is False

    @pytest.mark.parametrize("dashboards", [True, "vertical", ["default"], {"stages": ["dev"]}])
    def test_dashboard_forms(self, validator, dashboards):
        is_valid, _ = validator.validate_record({"dashboards": dashboards}, "alerts_config")
        assert is_valid is True

    def test_dashboard_object_requires_stages(self, validator):
        is_valid, _ = validator.validate_record({"dashboards": {"templates": ["default"]}}, "alerts_config")
        assert is_valid is False

    def test_unknown_entity(self, validator):
        is_valid, errors = validator.validate_record({}, "nonexistent")
        assert is_valid is False
        assert "No schema found" in errors[0]


class TestValidateService:

    @pytest.fixture
    def validator(self):
        return SchemaValidator()

    def test_valid_service(self, validator):
        validator.validate_service(
            {"alarms": ["functionErrors"]},
            {"createUser": {"alarms": ["functionThrottles"]}, "deleteUser": None},
        )

    def test_errors_collected_with_location(self, validator):
        with pytest.raises(ConfigValidationError) as exc:
            validator.validate_service(
                {"stages": "prod"},
                {"createUser": {"alarms": "functionErrors"}},
            )
        errors = exc.value.errors
        assert len(errors) == 2
        assert errors[0].startswith("alerts $.stages")
        assert errors[1].startswith("function createUser $.alarms")
