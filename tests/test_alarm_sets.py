"""
Unit Tests — Function Alarm Sets
==================================
Tests for expanding global and function alarms into resources.
"""

import copy

import pytest
from pathlib import Path

# Adjust import path for the project
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from function_alerts.cloudwatch.alarm_sets import apply_naming_defaults, compile_alarms
from function_alerts.definitions.resolver import merge_definitions
from function_alerts.document import ResourceDocument
from function_alerts.errors import UnknownDefinition
from function_alerts.service import Deployment, ProviderNaming, ServiceInventory

DEPLOYMENT = Deployment(service="svc", stage="dev", region="us-east-1")

HIGH_ERRORS = {
    "metric": "Errors",
    "namespace": "AWS/Lambda",
    "threshold": 5,
    "type": "static",
    "statistic": "Sum",
    "period": 60,
    "evaluationPeriods": 1,
    "comparisonOperator": "GreaterThanThreshold",
}


def run(config, functions, document=None, topics=None):
    document = document if document is not None else ResourceDocument()
    definitions = merge_definitions(user_definitions=config.get("definitions"))
    inventory = ServiceInventory(DEPLOYMENT, functions)
    compile_alarms(config, definitions, topics or {}, inventory, ProviderNaming(DEPLOYMENT), document)
    return document


class TestCompileAlarms:

    def test_function_alarm_emitted(self):
        document = run(
            {"definitions": {"highErrors": HIGH_ERRORS}},
            {"createUser": {"alarms": ["highErrors"]}},
        )
        assert list(document.resources) == ["CreateUserHighErrorsAlarm"]
        props = document.get("CreateUserHighErrorsAlarm")["Properties"]
        assert props["MetricName"] == "Errors"
        assert props["Statistic"] == "Sum"
        assert props["AlarmActions"] == []
        assert props["TreatMissingData"] == "missing"

    def test_global_alarms_on_every_function(self):
        document = run(
            {"alarms": ["functionThrottles"]},
            {"a": {}, "b": {"alarms": ["functionErrors"]}},
        )
        assert set(document.resources) == {
            "AFunctionThrottlesAlarm",
            "BFunctionThrottlesAlarm",
            "BFunctionErrorsAlarm",
        }

    def test_function_can_disable_global_alarm(self):
        document = run(
            {"alarms": ["functionThrottles"]},
            {"a": {"alarms": [{"name": "functionThrottles", "enabled": False}]}},
        )
        assert "AFunctionThrottlesAlarm" not in document

    def test_disable_removes_previously_emitted_alarm(self):
        document = ResourceDocument({
            "AFunctionErrorsAlarm": {"Type": "AWS::CloudWatch::Alarm", "Properties": {}},
            "AFunctionThrottlesAlarm": {"Type": "AWS::CloudWatch::Alarm", "Properties": {}},
        })
        run({}, {"a": {"alarms": [{"name": "functionErrors", "enabled": False}]}}, document)
        assert list(document.resources) == ["AFunctionThrottlesAlarm"]

    def test_pattern_alarm_adds_metric_filters(self):
        config = {"definitions": {"bunyanErrors": {
            "metric": "BunyanErrors",
            "pattern": "{$.level > 40}",
            "threshold": 0,
            "statistic": "Sum",
            "period": 60,
            "evaluationPeriods": 1,
            "comparisonOperator": "GreaterThanThreshold",
        }}}
        document = run(config, {"createUser": {"alarms": ["bunyanErrors"]}})
        assert set(document.resources) == {
            "CreateUserBunyanErrorsAlarm",
            "CreateUserLambdaFunctionBunyanErrorsLogMetricFilterALERT",
            "CreateUserLambdaFunctionBunyanErrorsLogMetricFilterOK",
        }
        alert = document.get("CreateUserLambdaFunctionBunyanErrorsLogMetricFilterALERT")
        assert alert["Properties"]["LogGroupName"] == "/aws/lambda/svc-dev-createUser"
        assert alert["DependsOn"] == "CreateUserLogGroup"

    def test_naming_defaults_applied(self):
        document = run(
            {"nameTemplate": "$[functionName]-$[metricName]", "alarms": ["functionErrors"]},
            {"createUser": {}},
        )
        props = document.get("CreateUserFunctionErrorsAlarm")["Properties"]
        assert props["AlarmName"] == "svc-dev-createUser-Errors"

    def test_alarm_template_wins_over_default(self):
        alarms = apply_naming_defaults(
            [{"name": "a", "nameTemplate": "own"}, {"name": "b"}],
            {"nameTemplate": "global", "prefixTemplate": "p"},
        )
        assert alarms[0]["nameTemplate"] == "own"
        assert alarms[0]["prefixTemplate"] == "p"
        assert alarms[1]["nameTemplate"] == "global"

    def test_unknown_definition_fails(self):
        with pytest.raises(UnknownDefinition):
            run({}, {"a": {"alarms": ["nope"]}})

    def test_recompile_is_idempotent(self):
        config = {"alarms": ["functionErrors"]}
        functions = {"a": {}}
        first = run(config, functions)
        second = run(config, functions, ResourceDocument(copy.deepcopy(first.resources)))
        assert second.resources == first.resources

    def test_recompile_with_changed_type_replaces_alarm(self):
        latency = {**HIGH_ERRORS, "metric": "Duration", "statistic": "Average", "threshold": 800}
        document = run({"definitions": {"lat": latency}}, {"a": {"alarms": ["lat"]}})
        assert document.get("ALatAlarm")["Properties"]["Threshold"] == 800

        anomaly = {**latency, "type": "anomalyDetection", "threshold": 2}
        run({"definitions": {"lat": anomaly}}, {"a": {"alarms": ["lat"]}}, document)

        props = document.get("ALatAlarm")["Properties"]
        assert props["ThresholdMetricId"] == "ad1"
        for stale in ("Threshold", "MetricName", "Namespace", "Statistic", "Dimensions"):
            assert stale not in props

    def test_dropping_name_template_drops_alarm_name(self):
        document = run(
            {"nameTemplate": "$[functionName]-$[metricName]", "alarms": ["functionErrors"]},
            {"a": {}},
        )
        assert "AlarmName" in document.get("AFunctionErrorsAlarm")["Properties"]

        run({"alarms": ["functionErrors"]}, {"a": {}}, document)
        assert "AlarmName" not in document.get("AFunctionErrorsAlarm")["Properties"]

    def test_other_resources_left_alone(self):
        function = {"Type": "AWS::Lambda::Function", "Properties": {"Handler": "handler.a"}}
        document = ResourceDocument({"ALambdaFunction": function})
        run({"alarms": ["functionErrors"]}, {"a": {}}, document)
        assert document.get("ALambdaFunction") == function
