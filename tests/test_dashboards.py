"""
Unit Tests — CloudWatch Dashboards
====================================
"""

import json

import pytest
from pathlib import Path

# Adjust import path for the project
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from function_alerts.cloudwatch.dashboard_templates import create_dashboard
from function_alerts.cloudwatch.dashboards import compile_dashboards, get_dashboard_templates
from function_alerts.document import ResourceDocument
from function_alerts.errors import UnknownDashboardTemplate
from function_alerts.service import Deployment

DEPLOYMENT = Deployment(service="svc", stage="dev", region="eu-west-1")


class TestGetDashboardTemplates:

    @pytest.mark.parametrize("value, expected", [
        (True, ["default"]),
        ("vertical", ["vertical"]),
        (["default", "vertical"], ["default", "vertical"]),
        ({"stages": ["dev"]}, ["default"]),
        ({"stages": ["dev"], "templates": ["vertical"]}, ["vertical"]),
        ({"stages": ["prod"], "templates": ["ops"]}, []),
        ({"stages": []}, []),
        ({"stages": ["dev"], "templates": []}, []),
    ])
    def test_resolution(self, value, expected):
        assert get_dashboard_templates(value, "dev") == expected


class TestCreateDashboard:

    def test_default_layout_is_two_columns(self):
        body = create_dashboard("svc", "dev", "eu-west-1", [{"name": "a"}, {"name": "b"}], "default")
        widgets = body["widgets"]
        assert [(w["x"], w["y"]) for w in widgets[:3]] == [(0, 0), (12, 0), (0, 6)]
        assert widgets[0]["properties"]["metrics"] == [
            ["AWS/Lambda", "Invocations", "FunctionName", "svc-dev-a", {"label": "svc-dev-a"}],
            ["AWS/Lambda", "Invocations", "FunctionName", "svc-dev-b", {"label": "svc-dev-b"}],
        ]
        assert widgets[0]["properties"]["region"] == "eu-west-1"

    def test_vertical_layout_is_full_width(self):
        body = create_dashboard("svc", "dev", "eu-west-1", [{"name": "a"}], "vertical")
        assert all(w["width"] == 24 and w["x"] == 0 for w in body["widgets"])

    def test_unknown_template(self):
        with pytest.raises(UnknownDashboardTemplate):
            create_dashboard("svc", "dev", "eu-west-1", [], "nope")


class TestCompileDashboards:

    def test_default_dashboard(self):
        document = ResourceDocument()
        compile_dashboards(True, DEPLOYMENT, ["a"], document)
        dashboard = document.get("AlertsDashboard")
        assert dashboard["Type"] == "AWS::CloudWatch::Dashboard"
        assert dashboard["Properties"]["DashboardName"] == "svc-dev-eu-west-1"
        assert "widgets" in json.loads(dashboard["Properties"]["DashboardBody"])

    def test_named_templates_are_suffixed_and_distinct(self):
        document = ResourceDocument()
        compile_dashboards(["vertical", "default", "vertical"], DEPLOYMENT, ["a"], document)
        assert list(document.resources) == ["AlertsDashboardvertical", "AlertsDashboard"]
        assert document.get("AlertsDashboardvertical")["Properties"]["DashboardName"] == (
            "svc-dev-eu-west-1-vertical"
        )

    def test_other_stage_emits_nothing(self):
        document = ResourceDocument()
        compile_dashboards({"stages": ["prod"], "templates": ["ops"]}, DEPLOYMENT, ["a"], document)
        assert len(document) == 0
