"""
Alerting Errors
================
Exceptions raised while compiling the alerting configuration.
Every error is fatal to the compile pass.
"""

from typing import List, Optional


class AlertsError(Exception):
    """Base exception for alert compilation errors."""


class ConfigValidationError(AlertsError):
    """The alerts configuration does not match its JSON schema."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Invalid alerts configuration:\n  " + "\n  ".join(errors))


class MissingConfig(AlertsError):
    """Alarm expansion was invoked without the alerts configuration."""

    def __init__(self):
        super().__init__("Missing config argument")


class MissingDefinitions(AlertsError):
    """Alarm expansion was invoked without a definition table."""

    def __init__(self):
        super().__init__("Missing definitions argument")


class UnknownDefinition(AlertsError):
    """An alarm is referenced by a name that has no definition."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Alarm definition {name} does not exist!")


class InvalidAlarmReference(AlertsError):
    """An alarm reference is neither a definition name nor an inline object."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid alarm reference: {value!r}")


class UnsupportedAlarmType(AlertsError):
    """A resolved alarm has a type that cannot be built."""

    def __init__(self, name: Optional[str], alarm_type, function_name: Optional[str] = None):
        self.name = name
        self.alarm_type = alarm_type
        self.function_name = function_name
        where = f" on function {function_name}" if function_name else ""
        super().__init__(
            f"Unsupported type {alarm_type!r} for alarm {name}{where}, "
            "must be one of 'static', 'anomalyDetection' or 'successRate'"
        )


class InvalidTopicReference(AlertsError):
    """An alarm action override names a topic group or severity that was never configured."""

    def __init__(self, group: str, severity: str, alarm_name: Optional[str] = None):
        self.group = group
        self.severity = severity
        self.alarm_name = alarm_name
        super().__init__(
            f"Alarm {alarm_name} references topic {group}.{severity} "
            "which is not configured under 'topics'"
        )


class UnknownDashboardTemplate(AlertsError):
    """A dashboard template name has no registered layout."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Dashboard template {name} does not exist!")
