"""
Built-in Alarm Definitions
===========================
Lambda alarms available to every service without declaring them.
User definitions with the same name are merged over these.
"""

LAMBDA_NAMESPACE = "AWS/Lambda"

DEFAULT_DEFINITIONS = {
    # ── Invocation volume ────────────────────────────────────
    "functionInvocations": {
        "namespace": LAMBDA_NAMESPACE,
        "metric": "Invocations",
        "threshold": 100,
        "statistic": "Sum",
        "period": 60,
        "evaluationPeriods": 1,
        "datapointsToAlarm": 1,
        "comparisonOperator": "GreaterThanOrEqualToThreshold",
    },
    # ── Errors ───────────────────────────────────────────────
    "functionErrors": {
        "namespace": LAMBDA_NAMESPACE,
        "metric": "Errors",
        "threshold": 1,
        "statistic": "Sum",
        "period": 60,
        "evaluationPeriods": 1,
        "datapointsToAlarm": 1,
        "comparisonOperator": "GreaterThanOrEqualToThreshold",
    },
    # ── Duration (ms) ────────────────────────────────────────
    "functionDuration": {
        "namespace": LAMBDA_NAMESPACE,
        "metric": "Duration",
        "threshold": 500,
        "statistic": "Average",
        "period": 60,
        "evaluationPeriods": 1,
        "datapointsToAlarm": 1,
        "comparisonOperator": "GreaterThanOrEqualToThreshold",
    },
    # ── Throttles ────────────────────────────────────────────
    "functionThrottles": {
        "namespace": LAMBDA_NAMESPACE,
        "metric": "Throttles",
        "threshold": 1,
        "statistic": "Sum",
        "period": 60,
        "evaluationPeriods": 1,
        "datapointsToAlarm": 1,
        "comparisonOperator": "GreaterThanOrEqualToThreshold",
    },
}
