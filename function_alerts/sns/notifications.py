"""
SNS Notifications
==================
Builds the action-topic table used by alarm actions and emits
SNS topics (with their subscriptions) for topics that do not exist yet.

Topic configuration is either keyed by severity::

    topics:
      ok: my-ok-topic
      alarm:
        topic: arn:aws:sns:us-east-1:123456789012:pager
      insufficientData:
        topic: my-insufficient-topic
        notifications:
          - protocol: email
            endpoint: ops@example.com

or grouped under a name that alarms refer to in ``alarmActions`` etc::

    topics:
      critical:
        alarm: critical-alarm-topic
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from function_alerts.document import ResourceDocument
from function_alerts.naming import topic_logical_id

logger = logging.getLogger(__name__)

SEVERITIES = ("ok", "alarm", "insufficientData")
ARN_PREFIX = "arn:"


@dataclass(frozen=True)
class TopicLiteral:
    """Topic given as a bare ARN or topic name."""
    topic: str


@dataclass(frozen=True)
class TopicDetails:
    """Topic given as ``{topic, notifications}``."""
    topic: Any
    notifications: List[Dict[str, Any]] = field(default_factory=list)


TopicConfig = Union[TopicLiteral, TopicDetails]


def parse_topic_config(raw: Any) -> Optional[TopicConfig]:
    if isinstance(raw, str):
        return TopicLiteral(raw)
    if isinstance(raw, dict):
        return TopicDetails(raw.get("topic"), list(raw.get("notifications") or []))
    return None


def is_existing_topic(topic: Any) -> bool:
    """Objects (intrinsics such as ``Fn::ImportValue``) and ARNs point at deployed topics."""
    return isinstance(topic, dict) or (isinstance(topic, str) and topic.startswith(ARN_PREFIX))


def build_topic_resource(topic_name: str, notifications: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """SNS topic declaration with one subscription per notification."""
    subscription = [
        {"Protocol": n.get("protocol"), "Endpoint": n.get("endpoint")}
        for n in (notifications or [])
    ]
    return {
        "Type": "AWS::SNS::Topic",
        "Properties": {
            "TopicName": topic_name,
            "Subscription": subscription,
        },
    }


def _add_alert_topic(
    severity: str,
    raw_config: Any,
    alert_topics: Dict[str, Any],
    document: ResourceDocument,
    group: Optional[str] = None,
) -> None:
    topic_config = parse_topic_config(raw_config)
    if topic_config is None or not topic_config.topic:
        return

    notifications = topic_config.notifications if isinstance(topic_config, TopicDetails) else []
    target = alert_topics.setdefault(group, {}) if group else alert_topics

    if is_existing_topic(topic_config.topic):
        target[severity] = topic_config.topic
        return

    logical_id = topic_logical_id(severity, group)
    target[severity] = {"Ref": logical_id}
    document.put({logical_id: build_topic_resource(topic_config.topic, notifications)})
    logger.info("Added SNS topic %s (%s)", topic_config.topic, logical_id)


def compile_alert_topics(
    topics_config: Optional[Dict[str, Any]], document: ResourceDocument
) -> Dict[str, Any]:
    """
    Build the action-topic table and emit topics to create.

    Returns
    -------
    dict
        ``{severity: reference}`` for ungrouped topics and
        ``{group: {severity: reference}}`` for grouped ones.
    """
    alert_topics: Dict[str, Any] = {}

    for key, value in (topics_config or {}).items():
        if key in SEVERITIES:
            _add_alert_topic(key, value, alert_topics, document)
        else:
            for severity, group_value in (value or {}).items():
                _add_alert_topic(severity, group_value, alert_topics, document, group=key)

    return alert_topics
