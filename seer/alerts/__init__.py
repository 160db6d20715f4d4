"""Pro-plan alerts for newly detected high-scoring opportunities."""

from seer.alerts.channels import NotificationChannel, SlackChannel, WebhookChannel
from seer.alerts.config import AlertConfig
from seer.alerts.notifier import AlertNotifier

__all__ = [
    "AlertConfig",
    "AlertNotifier",
    "NotificationChannel",
    "SlackChannel",
    "WebhookChannel",
]
