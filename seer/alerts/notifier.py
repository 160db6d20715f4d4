"""Sends alerts for newly stored opportunities above a score threshold."""

import asyncio

import structlog

from seer.alerts.channels import NotificationChannel, SlackChannel, WebhookChannel
from seer.alerts.config import AlertConfig
from seer.observability.metrics import get_metrics
from seer.opportunities.schemas import Opportunity

logger = structlog.get_logger(__name__)


class AlertNotifier:
    """Fans qualifying opportunities out to every configured channel.

    Delivery failures are logged and counted; they never fail the fetch
    that produced the opportunities.
    """

    def __init__(self, channels: list[NotificationChannel], min_score: float) -> None:
        self._channels = channels
        self._min_score = min_score

    @property
    def channels(self) -> list[NotificationChannel]:
        return self._channels

    @property
    def min_score(self) -> float:
        return self._min_score

    @classmethod
    def from_config(cls, config: AlertConfig | None = None) -> "AlertNotifier | None":
        """Build a notifier, or None when alerts are off or have nowhere to go."""
        config = config or AlertConfig()
        if not config.enabled or not config.has_destination:
            return None

        channels: list[NotificationChannel] = []
        if config.webhook_url:
            channels.append(WebhookChannel(config.webhook_url, config.timeout_seconds))
        if config.slack_webhook_url:
            channels.append(SlackChannel(config.slack_webhook_url, config.timeout_seconds))
        return cls(channels, config.min_score)

    def qualifies(self, opportunity: Opportunity) -> bool:
        return opportunity.score >= self._min_score

    async def notify(self, opportunities: list[Opportunity]) -> int:
        """Alert on each qualifying opportunity. Returns successful deliveries."""
        hits = [o for o in opportunities if self.qualifies(o)]
        if not hits or not self._channels:
            return 0

        pairs = [(channel, opp) for opp in hits for channel in self._channels]
        results = await asyncio.gather(*(channel.send(opp) for channel, opp in pairs))

        metrics = get_metrics()
        for (channel, _), ok in zip(pairs, results):
            metrics.record_alert(channel.name, "sent" if ok else "failed")

        sent = sum(1 for ok in results if ok)
        logger.info(
            "Alerts dispatched",
            opportunities=len(hits),
            deliveries=len(pairs),
            sent=sent,
        )
        return sent
