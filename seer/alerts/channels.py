"""Notification channels for opportunity alerts.

Each channel posts JSON to an HTTP endpoint and reports success as a bool;
delivery problems are logged, never raised.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from seer.opportunities.schemas import Opportunity

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 300


def build_payload(opportunity: Opportunity) -> dict:
    """Webhook body for one opportunity."""
    description = opportunity.description or ""
    if len(description) > DESCRIPTION_LIMIT:
        description = description[:DESCRIPTION_LIMIT].rstrip() + "..."
    return {
        "id": opportunity.id,
        "title": opportunity.title,
        "description": description,
        "score": opportunity.score,
        "signals": list(opportunity.signals),
        "source": opportunity.source_type,
        "url": opportunity.source_url,
        "detected_at": (
            opportunity.detected_at.isoformat() if opportunity.detected_at else None
        ),
    }


class NotificationChannel(ABC):
    """Abstract base for alert delivery channels."""

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        self._url = url
        self._timeout = timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """Channel label used in logs and metrics."""

    @abstractmethod
    def format(self, opportunity: Opportunity) -> dict:
        """Request body for one opportunity."""

    async def send(self, opportunity: Opportunity) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(self._url, json=self.format(opportunity))
        except httpx.TimeoutException:
            logger.warning(
                "%s alert for opportunity %s timed out", self.name, opportunity.id
            )
            return False
        except httpx.HTTPError as e:
            logger.warning(
                "%s alert for opportunity %s failed: %s", self.name, opportunity.id, e
            )
            return False

        if resp.is_success:
            return True
        logger.warning(
            "%s endpoint returned %d for opportunity %s",
            self.name, resp.status_code, opportunity.id,
        )
        return False


class WebhookChannel(NotificationChannel):
    """Posts the opportunity as plain JSON."""

    @property
    def name(self) -> str:
        return "webhook"

    def format(self, opportunity: Opportunity) -> dict:
        return build_payload(opportunity)


class SlackChannel(NotificationChannel):
    """Posts a short mrkdwn message to a Slack incoming webhook."""

    @property
    def name(self) -> str:
        return "slack"

    def format(self, opportunity: Opportunity) -> dict:
        payload = build_payload(opportunity)
        lines = [
            "*New opportunity detected*",
            f"*{payload['title']}*",
        ]
        if payload["description"]:
            lines.append(payload["description"])
        footer = f"Score: {payload['score']:g} | Source: {payload['source']}"
        if payload["url"]:
            footer += f" | <{payload['url']}|View>"
        lines.append(footer)
        return {"text": "\n".join(lines)}
