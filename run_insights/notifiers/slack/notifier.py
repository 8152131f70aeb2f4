"""Slack incoming-webhook notifier."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from yarl import URL

from run_insights.models.insights import InsightScores
from run_insights.notifiers.base import Notifier, headline, score_facts
from run_insights.notifiers.slack.config import SlackConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SlackNotifier(Notifier):
    """Posts insight scores to a Slack incoming webhook."""

    config: SlackConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: SlackConfig
    ) -> AsyncGenerator["SlackNotifier", None]:
        """Create notifier with managed session lifecycle."""
        timeout = aiohttp.ClientTimeout(total=config.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            yield cls(config=config, session=session)

    def build_message(self, title: str, insights: InsightScores) -> dict[str, Any]:
        """Slack message with a plain-text fallback and a fields section."""
        text = headline(title, insights)
        message: dict[str, Any] = {
            "text": text,
            "username": self.config.username,
            "blocks": [
                {"type": "section", "text": {"type": "mrkdwn", "text": f"*{text}*"}},
                {
                    "type": "section",
                    "fields": [
                        {"type": "mrkdwn", "text": f"*{label}*\n{value}"}
                        for label, value in score_facts(insights).items()
                    ],
                },
            ],
        }
        if self.config.channel:
            message["channel"] = self.config.channel
        return message

    async def send(self, title: str, insights: InsightScores) -> None:
        """Post the message; any 2xx answer counts as delivered."""
        url = URL(self.config.webhook_url.get_secret_value())
        log.info(
            "Sending Slack notification: host=%s gate=%s",
            url.host,
            insights.release_gate,
        )

        async with self.session.post(
            url, json=self.build_message(title, insights)
        ) as response:
            if not 200 <= response.status < 300:
                text = await response.text()
                raise RuntimeError(
                    f"Failed to send Slack notification: {response.status} {text}"
                )
