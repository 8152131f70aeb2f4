"""Microsoft Teams incoming-webhook notifier."""

import logging
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp
from yarl import URL

from run_insights.models.insights import InsightScores, ReleaseGate
from run_insights.notifiers.base import Notifier, headline, score_facts
from run_insights.notifiers.teams.config import TeamsConfig

log = logging.getLogger(__name__)

GATE_COLORS: Mapping[ReleaseGate, str] = {
    "READY": "10B981",
    "RISKY": "F59E0B",
    "BLOCKED": "EF4444",
}


@dataclass(frozen=True, kw_only=True)
class TeamsNotifier(Notifier):
    """Posts insight scores to a Teams webhook as a MessageCard."""

    config: TeamsConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: TeamsConfig
    ) -> AsyncGenerator["TeamsNotifier", None]:
        """Create notifier with managed session lifecycle."""
        timeout = aiohttp.ClientTimeout(total=config.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            yield cls(config=config, session=session)

    def build_card(self, title: str, insights: InsightScores) -> dict[str, Any]:
        """MessageCard with one fact per score."""
        text = headline(title, insights)
        card: dict[str, Any] = {
            "@type": "MessageCard",
            "@context": "https://schema.org/extensions",
            "summary": text,
            "themeColor": GATE_COLORS[insights.release_gate],
            "title": text,
            "sections": [
                {
                    "facts": [
                        {"name": name, "value": value}
                        for name, value in score_facts(insights).items()
                    ]
                }
            ],
        }
        if self.config.report_url:
            card["potentialAction"] = [
                {
                    "@type": "OpenUri",
                    "name": "Open report",
                    "targets": [{"os": "default", "uri": self.config.report_url}],
                }
            ]
        return card

    async def send(self, title: str, insights: InsightScores) -> None:
        """Post the card; any 2xx answer counts as delivered."""
        url = URL(self.config.webhook_url.get_secret_value())
        log.info(
            "Sending Teams notification: host=%s gate=%s",
            url.host,
            insights.release_gate,
        )

        async with self.session.post(
            url, json=self.build_card(title, insights)
        ) as response:
            if not 200 <= response.status < 300:
                text = await response.text()
                raise RuntimeError(
                    f"Failed to send Teams notification: {response.status} {text}"
                )
