"""Integration tests for Microsoft Teams notifier."""

from collections.abc import AsyncGenerator

import pytest
from aioresponses import aioresponses as aioresponses_cls
from pydantic import SecretStr
from yarl import URL

from run_insights.notifiers.teams import TeamsConfig, TeamsNotifier
from run_insights.testing.factories import InsightScoresFactory

WEBHOOK_URL = "http://teams.test/webhookb2/abc/IncomingWebhook/def"
REPORT_URL = "https://ci.example.com/builds/42/report.html"


@pytest.fixture
async def notifier(
    aioresponses: aioresponses_cls,
) -> AsyncGenerator[TeamsNotifier, None]:
    """Create notifier with managed session."""
    config = TeamsConfig(webhook_url=SecretStr(WEBHOOK_URL), report_url=REPORT_URL)
    async with TeamsNotifier.from_config(config) as impl:
        yield impl


class TestSend:
    """Tests for send."""

    async def test_posts_message_card(
        self,
        notifier: TeamsNotifier,
        aioresponses: aioresponses_cls,
    ) -> None:
        """Posts a MessageCard coloured by the release gate."""
        aioresponses.post(WEBHOOK_URL, status=200, body="1")
        insights = InsightScoresFactory.build(release_gate="RISKY", quality_score=77)

        await notifier.send("Nightly", insights)

        card = aioresponses.requests[("POST", URL(WEBHOOK_URL))][0].kwargs["json"]
        assert card["@type"] == "MessageCard"
        assert card["themeColor"] == "F59E0B"
        assert card["title"] == "⚠️ Nightly: RISKY (quality 77)"
        facts = card["sections"][0]["facts"]
        assert {"name": "Quality", "value": "77"} in facts
        action = card["potentialAction"][0]
        assert action["targets"][0]["uri"] == REPORT_URL

    async def test_accepts_any_success_status(
        self,
        notifier: TeamsNotifier,
        aioresponses: aioresponses_cls,
    ) -> None:
        """Workflow-based webhooks answer 202 Accepted."""
        aioresponses.post(WEBHOOK_URL, status=202)

        await notifier.send("Nightly", InsightScoresFactory.build())

    async def test_omits_action_without_report_url(
        self, aioresponses: aioresponses_cls
    ) -> None:
        aioresponses.post(WEBHOOK_URL, status=200)
        config = TeamsConfig(webhook_url=SecretStr(WEBHOOK_URL))

        async with TeamsNotifier.from_config(config) as notifier:
            await notifier.send("Nightly", InsightScoresFactory.build())

        card = aioresponses.requests[("POST", URL(WEBHOOK_URL))][0].kwargs["json"]
        assert "potentialAction" not in card
        assert card["themeColor"] == "10B981"

    async def test_raises_on_error_status(
        self,
        notifier: TeamsNotifier,
        aioresponses: aioresponses_cls,
    ) -> None:
        """Raises RuntimeError for non-2xx answers."""
        aioresponses.post(WEBHOOK_URL, status=400, body="Bad payload")

        with pytest.raises(
            RuntimeError, match="Failed to send Teams notification: 400 Bad payload"
        ):
            await notifier.send("Nightly", InsightScoresFactory.build())
