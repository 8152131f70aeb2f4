"""Configuration for the Slack notifier."""

from pydantic import BaseModel, SecretStr


class SlackConfig(BaseModel):
    """Configuration for the Slack incoming-webhook notifier."""

    webhook_url: SecretStr
    channel: str | None = None
    username: str = "run-insights"
    timeout: float = 10.0
