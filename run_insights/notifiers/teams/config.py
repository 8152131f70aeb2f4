"""Configuration for the Microsoft Teams notifier."""

from pydantic import BaseModel, SecretStr


class TeamsConfig(BaseModel):
    """Configuration for the Microsoft Teams incoming-webhook notifier."""

    webhook_url: SecretStr
    report_url: str | None = None
    timeout: float = 10.0
