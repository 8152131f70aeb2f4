"""Microsoft Teams notifier module."""

from run_insights.notifiers.teams.config import TeamsConfig
from run_insights.notifiers.teams.manifest import teams_manifest
from run_insights.notifiers.teams.notifier import TeamsNotifier

__all__ = ["TeamsConfig", "TeamsNotifier", "teams_manifest"]
