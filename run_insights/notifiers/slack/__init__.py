"""Slack notifier module."""

from run_insights.notifiers.slack.config import SlackConfig
from run_insights.notifiers.slack.manifest import slack_manifest
from run_insights.notifiers.slack.notifier import SlackNotifier

__all__ = ["SlackConfig", "SlackNotifier", "slack_manifest"]
