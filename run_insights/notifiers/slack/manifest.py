"""Slack notifier manifest."""

from run_insights.notifiers.manifest import NotifierManifest
from run_insights.notifiers.slack.config import SlackConfig
from run_insights.notifiers.slack.notifier import SlackNotifier

slack_manifest = NotifierManifest(
    config_cls=SlackConfig,
    notifier_factory=SlackNotifier.from_config,
)
