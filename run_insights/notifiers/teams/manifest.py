"""Microsoft Teams notifier manifest."""

from run_insights.notifiers.manifest import NotifierManifest
from run_insights.notifiers.teams.config import TeamsConfig
from run_insights.notifiers.teams.notifier import TeamsNotifier

teams_manifest = NotifierManifest(
    config_cls=TeamsConfig,
    notifier_factory=TeamsNotifier.from_config,
)
