"""Loading of notifiers from entry points."""

from importlib.metadata import entry_points
from typing import Any

from run_insights.notifiers.manifest import NotifierManifest

ENTRY_POINT_GROUP = "run_insights.notifiers"


class NotifierNotFoundError(Exception):
    """Raised when a notifier is not found."""


def load_notifier_manifest(key: str) -> NotifierManifest[Any]:
    """Load a notifier manifest by key.

    Args:
        key: The notifier key as registered in pyproject.toml
             (e.g., "slack", "teams")

    Returns:
        The notifier manifest instance

    Raises:
        NotifierNotFoundError: If no notifier with the given key is found

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            manifest: NotifierManifest[Any] = entry.load()
            return manifest

    available = [e.name for e in entries]
    raise NotifierNotFoundError(
        f"Notifier '{key}' not found. Available notifiers: {available}"
    )
