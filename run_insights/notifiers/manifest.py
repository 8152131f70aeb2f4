"""Notifier manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from pydantic import BaseModel

from run_insights.notifiers.base import Notifier


@dataclass(frozen=True, kw_only=True)
class NotifierManifest[ConfigT: BaseModel]:
    """Manifest describing a notifier plugin.

    The manifest contains references to the configuration class and the
    notifier factory function for lazy loading of notifiers based on their key.
    """

    config_cls: type[ConfigT]
    notifier_factory: Callable[[ConfigT], AbstractAsyncContextManager[Notifier]]
