"""
Plugin registry.

Plugins are initialized once at startup with the workflow manager, where
they typically add rules, events or listeners.
"""

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from workflow_fsm.core.imports import import_object

if TYPE_CHECKING:
    from workflow_fsm.core.state_machine import WorkflowManager

logger = logging.getLogger(__name__)


@runtime_checkable
class Plugin(Protocol):
    """Extension point invoked at startup."""

    def initialize(self, manager: "WorkflowManager") -> None:
        ...


class PluginManager:
    """Ordered list of registered plugins."""

    def __init__(self):
        self._plugins: list[Plugin] = []

    @property
    def plugins(self) -> list[Plugin]:
        return self._plugins.copy()

    def register(self, plugin: Plugin) -> None:
        if not isinstance(plugin, Plugin):
            raise TypeError(f"{plugin!r} does not implement initialize(manager)")
        self._plugins.append(plugin)

    def initialize_plugins(self, manager: "WorkflowManager") -> None:
        for plugin in self._plugins:
            logger.info(f"Initializing plugin {type(plugin).__name__}")
            plugin.initialize(manager)


def load_plugin(path: str) -> Plugin:
    """
    Load a plugin from an import string.

    The target may be a plugin instance or a class/factory taking no
    arguments.
    """
    obj: Any = import_object(path)
    if isinstance(obj, type) or (callable(obj) and not isinstance(obj, Plugin)):
        obj = obj()
    if not isinstance(obj, Plugin):
        raise TypeError(f"{path} is not a plugin")
    return obj
