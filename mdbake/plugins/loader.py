"""Dynamic plugin discovery and loading via entry points."""

from __future__ import annotations

import importlib.metadata
import logging

from mdbake.errors import PluginNotFoundError
from mdbake.plugins.interface import ClusterPlugin

logger = logging.getLogger(__name__)


class PluginLoader:
    """Discovers and loads cluster plugins via entry points."""

    GROUP = "mdbake.plugins.cluster"

    # Used when no entry points are installed (e.g. running from a checkout)
    BUILTIN = {
        "markdown": ("mdbake.plugins.markdown_plugin", "create_plugin"),
    }

    DEFAULT_NAME = "markdown"

    def discover(self) -> list[str]:
        """Names of all registered cluster plugins, builtins included."""
        names = [ep.name for ep in importlib.metadata.entry_points(group=self.GROUP)]
        for name in self.BUILTIN:
            if name not in names:
                names.append(name)
        return names

    def _load_from_entry_point(self, name: str) -> object | None:
        for ep in importlib.metadata.entry_points(group=self.GROUP):
            if ep.name == name:
                return ep.load()
        return None

    def _load_builtin(self, name: str) -> object | None:
        if name not in self.BUILTIN:
            return None
        module_path, attr = self.BUILTIN[name]
        try:
            module = __import__(module_path, fromlist=[attr])
            return getattr(module, attr)
        except (ImportError, AttributeError):
            logger.warning("Builtin plugin %s could not be imported", name, exc_info=True)
            return None

    def load(self, name: str | None = None) -> ClusterPlugin:
        """Instantiate the named plugin: entry points first, then builtins."""
        resolved = name or self.DEFAULT_NAME
        factory = self._load_from_entry_point(resolved) or self._load_builtin(resolved)
        if factory is None:
            raise PluginNotFoundError("cluster", resolved)

        plugin = factory() if callable(factory) else factory
        if not isinstance(plugin, ClusterPlugin):
            raise PluginNotFoundError("cluster", resolved)
        return plugin
