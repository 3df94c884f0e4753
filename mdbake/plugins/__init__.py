"""Cluster plugin interface, the builtin Markdown plugin, and discovery."""

from mdbake.errors import PluginNotFoundError
from mdbake.plugins.interface import ClusterPlugin, PluginIdentity
from mdbake.plugins.loader import PluginLoader
from mdbake.plugins.markdown_plugin import MarkdownRenderingPlugin, create_plugin

__all__ = [
    "ClusterPlugin",
    "MarkdownRenderingPlugin",
    "PluginIdentity",
    "PluginLoader",
    "PluginNotFoundError",
    "create_plugin",
]
