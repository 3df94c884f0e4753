"""The builtin Markdown rendering plugin."""

from __future__ import annotations

from pathlib import Path

from mdbake import __version__
from mdbake.config.models import MdBakeConfig
from mdbake.plugins.interface import PluginIdentity
from mdbake.processor.cluster import ClusterProcessor
from mdbake.processor.events import ProcessingObserver
from mdbake.processor.models import ProcessReport

PLUGIN_NAME = "Markdown rendering"


class MarkdownRenderingPlugin:
    """Renders stale Markdown documents of a cluster to standalone HTML."""

    def __init__(
        self,
        config: MdBakeConfig | None = None,
        observer: ProcessingObserver | None = None,
    ) -> None:
        self._processor = ClusterProcessor(config, observer=observer)

    @property
    def config(self) -> MdBakeConfig:
        return self._processor.config

    def process_cluster(self, cluster_path: Path) -> ProcessReport:
        return self._processor.process(cluster_path)

    def identify(self) -> PluginIdentity:
        return PluginIdentity(self.get_name(), self.get_version())

    def get_name(self) -> str:
        return PLUGIN_NAME

    def get_version(self) -> str:
        return __version__


def create_plugin() -> MarkdownRenderingPlugin:
    """Entry point factory with default configuration."""
    return MarkdownRenderingPlugin()
