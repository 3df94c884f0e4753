"""Capability interface a host uses to drive a cluster plugin."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple, Protocol, runtime_checkable

from mdbake.processor.models import ProcessReport


class PluginIdentity(NamedTuple):
    name: str
    version: str


@runtime_checkable
class ClusterPlugin(Protocol):
    """Processes a whole cluster directory; raises on a fatal failure."""

    def process_cluster(self, cluster_path: Path) -> ProcessReport: ...

    def identify(self) -> PluginIdentity: ...
