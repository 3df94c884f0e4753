"""Freshness tracking: staleness decisions and change watching."""

from mdbake.freshness.checker import (
    Freshness,
    StaleEntry,
    StalenessReport,
    artifact_path_for,
    check_cluster,
    compare_timestamps,
    get_modification_time,
    needs_regeneration,
)
from mdbake.freshness.watcher import ClusterWatcher

__all__ = [
    "ClusterWatcher",
    "Freshness",
    "StaleEntry",
    "StalenessReport",
    "artifact_path_for",
    "check_cluster",
    "compare_timestamps",
    "get_modification_time",
    "needs_regeneration",
]
