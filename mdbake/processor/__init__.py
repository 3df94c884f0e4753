"""Cluster processing: staleness check, render and write per document."""

from mdbake.processor.cluster import ClusterProcessor
from mdbake.processor.events import EventKind, ProcessingEvent, ProcessingObserver, log_event
from mdbake.processor.models import ProcessReport

__all__ = [
    "ClusterProcessor",
    "EventKind",
    "ProcessReport",
    "ProcessingEvent",
    "ProcessingObserver",
    "log_event",
]
