"""Lifecycle events emitted while a cluster is processed."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    started = "started"
    skipped = "skipped"
    rendered = "rendered"
    failed = "failed"
    finished = "finished"


class ProcessingEvent(BaseModel):
    kind: EventKind
    root: str
    document: str | None = None
    artifact: str | None = None
    error: str | None = None


ProcessingObserver = Callable[[ProcessingEvent], None]


def log_event(event: ProcessingEvent) -> None:
    """Default observer: route events to the module logger."""
    if event.kind is EventKind.started:
        logger.info("Start processing cluster %s", event.root)
    elif event.kind is EventKind.skipped:
        logger.debug("Artifact is newer than %s, skipping", event.document)
    elif event.kind is EventKind.rendered:
        logger.info("Rendered %s -> %s", event.document, event.artifact)
    elif event.kind is EventKind.failed:
        logger.error("Failed %s: %s", event.document, event.error)
    else:
        logger.info("Done processing cluster %s", event.root)
