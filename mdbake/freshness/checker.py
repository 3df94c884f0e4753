"""Staleness detection for Markdown source / HTML artifact pairs."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from mdbake.config.models import MdBakeConfig
from mdbake.discovery.locator import find_markdown_files

logger = logging.getLogger(__name__)


class Freshness(str, Enum):
    """Decision for one source/artifact pair."""

    stale = "stale"
    current = "current"


class StaleEntry(BaseModel):
    """A document whose artifact has to be regenerated."""

    source_path: str
    artifact_path: str
    reason: str


class StalenessReport(BaseModel):
    """Dry-run view of a cluster: what would be rendered and what is current."""

    stale: list[StaleEntry] = Field(default_factory=list)
    current: list[str] = Field(default_factory=list)
    total_documents: int = 0


def artifact_path_for(source: Path, html_extension: str = ".html") -> Path:
    """Same directory, same stem, HTML suffix."""
    return source.with_suffix(html_extension)


def get_modification_time(path: Path) -> int | None:
    """mtime in nanoseconds, or None when it cannot be read."""
    try:
        return os.stat(path).st_mtime_ns
    except OSError:
        return None


def compare_timestamps(source_ns: int | None, artifact_ns: int | None) -> Freshness:
    """Only a source strictly older than its artifact counts as current.

    Ties are stale: coarse filesystem timestamps can hide a real edit.
    """
    if source_ns is None or artifact_ns is None:
        return Freshness.stale
    if source_ns < artifact_ns:
        return Freshness.current
    return Freshness.stale


def _stale_reason(source_ns: int | None, artifact_ns: int | None) -> str:
    if artifact_ns is None:
        return "artifact missing"
    if source_ns is None:
        return "source timestamp unreadable"
    if source_ns == artifact_ns:
        return "same timestamp"
    return "source newer"


def needs_regeneration(source: Path, artifact: Path) -> bool:
    """True unless the artifact is provably newer than the source."""
    freshness = compare_timestamps(
        get_modification_time(source),
        get_modification_time(artifact),
    )
    return freshness is Freshness.stale


def check_cluster(root: str | Path, config: MdBakeConfig | None = None) -> StalenessReport:
    """Classify every document under *root* without reading or writing anything."""
    config = config or MdBakeConfig()
    documents = find_markdown_files(root, config.render.markdown_extensions)
    report = StalenessReport(total_documents=len(documents))

    for source in documents:
        artifact = artifact_path_for(source, config.render.html_extension)
        source_ns = get_modification_time(source)
        artifact_ns = get_modification_time(artifact)
        if compare_timestamps(source_ns, artifact_ns) is Freshness.current:
            report.current.append(str(source))
            continue
        report.stale.append(StaleEntry(
            source_path=str(source),
            artifact_path=str(artifact),
            reason=_stale_reason(source_ns, artifact_ns),
        ))

    logger.debug(
        "check %s: %d stale, %d current", root, len(report.stale), len(report.current)
    )
    return report
