"""Pydantic models for cluster processing results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProcessReport(BaseModel):
    """Outcome of one cluster run."""

    root: str
    rendered: set[str] = Field(default_factory=set)  # artifact paths
    skipped: list[str] = Field(default_factory=list)  # source paths
    failed: list[tuple[str, str]] = Field(default_factory=list)  # (source, error), lenient mode only

    @property
    def total(self) -> int:
        return len(self.rendered) + len(self.skipped) + len(self.failed)
