"""Artifact output."""

from mdbake.output.writer import ArtifactWriter

__all__ = ["ArtifactWriter"]
