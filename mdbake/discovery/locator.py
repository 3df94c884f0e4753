"""Recursive discovery of Markdown documents under a cluster root."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MARKDOWN_EXTENSIONS: tuple[str, ...] = (".md",)


def _log_walk_error(err: OSError) -> None:
    logger.debug("Skipping unreadable entry %s: %s", err.filename, err.strerror)


def is_markdown_file(path: Path, extensions: Iterable[str] = DEFAULT_MARKDOWN_EXTENSIONS) -> bool:
    """True when *path* carries one of the Markdown suffixes."""
    return path.suffix in set(extensions)


def find_markdown_files(
    root: str | Path,
    extensions: Iterable[str] = DEFAULT_MARKDOWN_EXTENSIONS,
) -> list[Path]:
    """Return every regular Markdown file below *root*.

    Best-effort: directories that cannot be listed are skipped, and directory
    symlinks are not followed so link cycles cannot loop. The result is sorted
    to keep processing order stable between runs.
    """
    root = Path(root)
    suffixes = set(extensions)
    found: list[Path] = []

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_log_walk_error, followlinks=False):
        for name in filenames:
            candidate = Path(dirpath) / name
            if candidate.suffix not in suffixes:
                continue
            try:
                if not candidate.is_file():
                    continue
            except OSError:
                continue
            found.append(candidate)

    return sorted(found)
