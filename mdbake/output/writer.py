"""ArtifactWriter: puts rendered HTML next to its Markdown source."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from mdbake.config.models import OutputConfig

logger = logging.getLogger(__name__)


def _target_mode(dest: Path) -> int:
    """Keep the permissions of an artifact being replaced; 0o644 for new ones."""
    try:
        return dest.stat().st_mode & 0o777
    except OSError:
        return 0o644


class ArtifactWriter:
    """Writes rendered HTML to an artifact path, overwriting what is there.

    With ``atomic_write`` the content goes to a temp file in the target
    directory which is fsynced and renamed over the artifact, so readers see
    either the previous complete file or the new one.
    """

    def __init__(self, config: OutputConfig | None = None) -> None:
        self.config = config or OutputConfig()

    def write(self, dest: Path, html: str) -> Path:
        """Write *html* to *dest* verbatim. OSError propagates to the caller."""
        dest = Path(dest)
        if self.config.atomic_write:
            self._write_atomic(dest, html)
        else:
            with open(dest, "w", encoding=self.config.encoding, newline="") as fh:
                fh.write(html)
        logger.info("wrote %s (%d chars)", dest, len(html))
        return dest

    def _write_atomic(self, dest: Path, html: str) -> None:
        mode = _target_mode(dest)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{dest.name}.", suffix=".tmp", dir=dest.parent
        )
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding=self.config.encoding, newline="") as fh:
                fh.write(html)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp, mode)
            os.replace(tmp, dest)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
