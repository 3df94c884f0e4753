"""Embedding local image files as base64 data URIs."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from html import escape
from pathlib import Path

from mdbake.errors import ImageInlineError

logger = logging.getLogger(__name__)

MIME_TYPES: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "png": "image/png",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

_NON_LOCAL_PREFIXES = ("http://", "https://", "//", "data:", "ftp://")


@dataclass(frozen=True)
class InlinedImage:
    """An image reference resolved to embeddable bytes."""

    reference: str
    mime_type: str
    data: str  # base64 text

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def to_html(self) -> str:
        return f'<img src="{escape(self.data_uri, quote=True)}" />'


def mime_type_for(path: str | Path) -> str:
    """Fixed extension mapping; unknown or missing extensions fall back to octet-stream."""
    ext = Path(path).suffix.lstrip(".").lower()
    return MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def is_local_reference(reference: str) -> bool:
    return bool(reference) and not reference.lower().startswith(_NON_LOCAL_PREFIXES)


def resolve_reference(reference: str, base_dir: str | Path | None = None) -> Path:
    """Absolute references stay as they are; relative ones join *base_dir* if given."""
    path = Path(reference)
    if path.is_absolute() or base_dir is None:
        return path
    return Path(base_dir) / path


def inline_image(reference: str, base_dir: str | Path | None = None) -> InlinedImage:
    """Read a local image and encode it.

    Raises ImageInlineError when the reference is not a local file or cannot
    be read; the caller keeps the original reference in that case.
    """
    if not is_local_reference(reference):
        raise ImageInlineError(reference, "not a local file reference")

    path = resolve_reference(reference, base_dir)
    try:
        with open(path, "rb") as fh:
            payload = fh.read()
    except OSError as exc:
        raise ImageInlineError(reference, exc.strerror or str(exc), cause=exc) from exc

    logger.debug("Inlined %s (%d bytes)", path, len(payload))
    return InlinedImage(
        reference=reference,
        mime_type=mime_type_for(path),
        data=base64.b64encode(payload).decode("ascii"),
    )
