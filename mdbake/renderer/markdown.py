"""Markdown to self-contained HTML.

Conversion is done by Python-Markdown. A tree processor runs last, once
inline patterns have produced ``<img>`` elements and escapes have been
restored, and swaps each element's ``src`` for a data URI. Raw HTML
in the source is still held in the HTML stash at that point, so only images
written with Markdown syntax are touched: ``![alt](path)`` and the
reference form ``![alt][ref]``.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as etree
from collections.abc import Iterable
from pathlib import Path

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from mdbake.config.models import RenderConfig
from mdbake.errors import ImageInlineError
from mdbake.renderer.images import InlinedImage, inline_image

logger = logging.getLogger(__name__)

# Runs after "unescape" (0) so backslash escapes in src are already resolved
_PRIORITY = -1


class ImageInliningTreeprocessor(Treeprocessor):
    def __init__(self, md: markdown.Markdown, base_dir: Path | None = None) -> None:
        super().__init__(md)
        self.base_dir = base_dir
        self.inlined = 0
        self.failed = 0

    def run(self, root: etree.Element) -> None:
        resolved: dict[str, InlinedImage | None] = {}
        for img in root.iter("img"):
            src = img.get("src")
            if not src:
                continue
            if src not in resolved:
                resolved[src] = self._try_inline(src)
            image = resolved[src]
            if image is None:
                self.failed += 1
                continue
            img.set("src", image.data_uri)
            self.inlined += 1

    def _try_inline(self, src: str) -> InlinedImage | None:
        try:
            return inline_image(src, self.base_dir)
        except ImageInlineError as exc:
            logger.debug("Leaving image reference as is: %s", exc)
            return None


class ImageInliningExtension(Extension):
    def __init__(self, base_dir: Path | None = None, **kwargs) -> None:
        self.base_dir = base_dir
        self.processor: ImageInliningTreeprocessor | None = None
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        self.processor = ImageInliningTreeprocessor(md, self.base_dir)
        md.treeprocessors.register(self.processor, "mdbake_inline_images", _PRIORITY)


class MarkdownRenderer:
    """Renders Markdown text into an HTML fragment with embedded images."""

    def __init__(
        self,
        extensions: Iterable[str] = ("fenced_code", "tables"),
        inline_images: bool = True,
    ) -> None:
        self.extensions = list(extensions)
        self.inline_images = inline_images

    @classmethod
    def from_config(cls, config: RenderConfig) -> MarkdownRenderer:
        return cls(extensions=config.extensions, inline_images=config.inline_images)

    def _build(self, base_dir: Path | None) -> tuple[markdown.Markdown, ImageInliningExtension | None]:
        extensions: list = list(self.extensions)
        inliner = None
        if self.inline_images:
            inliner = ImageInliningExtension(base_dir=base_dir)
            extensions.append(inliner)
        return markdown.Markdown(extensions=extensions), inliner

    def render(self, text: str, base_dir: str | Path | None = None) -> str:
        """Convert *text*; relative image paths resolve against *base_dir* (or the cwd)."""
        md, inliner = self._build(Path(base_dir) if base_dir is not None else None)
        html = md.convert(text)
        if inliner is not None and inliner.processor is not None:
            logger.debug(
                "Rendered %d chars: %d image(s) inlined, %d left as is",
                len(html),
                inliner.processor.inlined,
                inliner.processor.failed,
            )
        return html


def markdown_to_html_with_inlined_images(text: str, base_dir: str | Path | None = None) -> str:
    """Render with the default extension set."""
    return MarkdownRenderer().render(text, base_dir)
