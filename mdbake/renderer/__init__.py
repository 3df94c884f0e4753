"""Markdown rendering with inline image embedding."""

from mdbake.renderer.images import (
    DEFAULT_MIME_TYPE,
    MIME_TYPES,
    InlinedImage,
    inline_image,
    mime_type_for,
)
from mdbake.renderer.markdown import (
    ImageInliningExtension,
    MarkdownRenderer,
    markdown_to_html_with_inlined_images,
)

__all__ = [
    "DEFAULT_MIME_TYPE",
    "ImageInliningExtension",
    "InlinedImage",
    "MIME_TYPES",
    "MarkdownRenderer",
    "inline_image",
    "markdown_to_html_with_inlined_images",
    "mime_type_for",
]
