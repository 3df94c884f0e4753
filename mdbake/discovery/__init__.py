"""Markdown document discovery."""

from mdbake.discovery.locator import (
    DEFAULT_MARKDOWN_EXTENSIONS,
    find_markdown_files,
    is_markdown_file,
)

__all__ = ["DEFAULT_MARKDOWN_EXTENSIONS", "find_markdown_files", "is_markdown_file"]
