"""mdbake - incremental Markdown to self-contained HTML rendering."""

from mdbake.config import MdBakeConfig, load_config
from mdbake.processor import ClusterProcessor, ProcessReport
from mdbake.renderer import MarkdownRenderer, inline_image

__version__ = "0.1.0"

__all__ = [
    "ClusterProcessor",
    "MarkdownRenderer",
    "MdBakeConfig",
    "ProcessReport",
    "__version__",
    "inline_image",
    "load_config",
]
