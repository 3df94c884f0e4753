"""Exception types raised by the rendering pipeline."""

from __future__ import annotations

from pathlib import Path


class MdBakeError(Exception):
    """Base class for all mdbake errors."""


class ImageInlineError(MdBakeError):
    """An image reference could not be embedded into the HTML output."""

    def __init__(self, reference: str, reason: str, cause: Exception | None = None) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Cannot inline image '{reference}': {reason}")
        if cause is not None:
            self.__cause__ = cause


class ClusterProcessingError(MdBakeError):
    """Fatal per-document I/O failure that aborts a cluster run."""

    def __init__(self, document: Path, operation: str, cause: Exception) -> None:
        self.document = Path(document)
        self.operation = operation
        super().__init__(f"{operation} failed for {self.document}: {cause}")
        self.__cause__ = cause


class PluginNotFoundError(MdBakeError):
    """Raised when a requested plugin cannot be found."""

    def __init__(self, plugin_type: str, name: str | None = None):
        self.plugin_type = plugin_type
        self.name = name
        msg = f"No {plugin_type} plugin found"
        if name:
            msg += f" with name '{name}'"
        super().__init__(msg)
