"""Incremental rendering of every Markdown document under a cluster root."""

from __future__ import annotations

import logging
from pathlib import Path

from mdbake.config.models import MdBakeConfig
from mdbake.discovery.locator import find_markdown_files
from mdbake.errors import ClusterProcessingError
from mdbake.freshness.checker import artifact_path_for, needs_regeneration
from mdbake.output.writer import ArtifactWriter
from mdbake.processor.events import EventKind, ProcessingEvent, ProcessingObserver, log_event
from mdbake.processor.models import ProcessReport
from mdbake.renderer.markdown import MarkdownRenderer

logger = logging.getLogger(__name__)


class ClusterProcessor:
    """Renders stale documents of a cluster, one at a time.

    In strict mode the first document that cannot be read or written stops
    the run with ClusterProcessingError. Artifacts written before that point
    stay on disk. In lenient mode the failure is recorded on the report and
    the remaining documents are still processed.
    """

    def __init__(
        self,
        config: MdBakeConfig | None = None,
        renderer: MarkdownRenderer | None = None,
        writer: ArtifactWriter | None = None,
        observer: ProcessingObserver | None = None,
    ) -> None:
        self.config = config or MdBakeConfig()
        self.renderer = renderer or MarkdownRenderer.from_config(self.config.render)
        self.writer = writer or ArtifactWriter(self.config.output)
        self.observer = observer or log_event

    def _emit(self, kind: EventKind, root: Path, **fields: str | None) -> None:
        event = ProcessingEvent(kind=kind, root=str(root), **fields)
        try:
            self.observer(event)
        except Exception:
            logger.exception("Observer failed on %s event", kind.value)

    def _image_base(self, source: Path) -> Path | None:
        if self.config.render.image_base == "document":
            return source.parent
        return None

    def process(self, root: str | Path) -> ProcessReport:
        root = Path(root)
        report = ProcessReport(root=str(root))
        self._emit(EventKind.started, root)

        documents = find_markdown_files(root, self.config.render.markdown_extensions)
        for source in documents:
            artifact = artifact_path_for(source, self.config.render.html_extension)

            if not needs_regeneration(source, artifact):
                report.skipped.append(str(source))
                self._emit(EventKind.skipped, root, document=str(source))
                continue

            try:
                self.process_document(source, artifact)
            except ClusterProcessingError as exc:
                cause = exc.__cause__ or exc
                self._emit(EventKind.failed, root, document=str(source), error=str(cause))
                if self.config.processing.strict:
                    raise
                report.failed.append((str(source), str(cause)))
                continue

            report.rendered.add(str(artifact))
            self._emit(EventKind.rendered, root, document=str(source), artifact=str(artifact))

        self._emit(EventKind.finished, root)
        return report

    def process_document(self, source: Path, artifact: Path) -> Path:
        """Read, render and write a single document regardless of timestamps."""
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ClusterProcessingError(source, "read", exc) from exc

        html = self.renderer.render(text, self._image_base(source))

        try:
            return self.writer.write(artifact, html)
        except OSError as exc:
            raise ClusterProcessingError(source, "write", exc) from exc
