"""Tests for ClusterProcessor: incremental rendering, events, and failure modes."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from conftest import set_mtime
from mdbake.config.models import MdBakeConfig
from mdbake.errors import ClusterProcessingError
from mdbake.processor import ClusterProcessor, EventKind, ProcessingEvent, ProcessReport

T0 = 1_700_000_000_000_000_000
SECOND = 1_000_000_000


def _processor(config: MdBakeConfig | None = None, events: list | None = None) -> ClusterProcessor:
    observer = events.append if events is not None else None
    return ClusterProcessor(config, observer=observer)


# ── End-to-end scenarios ─────────────────────────────────────────────


class TestScenarios:
    def test_missing_image_document(self, tmp_path: Path):
        (tmp_path / "a.md").write_text("# Title\n![x](missing.png)")

        report = _processor().process(tmp_path)

        out = tmp_path / "a.html"
        assert report.rendered == {str(out)}
        html = out.read_text()
        assert "<h1>Title</h1>" in html
        assert 'src="missing.png"' in html
        assert "data:" not in html

    def test_single_byte_png(self, tmp_path: Path):
        (tmp_path / "b.md").write_text("![logo](logo.png)")
        (tmp_path / "logo.png").write_bytes(bytes([0x89]))

        _processor().process(tmp_path)

        assert "data:image/png;base64,iQ==" in (tmp_path / "b.html").read_text()

    def test_whole_cluster(self, cluster: Path):
        report = _processor().process(cluster)

        assert report.rendered == {
            str(cluster / "index.html"),
            str(cluster / "notes.html"),
            str(cluster / "guide" / "setup.html"),
        }
        assert report.skipped == []
        setup = (cluster / "guide" / "setup.html").read_text()
        assert "data:image/png;base64," in setup
        assert not (cluster / "readme.html").exists()

    def test_non_empty_output_for_non_empty_source(self, cluster: Path):
        _processor().process(cluster)
        for html in cluster.rglob("*.html"):
            assert html.read_text().strip()

    def test_cwd_image_policy(self, tmp_path: Path, monkeypatch):
        docs = tmp_path / "docs"
        docs.mkdir()
        (docs / "page.md").write_text("![p](pic.png)")
        (tmp_path / "pic.png").write_bytes(b"\x89")
        monkeypatch.chdir(tmp_path)

        config = MdBakeConfig(render={"image_base": "cwd"})
        _processor(config).process(docs)

        assert "data:image/png;base64,iQ==" in (docs / "page.html").read_text()

    def test_document_image_policy_ignores_cwd(self, tmp_path: Path, monkeypatch):
        docs = tmp_path / "docs"
        docs.mkdir()
        (docs / "page.md").write_text("![p](pic.png)")
        (tmp_path / "pic.png").write_bytes(b"\x89")
        monkeypatch.chdir(tmp_path)

        _processor().process(docs)

        assert 'src="pic.png"' in (docs / "page.html").read_text()


# ── Incremental behaviour ────────────────────────────────────────────


class TestIncremental:
    def test_current_artifact_untouched(self, tmp_path: Path):
        source = tmp_path / "doc.md"
        artifact = tmp_path / "doc.html"
        source.write_text("# New content")
        artifact.write_bytes(b"<p>hand edited</p>")
        set_mtime(source, T0)
        set_mtime(artifact, T0 + SECOND)

        report = _processor().process(tmp_path)

        assert report.rendered == set()
        assert report.skipped == [str(source)]
        assert artifact.read_bytes() == b"<p>hand edited</p>"
        assert artifact.stat().st_mtime_ns == T0 + SECOND

    def test_equal_timestamps_rerender(self, tmp_path: Path):
        source = tmp_path / "doc.md"
        artifact = tmp_path / "doc.html"
        source.write_text("# Fresh")
        artifact.write_text("stale")
        set_mtime(source, T0)
        set_mtime(artifact, T0)

        report = _processor().process(tmp_path)

        assert report.rendered == {str(artifact)}
        assert "<h1>Fresh</h1>" in artifact.read_text()

    def test_source_newer_rerender(self, tmp_path: Path):
        source = tmp_path / "doc.md"
        artifact = tmp_path / "doc.html"
        source.write_text("# v2")
        artifact.write_text("<h1>v1</h1>")
        set_mtime(artifact, T0)
        set_mtime(source, T0 + SECOND)

        _processor().process(tmp_path)

        assert "<h1>v2</h1>" in artifact.read_text()

    def test_second_run_renders_nothing(self, cluster: Path):
        processor = _processor()
        processor.process(cluster)
        # Push sources into the past so artifacts are strictly newer
        for md in cluster.rglob("*.md"):
            set_mtime(md, T0)

        report = processor.process(cluster)
        assert report.rendered == set()
        assert len(report.skipped) == 3

    def test_rerender_is_byte_identical(self, cluster: Path):
        processor = _processor()
        processor.process(cluster)
        first = (cluster / "guide" / "setup.html").read_bytes()
        set_mtime(cluster / "guide" / "setup.html", T0)

        processor.process(cluster)
        assert (cluster / "guide" / "setup.html").read_bytes() == first

    def test_empty_cluster(self, tmp_path: Path):
        report = _processor().process(tmp_path)
        assert report == ProcessReport(root=str(tmp_path))
        assert report.total == 0


# ── Events ───────────────────────────────────────────────────────────


class TestEvents:
    def test_event_sequence(self, tmp_path: Path):
        (tmp_path / "a.md").write_text("# a")
        (tmp_path / "b.md").write_text("# b")
        (tmp_path / "b.html").write_text("<h1>b</h1>")
        set_mtime(tmp_path / "b.md", T0)
        set_mtime(tmp_path / "b.html", T0 + SECOND)

        events: list[ProcessingEvent] = []
        _processor(events=events).process(tmp_path)

        kinds = [e.kind for e in events]
        assert kinds == [EventKind.started, EventKind.rendered, EventKind.skipped, EventKind.finished]
        assert events[1].document == str(tmp_path / "a.md")
        assert events[1].artifact == str(tmp_path / "a.html")
        assert events[2].document == str(tmp_path / "b.md")
        assert all(e.root == str(tmp_path) for e in events)

    def test_failing_observer_does_not_break_run(self, tmp_path: Path):
        (tmp_path / "a.md").write_text("# a")
        observer = MagicMock(side_effect=RuntimeError("observer down"))

        report = ClusterProcessor(observer=observer).process(tmp_path)

        assert report.rendered == {str(tmp_path / "a.html")}
        assert observer.call_count == 3

    def test_default_observer_logs(self, tmp_path: Path, caplog):
        (tmp_path / "a.md").write_text("# a")
        with caplog.at_level("INFO", logger="mdbake"):
            ClusterProcessor().process(tmp_path)
        assert "Start processing cluster" in caplog.text
        assert "Done processing cluster" in caplog.text


# ── Failures ─────────────────────────────────────────────────────────


def _unreadable_first(tmp_path: Path) -> None:
    # Invalid UTF-8 fails the read even when running as root
    (tmp_path / "a.md").write_bytes(b"\xff\xfe\xfa broken")
    (tmp_path / "b.md").write_text("# fine")


class TestFailures:
    def test_strict_stops_at_first_unreadable(self, tmp_path: Path):
        _unreadable_first(tmp_path)
        events: list[ProcessingEvent] = []

        with pytest.raises(ClusterProcessingError) as exc_info:
            _processor(events=events).process(tmp_path)

        assert exc_info.value.document == tmp_path / "a.md"
        assert exc_info.value.operation == "read"
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
        assert not (tmp_path / "b.html").exists()
        assert events[-1].kind is EventKind.failed
        assert events[-1].document == str(tmp_path / "a.md")

    def test_earlier_output_kept_after_failure(self, tmp_path: Path):
        (tmp_path / "a.md").write_text("# first")
        (tmp_path / "b.md").write_bytes(b"\xff\xfe")

        with pytest.raises(ClusterProcessingError):
            _processor().process(tmp_path)

        assert "<h1>first</h1>" in (tmp_path / "a.html").read_text()

    def test_lenient_continues(self, tmp_path: Path, lenient_config):
        _unreadable_first(tmp_path)

        report = _processor(lenient_config).process(tmp_path)

        assert report.rendered == {str(tmp_path / "b.html")}
        assert len(report.failed) == 1
        assert report.failed[0][0] == str(tmp_path / "a.md")
        assert not (tmp_path / "a.html").exists()

    def test_write_failure(self, tmp_path: Path):
        source = tmp_path / "c.md"
        source.write_text("# c")
        # A directory in the artifact's place cannot be overwritten
        (tmp_path / "c.html").mkdir()
        set_mtime(tmp_path / "c.html", T0)
        set_mtime(source, T0 + SECOND)

        with pytest.raises(ClusterProcessingError) as exc_info:
            _processor().process(tmp_path)

        assert exc_info.value.operation == "write"
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_process_document_ignores_timestamps(self, tmp_path: Path):
        source = tmp_path / "doc.md"
        artifact = tmp_path / "doc.html"
        source.write_text("# forced")
        artifact.write_text("old")
        set_mtime(source, T0)
        set_mtime(artifact, T0 + SECOND)

        _processor().process_document(source, artifact)
        assert "<h1>forced</h1>" in artifact.read_text()
