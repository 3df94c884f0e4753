"""File watcher with debounce that re-processes a cluster on change."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

_IGNORE_PARTS = {".git", "node_modules", "__pycache__"}

# Files whose change can alter a rendered artifact
_IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".svg"}


def _should_ignore(path: str) -> bool:
    """Return True if the path contains any ignored directory component."""
    parts = Path(path).parts
    return any(part in _IGNORE_PARTS for part in parts)


class _DebouncedHandler(FileSystemEventHandler):
    """Collects relevant events and fires the trigger after a quiet period."""

    def __init__(
        self,
        debounce_seconds: float,
        watched_suffixes: set[str],
        trigger: Callable[[set[str]], None],
    ) -> None:
        super().__init__()
        self._debounce = debounce_seconds
        self._suffixes = watched_suffixes
        self._trigger = trigger
        self._pending: set[str] = set()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def _relevant(self, path: str) -> bool:
        if _should_ignore(path):
            return False
        return Path(path).suffix.lower() in self._suffixes

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        paths = [event.src_path]
        dest = getattr(event, "dest_path", "")
        if dest:
            paths.append(dest)
        relevant = {str(p) for p in paths if self._relevant(str(p))}
        if not relevant:
            return

        with self._lock:
            self._pending.update(relevant)
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._flush)
            self._timer.daemon = True
            self._timer.start()

    def _flush(self) -> None:
        with self._lock:
            changed = set(self._pending)
            self._pending.clear()
            self._timer = None
        if not changed:
            return
        try:
            self._trigger(changed)
        except Exception:
            logger.exception("Watch trigger failed for %d change(s)", len(changed))

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()


class ClusterWatcher:
    """Watches a cluster root and calls *on_change* after edits settle.

    Only Markdown sources and image files are tracked; the HTML artifacts the
    callback itself writes do not retrigger it. Callback runs are serialised.
    """

    def __init__(
        self,
        root: Path,
        on_change: Callable[[set[str]], None],
        debounce_seconds: float = 1.0,
        markdown_extensions: Iterable[str] = (".md",),
    ) -> None:
        self._root = Path(root).resolve()
        self._on_change = on_change
        self._run_lock = threading.Lock()
        self._observer: Observer | None = None
        self.runs = 0
        suffixes = {ext.lower() for ext in markdown_extensions} | _IMAGE_SUFFIXES
        self._handler = _DebouncedHandler(
            debounce_seconds=debounce_seconds,
            watched_suffixes=suffixes,
            trigger=self._run,
        )

    def _run(self, changed: set[str]) -> None:
        with self._run_lock:
            logger.info("Detected %d change(s) under %s", len(changed), self._root)
            self._on_change(changed)
            self.runs += 1

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        """Begin watching the cluster root recursively."""
        if self._observer is not None:
            return
        self._observer = Observer()
        self._observer.schedule(self._handler, str(self._root), recursive=True)
        self._observer.start()
        logger.info("Watching %s for changes", self._root)

    def stop(self) -> None:
        """Stop watching and drop pending events."""
        if self._observer is None:
            return
        self._handler.cancel()
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info("Stopped watching %s", self._root)

    def run_forever(self, poll_interval: float = 0.5) -> None:
        """Block until interrupted, then stop the observer."""
        self.start()
        try:
            while True:
                time.sleep(poll_interval)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
