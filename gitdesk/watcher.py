"""
Repository change notifications.

Watches working trees with watchdog and reports debounced change events,
ignoring build output, editor lock files and the .git directory itself
(reading status rewrites .git/index, which would otherwise loop).
"""

import logging
import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from gitdesk.constants import DEFAULT_DEBOUNCE_MS

logger = logging.getLogger(__name__)

IGNORED_FRAGMENTS = ("node_modules", "/dist/", "/target/", ".DS_Store", "/.git/", ".lock")

CHANGE_TYPES = {"created": "create", "modified": "modify", "deleted": "remove"}

# Access notifications (inotify open/close) do not change anything
IGNORED_EVENT_TYPES = {"opened", "closed", "closed_no_write"}


@dataclass(frozen=True)
class RepoChangeEvent:
    repo_path: str
    change_type: str  # create, modify, remove or other


def is_relevant_path(path: str) -> bool:
    normalized = path.replace("\\", "/")
    if normalized.endswith("/.git"):
        return False
    return not any(fragment in normalized for fragment in IGNORED_FRAGMENTS)


class RepoChangeHandler(FileSystemEventHandler):
    """Filters and debounces raw filesystem events for one repository."""

    def __init__(
        self,
        repo_path: str,
        callback: Callable[[RepoChangeEvent], None],
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__()
        self.repo_path = repo_path
        self.callback = callback
        self.debounce_seconds = debounce_ms / 1000
        self._clock = clock
        self._last_emit: float | None = None
        self._lock = threading.Lock()

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in IGNORED_EVENT_TYPES:
            return

        paths = [os.fsdecode(event.src_path)]
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            paths.append(os.fsdecode(dest_path))
        if not any(is_relevant_path(p) for p in paths):
            return

        now = self._clock()
        with self._lock:
            if self._last_emit is not None and now - self._last_emit < self.debounce_seconds:
                return
            self._last_emit = now

        change = RepoChangeEvent(self.repo_path, CHANGE_TYPES.get(event.event_type, "other"))
        logger.debug("Repository change: %s on %s", change.change_type, paths[0])
        self.callback(change)


class RepoWatcher:
    """Keeps one watchdog observer per watched repository."""

    def __init__(
        self,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ) -> None:
        self.debounce_ms = debounce_ms
        self._observer_factory = observer_factory
        self._observers: dict[str, BaseObserver] = {}
        self._lock = threading.Lock()

    def is_watching(self, path: str) -> bool:
        with self._lock:
            return os.path.abspath(path) in self._observers

    def watch(self, path: str, callback: Callable[[RepoChangeEvent], None]) -> None:
        """Start watching path recursively; does nothing if it is already watched"""
        key = os.path.abspath(path)
        with self._lock:
            if key in self._observers:
                return

            handler = RepoChangeHandler(key, callback, self.debounce_ms)
            observer = self._observer_factory()
            observer.schedule(handler, key, recursive=True)
            observer.start()
            self._observers[key] = observer

        logger.info("Started watching repository: %s", key)

    def unwatch(self, path: str) -> None:
        with self._lock:
            observer = self._observers.pop(os.path.abspath(path), None)
        if observer is not None:
            self._stop(observer)
            logger.info("Stopped watching repository: %s", path)

    def unwatch_all(self) -> None:
        with self._lock:
            observers = list(self._observers.values())
            self._observers.clear()
        for observer in observers:
            self._stop(observer)

    def _stop(self, observer: BaseObserver) -> None:
        observer.stop()
        if observer.is_alive():
            observer.join()
