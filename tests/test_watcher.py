"""Tests for repository change watching (filesystem events simulated)."""

import time
from unittest.mock import MagicMock

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from gitdesk.watcher import RepoChangeEvent, RepoChangeHandler, RepoWatcher, is_relevant_path


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def events():
    return []


@pytest.fixture
def handler(clock, events):
    return RepoChangeHandler("/repo", events.append, debounce_ms=1000, clock=clock)


class TestIsRelevantPath:
    @pytest.mark.parametrize(
        "path",
        [
            "/repo/node_modules/pkg/index.js",
            "/repo/dist/bundle.js",
            "/repo/target/debug/app",
            "/repo/.DS_Store",
            "/repo/.git/index",
            "/repo/.git",
            "/repo/Cargo.lock",
            "/repo/.git/index.lock",
        ],
    )
    def test_ignored(self, path):
        assert not is_relevant_path(path)

    @pytest.mark.parametrize("path", ["/repo/src/main.py", "/repo/README.md", "/repo/.gitignore"])
    def test_relevant(self, path):
        assert is_relevant_path(path)

    def test_windows_separators(self):
        assert not is_relevant_path("C:\\repo\\.git\\HEAD")


class TestRepoChangeHandler:
    def test_change_types(self, handler, clock, events):
        handler.on_any_event(FileCreatedEvent("/repo/a.py"))
        clock.now += 2
        handler.on_any_event(FileModifiedEvent("/repo/a.py"))
        clock.now += 2
        handler.on_any_event(FileDeletedEvent("/repo/a.py"))
        clock.now += 2
        handler.on_any_event(FileMovedEvent("/repo/a.py", "/repo/b.py"))

        assert [e.change_type for e in events] == ["create", "modify", "remove", "other"]
        assert all(e.repo_path == "/repo" for e in events)

    def test_debounce(self, handler, clock, events):
        handler.on_any_event(FileModifiedEvent("/repo/a.py"))
        clock.now += 0.5
        handler.on_any_event(FileModifiedEvent("/repo/b.py"))
        clock.now += 0.6
        handler.on_any_event(FileModifiedEvent("/repo/c.py"))

        assert events == [RepoChangeEvent("/repo", "modify"), RepoChangeEvent("/repo", "modify")]

    def test_ignored_paths_do_not_emit_or_reset_debounce(self, handler, clock, events):
        handler.on_any_event(FileModifiedEvent("/repo/.git/index"))
        handler.on_any_event(DirModifiedEvent("/repo/node_modules"))
        assert events == []

        handler.on_any_event(FileModifiedEvent("/repo/a.py"))
        assert len(events) == 1

    def test_move_into_repo_from_ignored_path(self, handler, events):
        handler.on_any_event(FileMovedEvent("/repo/.git/tmp", "/repo/a.py"))
        assert len(events) == 1

    def test_zero_debounce_emits_everything(self, clock, events):
        handler = RepoChangeHandler("/repo", events.append, debounce_ms=0, clock=clock)
        for _ in range(3):
            handler.on_any_event(FileModifiedEvent("/repo/a.py"))
        assert len(events) == 3


class TestRepoWatcher:
    def test_watch_schedules_recursive_observer(self, tmp_path):
        observer = MagicMock()
        watcher = RepoWatcher(debounce_ms=250, observer_factory=lambda: observer)
        watcher.watch(str(tmp_path), lambda event: None)

        handler, path = observer.schedule.call_args.args
        assert isinstance(handler, RepoChangeHandler)
        assert handler.debounce_seconds == 0.25
        assert path == str(tmp_path)
        assert observer.schedule.call_args.kwargs["recursive"] is True
        observer.start.assert_called_once()
        assert watcher.is_watching(str(tmp_path))

    def test_watch_twice_is_noop(self, tmp_path):
        factory = MagicMock()
        watcher = RepoWatcher(observer_factory=factory)
        watcher.watch(str(tmp_path), lambda event: None)
        watcher.watch(str(tmp_path / "."), lambda event: None)
        assert factory.call_count == 1

    def test_unwatch_stops_observer(self, tmp_path):
        observer = MagicMock()
        observer.is_alive.return_value = True
        watcher = RepoWatcher(observer_factory=lambda: observer)
        watcher.watch(str(tmp_path), lambda event: None)

        watcher.unwatch(str(tmp_path))
        observer.stop.assert_called_once()
        observer.join.assert_called_once()
        assert not watcher.is_watching(str(tmp_path))

    def test_unwatch_unknown_path(self, tmp_path):
        RepoWatcher(observer_factory=MagicMock()).unwatch(str(tmp_path))

    def test_unwatch_all(self, tmp_path):
        observers = [MagicMock(), MagicMock()]
        watcher = RepoWatcher(observer_factory=lambda: observers.pop(0))
        first, second = observers
        watcher.watch(str(tmp_path / "a"), lambda event: None)
        watcher.watch(str(tmp_path / "b"), lambda event: None)

        watcher.unwatch_all()
        first.stop.assert_called_once()
        second.stop.assert_called_once()
        assert not watcher.is_watching(str(tmp_path / "a"))

    def test_real_observer_reports_changes(self, tmp_path):
        received = []
        watcher = RepoWatcher(debounce_ms=0)
        watcher.watch(str(tmp_path), received.append)
        try:
            (tmp_path / "file.txt").write_text("x")
            deadline = time.monotonic() + 5
            while not received and time.monotonic() < deadline:
                time.sleep(0.05)
        finally:
            watcher.unwatch_all()
        assert received
        assert received[0].repo_path == str(tmp_path)
