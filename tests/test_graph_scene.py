"""Tests for drawing a laid-out graph into a Qt scene and for the graph view (offscreen)."""

import os
from unittest.mock import MagicMock, patch

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication, QGraphicsEllipseItem  # noqa: E402

from gitdesk.git_backend.errors import GitError  # noqa: E402
from gitdesk.graph.layout import assemble_layout  # noqa: E402
from gitdesk.graph.types import Commit, RefIndex  # noqa: E402
from gitdesk.ui.git_graph.edges import LaneEdge  # noqa: E402
from gitdesk.ui.git_graph.scene import HASH_ROLE, GitGraphScene  # noqa: E402
from gitdesk.ui.git_graph.types import LANE_COLORS, get_lane_color  # noqa: E402
from gitdesk.ui.git_graph.widget import GitGraphView  # noqa: E402


@pytest.fixture(scope="module")
def app():
    return QApplication.instance() or QApplication([])


def make_commit(commit_hash, *parents):
    return Commit(commit_hash, f"commit {commit_hash}", "A", "a@x", 0, tuple(parents))


@pytest.fixture
def merge_layout():
    commits = [
        make_commit("c" * 40, "b" * 40, "e" * 40),
        make_commit("b" * 40, "a" * 40),
        make_commit("e" * 40, "a" * 40),
        make_commit("a" * 40),
    ]
    return assemble_layout(commits, RefIndex())


class TestGitGraphScene:
    def test_one_dot_per_commit(self, app, merge_layout):
        scene = GitGraphScene(merge_layout)
        dots = [i for i in scene.items() if isinstance(i, QGraphicsEllipseItem)]
        assert sorted(d.data(HASH_ROLE) for d in dots) == sorted(g.hash for g in merge_layout)

    def test_one_edge_per_loaded_parent(self, app, merge_layout):
        scene = GitGraphScene(merge_layout)
        edges = [i for i in scene.items() if isinstance(i, LaneEdge)]
        assert len(edges) == 4

    def test_parents_outside_history_are_skipped(self, app, merge_layout):
        scene = GitGraphScene(merge_layout[:2])
        edges = [i for i in scene.items() if isinstance(i, LaneEdge)]
        assert len(edges) == 1

    def test_node_positions_follow_row_and_column(self, app, merge_layout):
        scene = GitGraphScene(merge_layout)
        merge_source = scene.row_center("e" * 40)
        head = scene.row_center("c" * 40)
        assert merge_source.y() - head.y() == 2 * GitGraphScene.ROW_HEIGHT
        assert merge_source.x() - head.x() == GitGraphScene.COLUMN_WIDTH
        assert scene.row_center("f" * 40) is None

    def test_empty_scene(self, app):
        scene = GitGraphScene([])
        assert scene.items() == []


class TestLaneColors:
    def test_color_index_wraps(self):
        assert get_lane_color(0) == LANE_COLORS[0]
        assert get_lane_color(len(LANE_COLORS) + 2) == LANE_COLORS[2]


@pytest.fixture
def view(app, merge_layout):
    with patch("gitdesk.ui.git_graph.widget.build_graph_log", return_value=merge_layout):
        graph_view = GitGraphView(MagicMock())
        graph_view.show()
        graph_view.resize(240, 60)
        graph_view.refresh()
    yield graph_view
    graph_view.close()


def menu_actions(menu):
    """(label path, QAction) for every leaf action, descending into submenus."""
    found = []
    for action in menu.actions():
        if action.menu() is not None:
            for label, sub_action in menu_actions(action.menu()):
                found.append((f"{action.text()}/{label}", sub_action))
        elif not action.isSeparator():
            found.append((action.text(), action))
    return found


class TestGitGraphView:
    def test_refresh_loads_commits(self, view):
        assert view.commit_count == 4

    def test_refresh_failure_emits_error(self, app):
        graph_view = GitGraphView(MagicMock())
        errors = []
        graph_view.error.connect(errors.append)
        with patch(
            "gitdesk.ui.git_graph.widget.build_graph_log", side_effect=GitError("bad object")
        ):
            graph_view.refresh()
        assert errors == ["bad object"]
        assert graph_view.commit_count == 0

    def test_commit_found_under_its_dot(self, view):
        head = "c" * 40
        pos = view.mapFromScene(view.scene().row_center(head))
        assert view._commit_hash_at(pos) == head

    def test_commit_menu_lists_actions(self, view):
        labels = [label for label, _ in menu_actions(view.build_commit_menu("c" * 40))]
        assert labels == [
            "Copy Hash",
            "Checkout",
            "Create Branch Here...",
            "Create Tag...",
            "Cherry-pick",
            "Revert",
            "Reset/Soft",
            "Reset/Mixed",
            "Reset/Hard",
        ]

    def test_commit_menu_emits_action_and_hash(self, view):
        requests = []
        view.commit_action_requested.connect(lambda key, h: requests.append((key, h)))
        actions = dict(menu_actions(view.build_commit_menu("e" * 40)))
        actions["Cherry-pick"].trigger()
        actions["Reset/Hard"].trigger()
        assert requests == [("cherry_pick", "e" * 40), ("reset_hard", "e" * 40)]

    def test_select_commit_scrolls_to_row(self, view):
        assert view.verticalScrollBar().value() == view.verticalScrollBar().minimum()
        view.select_commit("f" * 40)
        assert view.verticalScrollBar().value() == view.verticalScrollBar().minimum()
        view.select_commit("a" * 40)
        assert view.verticalScrollBar().value() > view.verticalScrollBar().minimum()
