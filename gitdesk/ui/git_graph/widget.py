"""Git graph view widget - main entry point for git graph visualization."""

import logging

from PySide6.QtCore import QPoint, Qt, Signal
from PySide6.QtGui import QContextMenuEvent, QMouseEvent, QPainter, QWheelEvent
from PySide6.QtWidgets import QGraphicsView, QMenu, QWidget

from gitdesk.constants import DEFAULT_MAX_COUNT
from gitdesk.git_backend.errors import GitError
from gitdesk.git_backend.repository import GitRepository
from gitdesk.graph.layout import build_graph_log
from gitdesk.ui.commit_actions import COMMIT_ACTIONS, COPY_HASH
from gitdesk.ui.git_graph.scene import HASH_ROLE, GitGraphScene

logger = logging.getLogger(__name__)


class GitGraphView(QGraphicsView):
    """Pannable and zoomable view of the commit graph."""

    commit_selected = Signal(str)  # full hash
    commit_action_requested = Signal(str, str)  # action key, full hash
    error = Signal(str)

    MIN_ZOOM = 0.2
    MAX_ZOOM = 2.0
    ZOOM_STEP = 1.1

    def __init__(
        self,
        repo: GitRepository,
        max_count: int | None = DEFAULT_MAX_COUNT,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.repo = repo
        self.max_count = max_count
        self._scene = GitGraphScene([])
        self.setScene(self._scene)

        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setResizeAnchor(QGraphicsView.ViewportAnchor.AnchorViewCenter)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)

        self._zoom = 1.0

    @property
    def commit_count(self) -> int:
        return len(self._scene.commits)

    def refresh(self) -> None:
        """Reload the history and redraw the graph."""
        try:
            commits = build_graph_log(self.repo, self.max_count)
        except GitError as e:
            logger.error("Failed to load commit graph: %s", e)
            self.error.emit(str(e))
            return

        self._scene = GitGraphScene(commits)
        self.setScene(self._scene)
        self.horizontalScrollBar().setValue(self.horizontalScrollBar().minimum())
        self.verticalScrollBar().setValue(self.verticalScrollBar().minimum())

    def select_commit(self, commit_hash: str) -> None:
        """Center the view on a commit, if it is loaded."""
        center = self._scene.row_center(commit_hash)
        if center is not None:
            self.centerOn(center)

    def _apply_zoom(self, new_zoom: float) -> None:
        """Apply zoom level, clamped to min/max."""
        new_zoom = max(self.MIN_ZOOM, min(self.MAX_ZOOM, new_zoom))
        if new_zoom != self._zoom:
            factor = new_zoom / self._zoom
            self._zoom = new_zoom
            self.scale(factor, factor)

    def wheelEvent(self, event: QWheelEvent) -> None:  # noqa: N802
        """Handle mouse wheel - Ctrl+wheel zooms, plain wheel scrolls."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            delta = event.angleDelta().y()
            if delta > 0:
                self._apply_zoom(self._zoom * self.ZOOM_STEP)
            elif delta < 0:
                self._apply_zoom(self._zoom / self.ZOOM_STEP)
            event.accept()
        else:
            super().wheelEvent(event)

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        """Left-click on a dot or message selects that commit."""
        if event.button() == Qt.MouseButton.LeftButton:
            commit_hash = self._commit_hash_at(event.pos())
            if commit_hash:
                self.commit_selected.emit(commit_hash)
        super().mousePressEvent(event)

    def contextMenuEvent(self, event: QContextMenuEvent) -> None:  # noqa: N802
        """Right-click on a dot or message offers the commit actions."""
        commit_hash = self._commit_hash_at(event.pos())
        if not commit_hash:
            super().contextMenuEvent(event)
            return
        menu = self.build_commit_menu(commit_hash)
        menu.exec(event.globalPos())
        event.accept()

    def build_commit_menu(self, commit_hash: str) -> QMenu:
        """Menu whose actions emit commit_action_requested for commit_hash."""
        menu = QMenu(self)
        submenus: dict[str, QMenu] = {}
        for action in COMMIT_ACTIONS:
            if action.submenu:
                if action.submenu not in submenus:
                    menu.addSeparator()
                    submenus[action.submenu] = menu.addMenu(action.submenu)
                target = submenus[action.submenu]
            else:
                target = menu
            qaction = target.addAction(action.label)
            qaction.triggered.connect(
                lambda _checked=False, key=action.key: self.commit_action_requested.emit(
                    key, commit_hash
                )
            )
            if action.key == COPY_HASH:
                menu.addSeparator()
        return menu

    def _commit_hash_at(self, pos: QPoint) -> str | None:
        item = self.itemAt(pos)
        if item is None:
            return None
        return item.data(HASH_ROLE) or None

    def fit_in_view(self) -> None:
        """Fit the entire graph in the view."""
        self.fitInView(self._scene.sceneRect(), Qt.AspectRatioMode.KeepAspectRatio)
        self._zoom = self.transform().m11()
