"""Git graph scene - draws a laid-out commit list as lanes, dots and labels."""

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QBrush, QColor, QFont, QPen
from PySide6.QtWidgets import QGraphicsEllipseItem, QGraphicsScene, QGraphicsSimpleTextItem, QWidget

from gitdesk.graph.types import GraphCommit
from gitdesk.ui.git_graph.edges import LaneEdge
from gitdesk.ui.git_graph.types import (
    BRANCH_LABEL_COLOR,
    MUTED_TEXT_COLOR,
    TAG_LABEL_COLOR,
    TEXT_COLOR,
    get_lane_color,
)

# Item data slot holding the commit hash of a clickable item
HASH_ROLE = 0


class GitGraphScene(QGraphicsScene):
    """One row per commit, newest at the top."""

    ROW_HEIGHT = 28
    COLUMN_WIDTH = 18
    NODE_RADIUS = 5
    PADDING = 16
    TEXT_GAP = 14

    def __init__(self, commits: list[GraphCommit], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.commits = commits
        self.hash_to_row: dict[str, int] = {c.hash: row for row, c in enumerate(commits)}
        self.num_columns = max((c.column for c in commits), default=0) + 1

        self.setBackgroundBrush(QColor("#FAFAFA"))
        self._build_scene()

    def node_pos(self, row: int, column: int) -> QPointF:
        x = self.PADDING + column * self.COLUMN_WIDTH + self.COLUMN_WIDTH / 2
        y = self.PADDING + row * self.ROW_HEIGHT + self.ROW_HEIGHT / 2
        return QPointF(x, y)

    def _build_scene(self) -> None:
        self.clear()

        # Edges first, behind dots
        for row, commit in enumerate(self.commits):
            start = self.node_pos(row, commit.column)
            for index, parent_hash in enumerate(commit.parent_hashes):
                parent_row = self.hash_to_row.get(parent_hash)
                if parent_row is None:
                    # Parent beyond the loaded history
                    continue
                parent = self.commits[parent_row]
                end = self.node_pos(parent_row, parent.column)
                merge_source = index > 0
                color = get_lane_color(parent.color if merge_source else commit.color)
                self.addItem(LaneEdge(start, end, color, self.ROW_HEIGHT, merge_source))

        text_x = self.PADDING + self.num_columns * self.COLUMN_WIDTH + self.TEXT_GAP
        for row, commit in enumerate(self.commits):
            self._add_node(row, commit)
            self._add_text(row, commit, text_x)

        width = text_x + 800
        height = len(self.commits) * self.ROW_HEIGHT + 2 * self.PADDING
        self.setSceneRect(QRectF(0, 0, width, height))

    def _add_node(self, row: int, commit: GraphCommit) -> None:
        center = self.node_pos(row, commit.column)
        r = self.NODE_RADIUS
        color = get_lane_color(commit.color)

        dot = QGraphicsEllipseItem(center.x() - r, center.y() - r, 2 * r, 2 * r)
        is_merge = len(commit.parent_hashes) > 1
        dot.setBrush(QBrush(QColor("#FFFFFF") if is_merge else color))
        dot.setPen(QPen(color, 2))
        dot.setData(HASH_ROLE, commit.hash)
        dot.setToolTip(f"{commit.hash_short} {commit.author} <{commit.email}>\n{commit.date}")
        self.addItem(dot)

    def _add_text(self, row: int, commit: GraphCommit, x: float) -> None:
        y = self.PADDING + row * self.ROW_HEIGHT

        labels = [f"[{name}]" for name in commit.branch_names]
        labels += [f"<{name}>" for name in commit.tag_names]
        if labels:
            ref_item = QGraphicsSimpleTextItem(" ".join(labels))
            bold = QFont()
            bold.setBold(True)
            ref_item.setFont(bold)
            ref_color = BRANCH_LABEL_COLOR if commit.branch_names else TAG_LABEL_COLOR
            ref_item.setBrush(QBrush(ref_color))
            ref_item.setPos(x, y + (self.ROW_HEIGHT - ref_item.boundingRect().height()) / 2)
            ref_item.setData(HASH_ROLE, commit.hash)
            self.addItem(ref_item)
            x += ref_item.boundingRect().width() + 8

        message_item = QGraphicsSimpleTextItem(commit.message)
        message_item.setBrush(QBrush(TEXT_COLOR))
        message_item.setPos(x, y + (self.ROW_HEIGHT - message_item.boundingRect().height()) / 2)
        message_item.setData(HASH_ROLE, commit.hash)
        self.addItem(message_item)

        meta_item = QGraphicsSimpleTextItem(f"{commit.hash_short}  {commit.author}")
        meta_item.setBrush(QBrush(MUTED_TEXT_COLOR))
        meta_x = x + message_item.boundingRect().width() + 16
        meta_item.setPos(meta_x, y + (self.ROW_HEIGHT - meta_item.boundingRect().height()) / 2)
        self.addItem(meta_item)

    def row_center(self, commit_hash: str) -> QPointF | None:
        row = self.hash_to_row.get(commit_hash)
        if row is None:
            return None
        return self.node_pos(row, self.commits[row].column)
