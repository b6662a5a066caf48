"""Edge rendering for git graph - lane lines between commits and their parents."""

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QPainterPath, QPen
from PySide6.QtWidgets import QGraphicsItem, QGraphicsPathItem


class LaneEdge(QGraphicsPathItem):
    """
    A line from a child commit down to one of its parents.

    Newer commits are at the top, so start.y < end.y. Same-lane edges are
    straight. Edges that change lanes make one horizontal hop with rounded
    corners: just below the child for merge sources (the line then runs down
    the source's own lane), or just above the parent for a primary parent in
    another lane (the child's lane runs down and rejoins it).
    """

    CORNER_RADIUS = 6

    def __init__(
        self,
        start: QPointF,
        end: QPointF,
        color: QColor,
        row_height: float,
        turn_near_start: bool = False,
        parent: QGraphicsItem | None = None,
    ) -> None:
        super().__init__(parent)
        self.start = start
        self.end = end
        self.color = color
        self.row_height = row_height
        self.turn_near_start = turn_near_start
        self._build_path()
        self._setup_style()

    def _build_path(self) -> None:
        path = QPainterPath()
        path.moveTo(self.start)

        dx = self.end.x() - self.start.x()
        r = min(self.CORNER_RADIUS, abs(dx) / 2, self.row_height / 4)

        if abs(dx) < 1:
            path.lineTo(self.end)
        else:
            direction = 1 if dx > 0 else -1
            if self.turn_near_start:
                turn_y = self.start.y() + self.row_height / 2
            else:
                turn_y = self.end.y() - self.row_height / 2
            path.lineTo(self.start.x(), turn_y - r)
            path.quadTo(
                QPointF(self.start.x(), turn_y),
                QPointF(self.start.x() + direction * r, turn_y),
            )
            path.lineTo(self.end.x() - direction * r, turn_y)
            path.quadTo(
                QPointF(self.end.x(), turn_y),
                QPointF(self.end.x(), turn_y + r),
            )
            path.lineTo(self.end)

        self.setPath(path)

    def _setup_style(self) -> None:
        pen = QPen(self.color, 2)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        self.setPen(pen)
        self.setBrush(Qt.BrushStyle.NoBrush)

        # Draw behind commit dots
        self.setZValue(-1)
