"""Colors for git graph visualization."""

from PySide6.QtGui import QColor

from gitdesk.graph.types import PALETTE_SIZE

# One color per layout color index (column modulo the palette size)
LANE_COLORS = [
    QColor("#4CAF50"),  # Green
    QColor("#2196F3"),  # Blue
    QColor("#FF9800"),  # Orange
    QColor("#9C27B0"),  # Purple
    QColor("#F44336"),  # Red
    QColor("#00BCD4"),  # Cyan
    QColor("#E91E63"),  # Pink
    QColor("#795548"),  # Brown
]

assert len(LANE_COLORS) == PALETTE_SIZE

BRANCH_LABEL_COLOR = QColor("#1565C0")
TAG_LABEL_COLOR = QColor("#6D4C41")
TEXT_COLOR = QColor("#212121")
MUTED_TEXT_COLOR = QColor("#757575")


def get_lane_color(color: int) -> QColor:
    """Get the QColor for a layout color index."""
    return LANE_COLORS[color % len(LANE_COLORS)]
