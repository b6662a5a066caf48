"""Git graph visualization components."""

from gitdesk.ui.git_graph.widget import GitGraphView

__all__ = ["GitGraphView"]
