"""Commit graph layout: lane assignment, ref indexing and assembly."""

from gitdesk.graph.builder import GraphBuilder, LaneTable
from gitdesk.graph.layout import assemble_layout, build_graph_log
from gitdesk.graph.refs import build_ref_index, normalize_branch_name
from gitdesk.graph.types import PALETTE_SIZE, BranchRef, Commit, GraphCommit, RefIndex, TagRef

__all__ = [
    "PALETTE_SIZE",
    "BranchRef",
    "Commit",
    "GraphBuilder",
    "GraphCommit",
    "LaneTable",
    "RefIndex",
    "TagRef",
    "assemble_layout",
    "build_graph_log",
    "build_ref_index",
    "normalize_branch_name",
]
