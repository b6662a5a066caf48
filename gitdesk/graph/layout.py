"""Assemble the annotated commit graph from the walker, lane builder and ref index."""

import logging
from collections.abc import Iterable
from itertools import islice
from typing import TYPE_CHECKING

from gitdesk.graph.builder import GraphBuilder
from gitdesk.graph.refs import build_ref_index
from gitdesk.graph.types import PALETTE_SIZE, Commit, GraphCommit, RefIndex

if TYPE_CHECKING:
    from gitdesk.git_backend.repository import GitRepository

logger = logging.getLogger(__name__)


def assemble_layout(
    commits: Iterable[Commit],
    ref_index: RefIndex,
    max_count: int | None = None,
    palette_size: int = PALETTE_SIZE,
) -> list[GraphCommit]:
    """
    Lay out commits in walker order and attach their refs.

    Stops after max_count records (None means no limit). Lanes still open at
    the cutoff are abandoned along with the builder.
    """
    if max_count is not None and max_count <= 0:
        return []

    builder = GraphBuilder(palette_size=palette_size)
    result: list[GraphCommit] = []

    for commit in islice(commits, max_count):
        column = builder.place(commit)
        result.append(
            GraphCommit(
                hash=commit.hash,
                hash_short=commit.short_hash,
                message=commit.message or "",
                author=commit.author or "",
                email=commit.email or "",
                date=commit.date,
                parent_hashes=tuple(commit.parent_hashes),
                column=column,
                color=builder.color_for(column),
                branch_names=tuple(ref_index.branches_for(commit.hash)),
                tag_names=tuple(ref_index.tags_for(commit.hash)),
            )
        )

    logger.debug("laid out %d commits across %d lanes", len(result), builder.max_lanes)
    return result


def build_graph_log(repo: "GitRepository", max_count: int | None = None) -> list[GraphCommit]:
    """Read all refs, then walk and lay out up to max_count commits of repo."""
    ref_index = build_ref_index(repo.list_branch_refs(), repo.list_tag_refs())
    return assemble_layout(repo.walk_commits(), ref_index, max_count)
