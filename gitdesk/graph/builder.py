"""
Lane assignment for the commit graph.

Commits arrive newest-first (time + topological order). Each commit gets a
column the first time it is referenced: either when it is reached as the
current commit, or earlier, when a child names it as a parent. The primary
parent continues its child's lane; merge sources get fresh lanes. Lanes are
reused lowest-index-first once freed.
"""

import logging

from gitdesk.graph.types import PALETTE_SIZE, Commit

logger = logging.getLogger(__name__)


class LaneTable:
    """Index-addressed lanes, each free (None) or held by one pending commit hash."""

    def __init__(self) -> None:
        self._lanes: list[str | None] = []

    def __len__(self) -> int:
        return len(self._lanes)

    @property
    def width(self) -> int:
        """Number of lanes opened so far, free or held."""
        return len(self._lanes)

    def allocate(self, occupant: str) -> int:
        """Claim the lowest free lane for occupant, growing the table if none is free."""
        for column, current in enumerate(self._lanes):
            if current is None:
                self._lanes[column] = occupant
                return column
        self._lanes.append(occupant)
        return len(self._lanes) - 1

    def claim(self, column: int, occupant: str) -> None:
        while len(self._lanes) <= column:
            self._lanes.append(None)
        self._lanes[column] = occupant

    def release(self, column: int) -> None:
        if column < len(self._lanes):
            self._lanes[column] = None

    def occupant(self, column: int) -> str | None:
        if column < len(self._lanes):
            return self._lanes[column]
        return None

    def is_free(self, column: int) -> bool:
        return self.occupant(column) is None

    def snapshot(self) -> list[str | None]:
        return list(self._lanes)


class GraphBuilder:
    """Assigns a column and color to each commit in a single pass."""

    def __init__(self, palette_size: int = PALETTE_SIZE) -> None:
        self.palette_size = palette_size
        self.lanes = LaneTable()
        # hash -> column, for walked commits and for parents referenced ahead of their walk
        self._columns: dict[str, int] = {}

    @property
    def max_lanes(self) -> int:
        """Number of lanes ever allocated during this run."""
        return self.lanes.width

    def column_of(self, commit_hash: str) -> int | None:
        return self._columns.get(commit_hash)

    def color_for(self, column: int) -> int:
        return column % self.palette_size

    def place(self, commit: Commit) -> int:
        """Assign commit its column, propagate lanes to its parents, return the column."""
        column = self._columns.get(commit.hash)
        if column is None:
            column = self.lanes.allocate(commit.hash)
            self._columns[commit.hash] = column
        else:
            self.lanes.claim(column, commit.hash)

        handed_to_primary = False
        for index, parent_hash in enumerate(commit.parent_hashes):
            if parent_hash in self._columns:
                # Reconverging lineage keeps the lane it already has
                continue
            if index == 0:
                self._columns[parent_hash] = column
                self.lanes.claim(column, parent_hash)
                handed_to_primary = True
            else:
                self._columns[parent_hash] = self.lanes.allocate(parent_hash)

        if not handed_to_primary:
            self.lanes.release(column)

        logger.debug(
            "placed %s in column %d (%d lanes)", commit.short_hash, column, len(self.lanes)
        )
        return column
