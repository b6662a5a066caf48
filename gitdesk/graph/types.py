"""Types for the commit graph layout."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

# Number of distinct lane colors; columns beyond this wrap around
PALETTE_SIZE = 8


@dataclass(frozen=True)
class Commit:
    """A walked commit, as yielded by the revision walker."""

    hash: str
    message: str
    author: str
    email: str
    timestamp: int
    parent_hashes: tuple[str, ...] = ()
    timezone_offset: int = 0  # minutes east of UTC

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def date(self) -> str:
        """ISO-8601 commit time in the committer's own timezone."""
        tz = timezone(timedelta(minutes=self.timezone_offset))
        return datetime.fromtimestamp(self.timestamp, tz=tz).isoformat()


@dataclass(frozen=True)
class BranchRef:
    """A branch reference and the commit it resolves to."""

    name: str
    target_hash: str
    is_remote: bool = False
    remote: str | None = None


@dataclass(frozen=True)
class TagRef:
    """A tag reference and the commit it resolves to."""

    name: str
    target_hash: str


@dataclass(frozen=True)
class GraphCommit:
    """A commit with its lane assignment and the refs pointing at it."""

    hash: str
    hash_short: str
    message: str
    author: str
    email: str
    date: str
    parent_hashes: tuple[str, ...]
    column: int
    color: int
    branch_names: tuple[str, ...] = ()
    tag_names: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "hash": self.hash,
            "hash_short": self.hash_short,
            "message": self.message,
            "author": self.author,
            "email": self.email,
            "date": self.date,
            "parent_hashes": list(self.parent_hashes),
            "branch_names": list(self.branch_names),
            "tag_names": list(self.tag_names),
            "column": self.column,
            "color": self.color,
        }


@dataclass
class RefIndex:
    """Reverse index from commit hash to branch and tag names."""

    branches: dict[str, list[str]] = field(default_factory=dict)
    tags: dict[str, list[str]] = field(default_factory=dict)

    def branches_for(self, commit_hash: str) -> list[str]:
        return list(self.branches.get(commit_hash, []))

    def tags_for(self, commit_hash: str) -> list[str]:
        return list(self.tags.get(commit_hash, []))
