"""Plain records returned by the repository backend."""

from dataclasses import dataclass, field


@dataclass
class CommitInfo:
    hash: str
    hash_short: str
    message: str
    author: str
    email: str
    date: str


@dataclass
class BranchInfo:
    name: str
    current: bool
    commit: str  # short hash


@dataclass
class FileStatus:
    path: str
    status: str  # added, modified, deleted, renamed or untracked
    staged: bool


@dataclass
class RemoteStatus:
    ahead: int
    behind: int
    has_remote: bool
    remote: str | None = None


@dataclass
class RemoteInfo:
    name: str
    fetch_url: str = ""
    push_url: str = ""


@dataclass
class RemoteBranchInfo:
    name: str
    remote: str
    commit: str
    is_tracking: bool


@dataclass
class RepoInfo:
    path: str
    name: str
    current_branch: str
    branches: list[BranchInfo] = field(default_factory=list)
    status: list[FileStatus] = field(default_factory=list)
    remotes: list[str] = field(default_factory=list)
    last_commit: CommitInfo | None = None
