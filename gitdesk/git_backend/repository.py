"""
Git repository access using pygit2
"""

import contextlib
import logging
from collections.abc import Iterator
from pathlib import Path

import pygit2
from pygit2.enums import FileStatus as StatusFlag
from pygit2.enums import SortMode

from gitdesk.git_backend.errors import GitError, backend_errors
from gitdesk.git_backend.models import (
    BranchInfo,
    CommitInfo,
    FileStatus,
    RemoteBranchInfo,
    RemoteStatus,
    RepoInfo,
)
from gitdesk.graph.types import BranchRef, Commit, TagRef

logger = logging.getLogger(__name__)

# Index changes take precedence over worktree changes for the same path
INDEX_STATUSES = [
    (StatusFlag.INDEX_NEW, "added"),
    (StatusFlag.INDEX_MODIFIED, "modified"),
    (StatusFlag.INDEX_DELETED, "deleted"),
    (StatusFlag.INDEX_RENAMED, "renamed"),
]
WORKTREE_STATUSES = [
    (StatusFlag.WT_NEW, "untracked"),
    (StatusFlag.WT_MODIFIED, "modified"),
    (StatusFlag.WT_DELETED, "deleted"),
    (StatusFlag.WT_RENAMED, "renamed"),
]


def summary_line(message: str) -> str:
    """First line of a commit message."""
    stripped = message.strip()
    return stripped.split("\n", 1)[0].strip() if stripped else ""


def init_repo(path: str) -> str:
    """Initialize a new repository at path and return its git directory."""
    logger.info("Initializing repository at %s", path)
    with backend_errors():
        repo = pygit2.init_repository(path)
    return str(repo.path)


class GitRepository:
    """Read and write access to one working repository"""

    def __init__(self, repo_path: str | None = None) -> None:
        """Open repository (discovered from the cwd when no path is given)"""
        if repo_path is None:
            repo_path = self._find_repo()

        with backend_errors():
            self.repo = pygit2.Repository(repo_path)

        workdir = self.repo.workdir or self.repo.path
        self.path = str(Path(workdir).resolve())

    def _find_repo(self) -> str:
        """Find git repository in current directory or parents"""
        current = Path.cwd()
        while current != current.parent:
            if (current / ".git").exists():
                return str(current)
            current = current.parent
        raise GitError("Not in a git repository")

    # --- Revision walking and refs (graph input) ---

    def _remote_names(self) -> list[str]:
        return [remote.name for remote in self.repo.remotes if remote.name]

    def _remote_of(self, branch_name: str, remotes: list[str]) -> str:
        """Remote that qualifies a remote-tracking branch name like 'origin/main'."""
        # Longest match first so "up/stream" wins over "up"
        for remote in sorted(remotes, key=len, reverse=True):
            if branch_name.startswith(remote + "/"):
                return remote
        return branch_name.split("/", 1)[0]

    def list_branch_refs(self) -> list[BranchRef]:
        """All local and remote branches with the commit each resolves to."""
        refs: list[BranchRef] = []
        with backend_errors():
            for name in self.repo.branches.local:
                branch = self.repo.branches.local[name]
                commit = branch.peel(pygit2.Commit)
                refs.append(BranchRef(name=name, target_hash=str(commit.id)))

            remotes = self._remote_names()
            for name in self.repo.branches.remote:
                # origin/HEAD is a symbolic alias of another remote branch
                if name.endswith("/HEAD"):
                    continue
                branch = self.repo.branches.remote[name]
                commit = branch.peel(pygit2.Commit)
                refs.append(
                    BranchRef(
                        name=name,
                        target_hash=str(commit.id),
                        is_remote=True,
                        remote=self._remote_of(name, remotes),
                    )
                )
        return refs

    def list_tag_refs(self) -> list[TagRef]:
        """All tags, annotated ones peeled to the commit they tag."""
        tags: list[TagRef] = []
        with backend_errors():
            for ref_name in self.repo.references:
                if not ref_name.startswith("refs/tags/"):
                    continue
                reference = self.repo.references[ref_name]
                try:
                    commit = reference.peel(pygit2.Commit)
                except (ValueError, pygit2.GitError):
                    logger.debug("Tag %s does not point at a commit, skipping", ref_name)
                    continue
                tags.append(TagRef(name=ref_name[len("refs/tags/") :], target_hash=str(commit.id)))
        return tags

    def _walk_tips(self) -> list[pygit2.Oid]:
        tips: list[pygit2.Oid] = []
        if not self.repo.head_is_unborn:
            tips.append(self.repo.head.peel(pygit2.Commit).id)
        for collection in (self.repo.branches.local, self.repo.branches.remote):
            for name in collection:
                oid = collection[name].peel(pygit2.Commit).id
                if oid not in tips:
                    tips.append(oid)
        return tips

    def walk_commits(self) -> Iterator[Commit]:
        """
        Yield every commit reachable from HEAD and all branch tips, once each.

        Order is commit time descending with topological constraints, so a
        commit always comes before its parents.
        """
        with backend_errors():
            tips = self._walk_tips()
            if not tips:
                return

            walker = self.repo.walk(tips[0], SortMode.TOPOLOGICAL | SortMode.TIME)
            for tip in tips[1:]:
                walker.push(tip)

            for c in walker:
                yield self._to_commit(c)

    def _to_commit(self, c: pygit2.Commit) -> Commit:
        author = c.author
        return Commit(
            hash=str(c.id),
            message=summary_line(c.message or ""),
            author=author.name or "",
            email=author.email or "",
            timestamp=c.commit_time,
            parent_hashes=tuple(str(p) for p in c.parent_ids),
            timezone_offset=c.commit_time_offset,
        )

    def _to_commit_info(self, c: pygit2.Commit) -> CommitInfo:
        commit = self._to_commit(c)
        return CommitInfo(
            hash=commit.hash,
            hash_short=commit.short_hash,
            message=commit.message,
            author=commit.author,
            email=commit.email,
            date=commit.date,
        )

    # --- Repository overview ---

    def current_branch(self) -> str:
        if self.repo.head_is_unborn:
            return "(no branch)"
        return self.repo.head.shorthand or "HEAD"

    def get_last_commit(self) -> CommitInfo | None:
        if self.repo.head_is_unborn:
            return None
        with backend_errors():
            return self._to_commit_info(self.repo.head.peel(pygit2.Commit))

    def get_repo_info(self) -> RepoInfo:
        """Name, current branch, branches, status, remotes and last commit in one call"""
        return RepoInfo(
            path=self.path,
            name=Path(self.path).name or "unknown",
            current_branch=self.current_branch(),
            branches=self.get_branches(),
            status=self.get_status(),
            remotes=self._remote_names(),
            last_commit=self.get_last_commit(),
        )

    def get_log(self, max_count: int) -> list[CommitInfo]:
        """Commits reachable from HEAD, newest first"""
        if self.repo.head_is_unborn or max_count <= 0:
            return []

        commits: list[CommitInfo] = []
        with backend_errors():
            head = self.repo.head.peel(pygit2.Commit)
            for c in self.repo.walk(head.id, SortMode.TIME):
                commits.append(self._to_commit_info(c))
                if len(commits) >= max_count:
                    break
        return commits

    # --- Working tree and index ---

    def get_status(self) -> list[FileStatus]:
        """Changed files; a path with staged changes is reported as staged"""
        with backend_errors():
            statuses = self.repo.status(untracked_files="all")

        files: list[FileStatus] = []
        for path, flags in sorted(statuses.items()):
            entry = self._classify(path, flags)
            if entry is not None:
                files.append(entry)
        return files

    def _classify(self, path: str, flags: int) -> FileStatus | None:
        for flag, name in INDEX_STATUSES:
            if flags & flag:
                return FileStatus(path=path, status=name, staged=True)
        for flag, name in WORKTREE_STATUSES:
            if flags & flag:
                return FileStatus(path=path, status=name, staged=False)
        return None

    def stage_file(self, file_path: str) -> None:
        """Stage one path, including its deletion from the working tree"""
        with backend_errors():
            index = self.repo.index
            if (Path(self.path) / file_path).exists():
                index.add(file_path)
            else:
                with contextlib.suppress(KeyError):
                    index.remove(file_path)
            index.write()

    def unstage_file(self, file_path: str) -> None:
        """Reset one index entry to its HEAD version, or drop it if HEAD lacks it"""
        with backend_errors():
            index = self.repo.index
            head_entry = None
            if not self.repo.head_is_unborn:
                tree = self.repo.head.peel(pygit2.Commit).tree
                with contextlib.suppress(KeyError):
                    head_entry = tree[file_path]

            if head_entry is not None:
                index.add(pygit2.IndexEntry(file_path, head_entry.id, head_entry.filemode))
            else:
                with contextlib.suppress(KeyError):
                    index.remove(file_path)
            index.write()

    def stage_all(self) -> None:
        with backend_errors():
            index = self.repo.index
            index.add_all()
            index.write()

    def commit(self, message: str) -> str:
        """Commit the index on HEAD and return the new commit's short hash"""
        with backend_errors():
            try:
                signature = self.repo.default_signature
            except KeyError as e:
                raise GitError("user.name and user.email must be configured to commit") from e

            tree_id = self.repo.index.write_tree()
            parents = [] if self.repo.head_is_unborn else [self.repo.head.target]
            commit_oid = self.repo.create_commit(
                "HEAD", signature, signature, message, tree_id, parents
            )

        logger.info("Committed %s", str(commit_oid)[:7])
        return str(commit_oid)[:7]

    # --- Branches ---

    def get_branches(self) -> list[BranchInfo]:
        """Local branches with their tip's short hash"""
        current = None if self.repo.head_is_unborn else self.repo.head.shorthand
        branches: list[BranchInfo] = []
        with backend_errors():
            for name in sorted(self.repo.branches.local):
                commit = self.repo.branches.local[name].peel(pygit2.Commit)
                branches.append(
                    BranchInfo(name=name, current=name == current, commit=str(commit.id)[:7])
                )
        return branches

    def _upstream(self) -> pygit2.Branch | None:
        if self.repo.head_is_unborn or self.repo.head_is_detached:
            return None
        local = self.repo.branches.local.get(self.repo.head.shorthand)
        if local is None:
            return None
        try:
            return local.upstream
        except (KeyError, pygit2.GitError):
            return None

    def get_remote_branches(self) -> list[RemoteBranchInfo]:
        upstream = self._upstream()
        tracking = upstream.branch_name if upstream is not None else None
        remotes = self._remote_names()

        branches: list[RemoteBranchInfo] = []
        with backend_errors():
            for name in sorted(self.repo.branches.remote):
                if name.endswith("/HEAD"):
                    continue
                commit = self.repo.branches.remote[name].peel(pygit2.Commit)
                branches.append(
                    RemoteBranchInfo(
                        name=name,
                        remote=self._remote_of(name, remotes),
                        commit=str(commit.id)[:7],
                        is_tracking=name == tracking,
                    )
                )
        return branches

    def get_remote_status(self) -> RemoteStatus:
        """Ahead/behind counts of HEAD against its upstream, as of the last fetch"""
        upstream = self._upstream()
        if upstream is None:
            return RemoteStatus(ahead=0, behind=0, has_remote=False, remote=None)

        with backend_errors():
            local_oid = self.repo.head.peel(pygit2.Commit).id
            upstream_oid = upstream.peel(pygit2.Commit).id
            ahead, behind = self.repo.ahead_behind(local_oid, upstream_oid)

        remote = self._remote_of(upstream.branch_name, self._remote_names())
        return RemoteStatus(ahead=ahead, behind=behind, has_remote=True, remote=remote)

    def checkout_branch(self, branch_name: str) -> None:
        """Check out a branch, tag or revision; non-branch targets detach HEAD"""
        with backend_errors():
            try:
                obj, reference = self.repo.revparse_ext(branch_name)
            except KeyError as e:
                raise GitError(f"Unknown revision: {branch_name}") from e

            self.repo.checkout_tree(obj)
            if reference is not None and reference.name.startswith("refs/heads/"):
                self.repo.set_head(reference.name)
            else:
                self.repo.set_head(obj.peel(pygit2.Commit).id)

        logger.info("Checked out %s", branch_name)
