"""
Git operations run through the git CLI.

Network operations (push, pull, fetch, clone) go through the CLI so the
user's credential helpers and SSH agent are used. Porcelain operations
whose libgit2 equivalents differ from git's behavior (stash, rebase,
cherry-pick, revert) go through it too.
"""

import logging
import subprocess

from gitdesk.git_backend.errors import GitCommandError, GitError
from gitdesk.git_backend.models import RemoteInfo

logger = logging.getLogger(__name__)

RESET_MODES = {"soft": "--soft", "hard": "--hard"}


def run_git(args: list[str], cwd: str | None = None, check: bool = True) -> str:
    """Run git with args and return stdout; raise GitCommandError on failure when check"""
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as e:
        raise GitError("Git command not found. Please ensure Git is installed and in your PATH.") from e

    if check and result.returncode != 0:
        raise GitCommandError(args, result.returncode, result.stderr)
    return result.stdout


def clone_repo(url: str, path: str) -> None:
    logger.info("Cloning %s into %s", url, path)
    run_git(["clone", url, path])


class GitCli:
    """git subprocess commands bound to one working directory"""

    def __init__(self, repo_path: str) -> None:
        self.repo_path = repo_path

    def _git(self, *args: str, check: bool = True) -> str:
        return run_git(list(args), cwd=self.repo_path, check=check)

    # --- Sync ---

    def push(self) -> None:
        self._git("push")

    def push_to_remote(self, remote: str, branch: str) -> None:
        """First push of a branch, setting its upstream"""
        self._git("push", "-u", remote, branch)

    def pull(self) -> None:
        self._git("pull")

    def fetch_all(self) -> None:
        self._git("fetch", "--all")

    def fetch_from(self, remote: str) -> None:
        self._git("fetch", remote)

    # --- Diffs ---

    def diff(self, file_path: str | None = None) -> str:
        """Unstaged changes, optionally limited to one path"""
        if file_path:
            return self._git("diff", "--", file_path, check=False)
        return self._git("diff", check=False)

    def staged_diff(self) -> str:
        return self._git("diff", "--cached", check=False)

    def commit_diff(self, commit_hash: str) -> str:
        """Stat and patch of one commit against its parent"""
        return self._git("show", commit_hash, "--format=", "--stat", "--patch")

    # --- Working tree and history ---

    def discard_changes(self, file_path: str) -> None:
        self._git("checkout", "--", file_path)

    def checkout_commit(self, commit_hash: str) -> None:
        self._git("checkout", commit_hash)

    def create_branch_at(self, branch_name: str, commit_hash: str) -> None:
        self._git("branch", branch_name, commit_hash)

    def reset_to_commit(self, commit_hash: str, mode: str = "mixed") -> None:
        """Reset HEAD to commit; mode is soft, hard, or anything else for mixed"""
        self._git("reset", RESET_MODES.get(mode, "--mixed"), commit_hash)

    def create_tag(self, tag_name: str, commit_hash: str) -> None:
        self._git("tag", tag_name, commit_hash)

    def cherry_pick(self, commit_hash: str) -> None:
        self._git("cherry-pick", commit_hash)

    def revert_commit(self, commit_hash: str) -> None:
        self._git("revert", "--no-edit", commit_hash)

    # --- Stash ---

    def stash_save(self, message: str | None = None) -> None:
        if message:
            self._git("stash", "push", "-m", message)
        else:
            self._git("stash", "push")

    def stash_pop(self) -> None:
        self._git("stash", "pop")

    def stash_list(self) -> list[str]:
        return self._git("stash", "list", check=False).splitlines()

    def stash_drop(self, index: int) -> None:
        self._git("stash", "drop", f"stash@{{{index}}}")

    def stash_apply(self, index: int) -> None:
        self._git("stash", "apply", f"stash@{{{index}}}")

    # --- Branches ---

    def delete_branch(self, branch_name: str, force: bool = False) -> None:
        self._git("branch", "-D" if force else "-d", branch_name)

    def rename_branch(self, old_name: str, new_name: str) -> None:
        self._git("branch", "-m", old_name, new_name)

    def merge_branch(self, branch_name: str) -> None:
        self._git("merge", branch_name)

    def rebase_onto(self, branch_name: str) -> None:
        self._git("rebase", branch_name)

    # --- Remotes ---

    def get_remotes(self) -> list[RemoteInfo]:
        """Configured remotes with fetch and push URLs, parsed from `git remote -v`"""
        try:
            output = self._git("remote", "-v")
        except GitCommandError:
            return []

        remotes: dict[str, RemoteInfo] = {}
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 3:
                continue
            name, url, kind = parts[0], parts[1], parts[2].strip("()")
            entry = remotes.setdefault(name, RemoteInfo(name=name))
            if kind == "fetch":
                entry.fetch_url = url
            elif kind == "push":
                entry.push_url = url
        return list(remotes.values())

    def add_remote(self, name: str, url: str) -> None:
        self._git("remote", "add", name, url)

    def remove_remote(self, name: str) -> None:
        self._git("remote", "remove", name)

    def set_remote_url(self, name: str, url: str) -> None:
        self._git("remote", "set-url", name, url)

    def rename_remote(self, old_name: str, new_name: str) -> None:
        self._git("remote", "rename", old_name, new_name)

    def checkout_remote_branch(self, remote_branch: str, local_name: str) -> None:
        """Create local_name tracking remote_branch and switch to it"""
        self._git("checkout", "-b", local_name, "--track", remote_branch)

    def delete_remote_branch(self, remote: str, branch: str) -> None:
        self._git("push", remote, "--delete", branch)

    def prune_remote(self, remote: str) -> None:
        self._git("remote", "prune", remote)
