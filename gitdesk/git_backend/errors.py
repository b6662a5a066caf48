"""Errors raised by the git backend."""

import contextlib
from collections.abc import Iterator

import pygit2


class GitError(Exception):
    """A repository operation failed; the message is the backend's own."""


class GitCommandError(GitError):
    """A git subprocess exited non-zero."""

    def __init__(self, args: list[str], returncode: int, stderr: str) -> None:
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(stderr.strip() or f"git {' '.join(args)} failed with exit code {returncode}")


@contextlib.contextmanager
def backend_errors() -> Iterator[None]:
    """Re-raise libgit2 failures as GitError, including InvalidSpecError from a failed peel."""
    try:
        yield
    except (pygit2.GitError, ValueError) as e:
        raise GitError(str(e)) from e
