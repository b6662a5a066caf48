"""Git backend: pygit2 repository access plus git CLI commands"""

from gitdesk.git_backend.commands import GitCli, clone_repo
from gitdesk.git_backend.errors import GitCommandError, GitError
from gitdesk.git_backend.repository import GitRepository, init_repo

__all__ = ["GitCli", "GitCommandError", "GitError", "GitRepository", "clone_repo", "init_repo"]
