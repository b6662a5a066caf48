"""
Operations offered on a single commit from the graph's context menu.

The menu only emits an action key; the main window asks for any name or
confirmation and then runs the key through run_commit_action.
"""

import logging
from dataclasses import dataclass

from gitdesk.git_backend.commands import GitCli

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitAction:
    key: str
    label: str
    prompt: str | None = None  # asks the user for a name first
    confirm: str | None = None  # asks the user to confirm first
    submenu: str | None = None

    @property
    def title(self) -> str:
        label = self.label.removesuffix("...")
        return f"{self.submenu} {label}" if self.submenu else label


COPY_HASH = "copy_hash"

COMMIT_ACTIONS = (
    CommitAction(COPY_HASH, "Copy Hash"),
    CommitAction("checkout", "Checkout"),
    CommitAction("create_branch", "Create Branch Here...", prompt="Branch name:"),
    CommitAction("create_tag", "Create Tag...", prompt="Tag name:"),
    CommitAction("cherry_pick", "Cherry-pick"),
    CommitAction("revert", "Revert"),
    CommitAction("reset_soft", "Soft", submenu="Reset"),
    CommitAction("reset_mixed", "Mixed", submenu="Reset"),
    CommitAction(
        "reset_hard",
        "Hard",
        submenu="Reset",
        confirm="A hard reset discards all uncommitted changes. Continue?",
    ),
)

ACTIONS_BY_KEY = {action.key: action for action in COMMIT_ACTIONS}


def run_commit_action(cli: GitCli, key: str, commit_hash: str, name: str | None = None) -> str:
    """
    Run the git operation behind key on commit_hash.

    Returns a short status message. Raises ValueError for an unknown key or
    a missing name, and lets GitError from git through.
    """
    action = ACTIONS_BY_KEY.get(key)
    if action is None or key == COPY_HASH:
        raise ValueError(f"Unknown commit action: {key}")
    if action.prompt and not (name and name.strip()):
        raise ValueError(f"{action.title} needs a name")

    short_hash = commit_hash[:7]
    logger.info("%s on %s", action.title, short_hash)

    if key == "checkout":
        cli.checkout_commit(commit_hash)
        return f"Checked out {short_hash}"
    if key == "create_branch":
        cli.create_branch_at(name.strip(), commit_hash)
        return f"Created branch {name.strip()} at {short_hash}"
    if key == "create_tag":
        cli.create_tag(name.strip(), commit_hash)
        return f"Created tag {name.strip()} at {short_hash}"
    if key == "cherry_pick":
        cli.cherry_pick(commit_hash)
        return f"Cherry-picked {short_hash}"
    if key == "revert":
        cli.revert_commit(commit_hash)
        return f"Reverted {short_hash}"

    mode = key.removeprefix("reset_")
    cli.reset_to_commit(commit_hash, mode)
    return f"Reset ({mode}) to {short_hash}"
