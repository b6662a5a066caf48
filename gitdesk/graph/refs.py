"""Reverse index from commit hash to the branch and tag names pointing at it."""

from collections.abc import Iterable

from gitdesk.graph.types import BranchRef, RefIndex, TagRef

LOCAL_PREFIX = "refs/heads/"
REMOTE_PREFIX = "refs/remotes/"
TAG_PREFIX = "refs/tags/"


def normalize_branch_name(ref: BranchRef) -> str:
    """
    Display name for a branch.

    Local branches are unprefixed. Remote branches carry their remote
    qualifier exactly once: "origin/main", never "origin/origin/main" for main.
    """
    name = ref.name
    if name.startswith(LOCAL_PREFIX):
        name = name[len(LOCAL_PREFIX) :]
    elif name.startswith(REMOTE_PREFIX):
        name = name[len(REMOTE_PREFIX) :]

    if not ref.is_remote or not ref.remote:
        return name

    qualifier = f"{ref.remote}/"
    if name.startswith(qualifier):
        name = name[len(qualifier) :]
    return qualifier + name


def normalize_tag_name(ref: TagRef) -> str:
    name = ref.name
    if name.startswith(TAG_PREFIX):
        name = name[len(TAG_PREFIX) :]
    return name


def _invert(pairs: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    index: dict[str, set[str]] = {}
    for target_hash, name in pairs:
        index.setdefault(target_hash, set()).add(name)
    return {target_hash: sorted(names) for target_hash, names in index.items()}


def build_ref_index(branches: Iterable[BranchRef], tags: Iterable[TagRef]) -> RefIndex:
    """Invert branch and tag enumerations into commit-hash keyed, sorted name lists."""
    return RefIndex(
        branches=_invert((ref.target_hash, normalize_branch_name(ref)) for ref in branches),
        tags=_invert((ref.target_hash, normalize_tag_name(ref)) for ref in tags),
    )
