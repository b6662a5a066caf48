"""Tests for the commit hash to ref name index."""

import pytest

from gitdesk.graph.refs import build_ref_index, normalize_branch_name, normalize_tag_name
from gitdesk.graph.types import BranchRef, TagRef

H1 = "1" * 40
H2 = "2" * 40


class TestNormalizeBranchName:
    """Test display names for local and remote branches."""

    @pytest.mark.parametrize(
        ("ref", "expected"),
        [
            (BranchRef("main", H1), "main"),
            (BranchRef("refs/heads/feature/login", H1), "feature/login"),
            (BranchRef("origin/main", H1, is_remote=True, remote="origin"), "origin/main"),
            (BranchRef("main", H1, is_remote=True, remote="origin"), "origin/main"),
            (
                BranchRef("refs/remotes/origin/main", H1, is_remote=True, remote="origin"),
                "origin/main",
            ),
            (
                BranchRef("refs/remotes/upstream/dev", H1, is_remote=True, remote="upstream"),
                "upstream/dev",
            ),
        ],
    )
    def test_normalize(self, ref, expected):
        assert normalize_branch_name(ref) == expected

    def test_remote_branch_named_like_its_remote(self):
        """Only the remote qualifier is stripped, not a branch's own leading segment."""
        nested = BranchRef("origin/origin/x", H1, is_remote=True, remote="origin")
        plain = BranchRef("origin/x", H1, is_remote=True, remote="origin")
        assert normalize_branch_name(nested) == "origin/origin/x"
        assert normalize_branch_name(plain) == "origin/x"

    def test_remote_without_known_remote_keeps_name(self):
        ref = BranchRef("refs/remotes/upstream/dev", H1, is_remote=True, remote=None)
        assert normalize_branch_name(ref) == "upstream/dev"

    def test_tag_prefix_stripped(self):
        assert normalize_tag_name(TagRef("refs/tags/v1.0", H1)) == "v1.0"
        assert normalize_tag_name(TagRef("v1.0", H1)) == "v1.0"


class TestBuildRefIndex:
    """Test inversion of branch and tag enumerations."""

    def test_branch_and_tag_on_same_commit(self):
        index = build_ref_index(
            [BranchRef("main", H1), BranchRef("origin/main", H1, is_remote=True, remote="origin")],
            [TagRef("v1", H1)],
        )
        assert index.branches_for(H1) == ["main", "origin/main"]
        assert index.tags_for(H1) == ["v1"]

    def test_names_sorted_and_deduplicated(self):
        index = build_ref_index(
            [
                BranchRef("zeta", H1),
                BranchRef("alpha", H1),
                BranchRef("origin/main", H1, is_remote=True, remote="origin"),
                BranchRef("refs/remotes/origin/main", H1, is_remote=True, remote="origin"),
            ],
            [TagRef("v2", H1), TagRef("refs/tags/v10", H1), TagRef("v2", H1)],
        )
        assert index.branches_for(H1) == ["alpha", "origin/main", "zeta"]
        assert index.tags_for(H1) == ["v10", "v2"]

    def test_refs_on_different_commits(self):
        index = build_ref_index([BranchRef("main", H1), BranchRef("dev", H2)], [])
        assert index.branches_for(H1) == ["main"]
        assert index.branches_for(H2) == ["dev"]

    def test_unreferenced_commit_gets_empty_lists(self):
        index = build_ref_index([BranchRef("main", H1)], [TagRef("v1", H1)])
        assert index.branches_for(H2) == []
        assert index.tags_for(H2) == []

    def test_empty_enumerations(self):
        index = build_ref_index([], [])
        assert index.branches == {}
        assert index.tags == {}

    def test_returned_lists_are_copies(self):
        index = build_ref_index([BranchRef("main", H1)], [])
        index.branches_for(H1).append("other")
        assert index.branches_for(H1) == ["main"]
