"""Tests for assembling the annotated commit graph."""

import pytest

from gitdesk.git_backend.errors import GitError
from gitdesk.graph.layout import assemble_layout, build_graph_log
from gitdesk.graph.refs import build_ref_index
from gitdesk.graph.types import BranchRef, Commit, RefIndex, TagRef


def make_commit(commit_hash, *parents, timestamp=0):
    return Commit(
        hash=commit_hash,
        message=f"commit {commit_hash}",
        author="Test User",
        email="test@example.com",
        timestamp=timestamp,
        parent_hashes=tuple(parents),
    )


MERGE_HISTORY = [
    make_commit("c" * 40, "b" * 40, "e" * 40),
    make_commit("b" * 40, "a" * 40),
    make_commit("e" * 40, "a" * 40),
    make_commit("a" * 40),
]


class FakeRepository:
    """Stands in for GitRepository, recording the order of calls."""

    def __init__(self, commits, branches=(), tags=(), walk_error=None):
        self.commits = commits
        self.branches = list(branches)
        self.tags = list(tags)
        self.walk_error = walk_error
        self.calls = []

    def list_branch_refs(self):
        self.calls.append("branches")
        return self.branches

    def list_tag_refs(self):
        self.calls.append("tags")
        return self.tags

    def walk_commits(self):
        self.calls.append("walk")
        yield from self.commits
        if self.walk_error is not None:
            raise self.walk_error


class TestAssembleLayout:
    """Test the layout records produced from a commit sequence."""

    def test_records_follow_walk_order(self):
        result = assemble_layout(MERGE_HISTORY, RefIndex())
        assert [g.hash for g in result] == [c.hash for c in MERGE_HISTORY]
        assert [g.column for g in result] == [0, 0, 1, 0]

    def test_record_fields(self):
        index = build_ref_index([BranchRef("main", "c" * 40)], [TagRef("v1", "c" * 40)])
        head = assemble_layout(MERGE_HISTORY, index)[0]
        assert head.hash_short == "ccccccc"
        assert head.message == "commit " + "c" * 40
        assert head.author == "Test User"
        assert head.email == "test@example.com"
        assert head.parent_hashes == ("b" * 40, "e" * 40)
        assert head.branch_names == ("main",)
        assert head.tag_names == ("v1",)
        assert head.color == 0

    def test_commits_without_refs_get_empty_names(self):
        result = assemble_layout(MERGE_HISTORY, RefIndex())
        assert all(g.branch_names == () and g.tag_names == () for g in result)

    def test_max_count_caps_output(self):
        assert len(assemble_layout(MERGE_HISTORY, RefIndex(), max_count=2)) == 2
        assert len(assemble_layout(MERGE_HISTORY, RefIndex(), max_count=100)) == 4

    def test_truncated_layout_is_prefix_of_full_layout(self):
        full = assemble_layout(MERGE_HISTORY, RefIndex())
        for n in range(len(MERGE_HISTORY) + 1):
            assert assemble_layout(MERGE_HISTORY, RefIndex(), max_count=n) == full[:n]

    def test_zero_or_negative_max_count_is_empty(self):
        assert assemble_layout(MERGE_HISTORY, RefIndex(), max_count=0) == []
        assert assemble_layout(MERGE_HISTORY, RefIndex(), max_count=-3) == []

    def test_walk_not_consumed_past_max_count(self):
        def walk():
            yield MERGE_HISTORY[0]
            yield MERGE_HISTORY[1]
            raise AssertionError("walked past the limit")

        assert len(assemble_layout(walk(), RefIndex(), max_count=2)) == 2

    def test_empty_history(self):
        assert assemble_layout([], RefIndex()) == []

    def test_empty_text_fields_stay_empty_strings(self):
        commit = Commit("f" * 40, message="", author="", email="", timestamp=0)
        (record,) = assemble_layout([commit], RefIndex())
        assert (record.message, record.author, record.email) == ("", "", "")
        assert record.to_dict()["email"] == ""

    def test_missing_text_fields_become_empty_strings(self):
        commit = Commit("f" * 40, message=None, author=None, email=None, timestamp=0)
        (record,) = assemble_layout([commit], RefIndex())
        assert (record.message, record.author, record.email) == ("", "", "")

    def test_walk_failure_raises_without_partial_result(self):
        def walk():
            yield MERGE_HISTORY[0]
            yield MERGE_HISTORY[1]
            raise GitError("object not found")

        with pytest.raises(GitError, match="object not found"):
            assemble_layout(walk(), RefIndex())

    def test_date_uses_commit_timezone(self):
        commit = Commit("f" * 40, "msg", "A", "a@x", timestamp=0, timezone_offset=60)
        (record,) = assemble_layout([commit], RefIndex())
        assert record.date == "1970-01-01T01:00:00+01:00"

    def test_to_dict(self):
        record = assemble_layout(MERGE_HISTORY, RefIndex(), max_count=1)[0]
        data = record.to_dict()
        assert data["hash"] == "c" * 40
        assert data["parent_hashes"] == ["b" * 40, "e" * 40]
        assert data["branch_names"] == []
        assert data["tag_names"] == []
        assert data["column"] == 0
        assert data["color"] == 0


class TestBuildGraphLog:
    """Test the repository-facing entry point."""

    def test_reads_refs_before_walking(self):
        repo = FakeRepository(MERGE_HISTORY, branches=[BranchRef("main", "c" * 40)])
        result = build_graph_log(repo)
        assert repo.calls == ["branches", "tags", "walk"]
        assert result[0].branch_names == ("main",)

    def test_passes_max_count(self):
        repo = FakeRepository(MERGE_HISTORY)
        assert len(build_graph_log(repo, max_count=3)) == 3

    def test_walk_failure_propagates(self):
        repo = FakeRepository(MERGE_HISTORY[:2], walk_error=GitError("corrupt object"))
        with pytest.raises(GitError, match="corrupt object"):
            build_graph_log(repo)
        assert repo.calls == ["branches", "tags", "walk"]

    def test_walk_failure_after_max_count_is_not_reached(self):
        repo = FakeRepository(MERGE_HISTORY[:2], walk_error=GitError("corrupt object"))
        assert len(build_graph_log(repo, max_count=2)) == 2
