"""Tests for FakeGit's commit graph semantics."""

from pathlib import Path

from ffwd.gateway.git.fake import FakeGit
from ffwd.gateway.git.types import (
    FastForwardMerged,
    FastForwardMergeError,
    Fetched,
    LocalBranch,
    RefUpdated,
    RefUpdateError,
)
from tests.test_utils.graphs import A, B, C, D, REPO_ROOT, X, fake_git


class TestMergeBase:
    """Tests for get_merge_base()."""

    def test_ancestor_is_its_own_merge_base(self) -> None:
        assert fake_git({}).get_merge_base(REPO_ROOT, A, D) == A

    def test_siblings_share_parent(self) -> None:
        assert fake_git({}).get_merge_base(REPO_ROOT, B, C) == A

    def test_nearest_common_ancestor_wins(self) -> None:
        assert fake_git({}).get_merge_base(REPO_ROOT, D, B) == B

    def test_unrelated_histories_have_none(self) -> None:
        assert fake_git({}).get_merge_base(REPO_ROOT, D, X) is None


class TestResolveCommit:
    """Tests for resolve_commit()."""

    def test_resolves_short_branch_and_remote_names(self) -> None:
        git = fake_git({"refs/heads/main": B, "refs/remotes/origin/main": D})

        assert git.resolve_commit(REPO_ROOT, "main") == B
        assert git.resolve_commit(REPO_ROOT, "refs/heads/main") == B
        assert git.resolve_commit(REPO_ROOT, "origin/main") == D

    def test_resolves_hash_and_unique_prefix(self) -> None:
        git = fake_git({})

        assert git.resolve_commit(REPO_ROOT, C) == C
        assert git.resolve_commit(REPO_ROOT, "cccc") == C

    def test_unknown_rev_is_none(self) -> None:
        assert fake_git({}).resolve_commit(REPO_ROOT, "nope") is None


def test_list_local_branches_is_sorted_and_skips_remotes() -> None:
    git = fake_git(
        {"refs/heads/zeta": A, "refs/heads/alpha": B, "refs/remotes/origin/alpha": B},
        upstreams={"refs/heads/alpha": "refs/remotes/origin/alpha"},
    )

    assert git.list_local_branches(REPO_ROOT) == [
        LocalBranch(
            name="alpha", full_name="refs/heads/alpha", upstream="refs/remotes/origin/alpha"
        ),
        LocalBranch(name="zeta", full_name="refs/heads/zeta", upstream=None),
    ]


def test_update_ref_rejects_stale_expected_old() -> None:
    git = fake_git({"refs/heads/main": B})

    result = git.update_ref(
        REPO_ROOT, "refs/heads/main", new_hash=D, expected_old=A, message="test"
    )

    assert isinstance(result, RefUpdateError)
    assert result.error_type == "update-ref-failed"
    assert git.refs["refs/heads/main"] == B


def test_update_ref_succeeds_with_matching_expected_old() -> None:
    git = fake_git({"refs/heads/main": B})

    result = git.update_ref(
        REPO_ROOT, "refs/heads/main", new_hash=D, expected_old=B, message="test"
    )

    assert result == RefUpdated()
    assert git.refs["refs/heads/main"] == D


def test_fetch_applies_fetched_refs() -> None:
    git = FakeGit(
        commits={A: (), B: (A,)},
        refs={"refs/remotes/origin/main": A},
        fetched_refs={"refs/remotes/origin/main": B},
    )

    assert git.fetch(REPO_ROOT, None) == Fetched()
    assert git.refs["refs/remotes/origin/main"] == B
    assert git.fetch_calls == [None]


def test_worktrees_default_to_head_in_repository_root() -> None:
    git = fake_git({"refs/heads/main": A}, head="refs/heads/main")

    assert git.list_worktree_branches(REPO_ROOT) == {"refs/heads/main": REPO_ROOT}


def test_merge_ff_only_moves_the_branch_checked_out_in_cwd() -> None:
    linked = Path("/fake/linked")
    git = fake_git(
        {"refs/heads/main": A, "refs/heads/feature": A},
        worktrees={"refs/heads/main": REPO_ROOT, "refs/heads/feature": linked},
    )

    assert git.merge_ff_only(linked, B) == FastForwardMerged()
    assert git.refs["refs/heads/feature"] == B
    assert git.refs["refs/heads/main"] == A


def test_merge_ff_only_without_checked_out_branch_fails() -> None:
    git = fake_git({"refs/heads/main": A})

    assert isinstance(git.merge_ff_only(REPO_ROOT, B), FastForwardMergeError)
