"""Fake git implementation for testing."""

from __future__ import annotations

from pathlib import Path

from ffwd.gateway.git.abc import Git
from ffwd.gateway.git.types import (
    DiffStat,
    FastForwardMerged,
    FastForwardMergeError,
    Fetched,
    FetchError,
    LocalBranch,
    RefUpdated,
    RefUpdateError,
)

_BRANCH_PREFIX = "refs/heads/"
_RESOLVE_PREFIXES = ("", "refs/", "refs/tags/", "refs/heads/", "refs/remotes/")


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    -----------------
    The repository is modelled as a commit graph (hash -> parent hashes) plus a
    ref namespace (full ref name -> hash). Mutations such as update_ref and
    merge_ff_only change the ref namespace, and the change is visible to
    subsequent calls within the same test.

    Mutation Tracking:
    -----------------
    This fake tracks mutations for test assertions via read-only properties:
    - updated_refs: Successful compare-and-swap updates via update_ref()
    - ff_merges: Working tree fast-forwards via merge_ff_only()
    - fetch_calls: Remotes passed to fetch()
    """

    def __init__(
        self,
        *,
        commits: dict[str, tuple[str, ...]] | None = None,
        refs: dict[str, str] | None = None,
        upstreams: dict[str, str] | None = None,
        head: str | None = None,
        repository_root: Path | None = None,
        worktrees: dict[str, Path] | None = None,
        dirty_worktree_message: str | None = None,
        concurrent_ref_updates: dict[str, str] | None = None,
        fetch_error: str | None = None,
        fetched_refs: dict[str, str] | None = None,
        diff_stats: dict[tuple[str, str], DiffStat] | None = None,
        resolve_commit_raises: dict[str, Exception] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            commits: Mapping of commit hash -> parent hashes (the commit graph)
            refs: Mapping of full ref name -> commit hash
            upstreams: Mapping of branch full name -> upstream full ref name
            head: Full ref name of the checked-out branch, None for detached HEAD
            repository_root: Value returned by get_repository_root, None for
                "not a git repository"
            worktrees: Mapping of branch full name -> worktree root it is checked out
                in. Defaults to head checked out in repository_root
            dirty_worktree_message: When set, merge_ff_only fails with this message
            concurrent_ref_updates: Mapping of ref -> hash written by an "external"
                process just before update_ref compares, simulating a lost race
            fetch_error: When set, fetch fails with this message
            fetched_refs: Mapping of ref -> hash written by a successful fetch
            diff_stats: Mapping of (base, target) -> DiffStat; missing pairs
                behave like git failing to compute the diff
            resolve_commit_raises: Mapping of rev -> exception raised when
                resolve_commit is called with that rev
        """
        self._commits = commits if commits is not None else {}
        self._refs = refs if refs is not None else {}
        self._upstreams = upstreams if upstreams is not None else {}
        self._head = head
        self._repository_root = repository_root
        if worktrees is None:
            worktrees = {}
            if head is not None and repository_root is not None:
                worktrees[head] = repository_root
        self._worktrees = worktrees
        self._dirty_worktree_message = dirty_worktree_message
        self._concurrent_ref_updates = (
            concurrent_ref_updates if concurrent_ref_updates is not None else {}
        )
        self._fetch_error = fetch_error
        self._fetched_refs = fetched_refs if fetched_refs is not None else {}
        self._diff_stats = diff_stats if diff_stats is not None else {}
        self._resolve_commit_raises = (
            resolve_commit_raises if resolve_commit_raises is not None else {}
        )

        # Mutation tracking
        self._updated_refs: list[tuple[str, str, str]] = []  # (ref, new_hash, expected_old)
        self._ff_merges: list[tuple[Path, str]] = []
        self._fetch_calls: list[str | None] = []

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._repository_root

    def resolve_commit(self, repo_root: Path, rev: str) -> str | None:
        """Resolve rev the way git's DWIM lookup does, restricted to this fake's state.

        Refs are tried with the usual prefixes, then rev is matched against
        commit hashes (exact or unique prefix of at least four characters).
        """
        if rev in self._resolve_commit_raises:
            raise self._resolve_commit_raises[rev]

        for prefix in _RESOLVE_PREFIXES:
            if f"{prefix}{rev}" in self._refs:
                return self._refs[f"{prefix}{rev}"]

        if rev in self._commits:
            return rev
        if len(rev) >= 4:
            matches = [sha for sha in self._commits if sha.startswith(rev)]
            if len(matches) == 1:
                return matches[0]
        return None

    def list_local_branches(self, repo_root: Path) -> list[LocalBranch]:
        return [
            LocalBranch(
                name=ref.removeprefix(_BRANCH_PREFIX),
                full_name=ref,
                upstream=self._upstreams.get(ref),
            )
            for ref in sorted(self._refs)
            if ref.startswith(_BRANCH_PREFIX)
        ]

    def get_merge_base(self, repo_root: Path, a: str, b: str) -> str | None:
        """Compute the best common ancestor by walking the commit graph.

        A common ancestor is "best" when no other common ancestor descends from it.
        """
        common = self._ancestors(a) & self._ancestors(b)
        best = [
            sha
            for sha in common
            if not any(other != sha and sha in self._ancestors(other) for other in common)
        ]
        if not best:
            return None
        return sorted(best)[0]

    def list_worktree_branches(self, repo_root: Path) -> dict[str, Path]:
        return self._worktrees.copy()

    def get_head_symbolic_ref(self, cwd: Path) -> str | None:
        return self._head

    def get_diff_stat(self, repo_root: Path, base: str, target: str) -> DiffStat | None:
        return self._diff_stats.get((base, target))

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def update_ref(
        self,
        repo_root: Path,
        ref: str,
        *,
        new_hash: str,
        expected_old: str,
        message: str,
    ) -> RefUpdated | RefUpdateError:
        """Compare-and-swap update of the in-memory ref namespace.

        Any configured concurrent update for ref lands first, so the comparison
        sees the externally written value.
        """
        if ref in self._concurrent_ref_updates:
            self._refs[ref] = self._concurrent_ref_updates.pop(ref)

        actual = self._refs.get(ref)
        if actual != expected_old:
            return RefUpdateError(
                ref=ref,
                message=(
                    f"fatal: update_ref failed for ref '{ref}': cannot lock ref '{ref}': "
                    f"is at {actual} but expected {expected_old}"
                ),
            )
        if new_hash not in self._commits:
            return RefUpdateError(
                ref=ref,
                message=f"fatal: update_ref failed for ref '{ref}': {new_hash}: not a valid SHA1",
            )

        self._refs[ref] = new_hash
        self._updated_refs.append((ref, new_hash, expected_old))
        return RefUpdated()

    def merge_ff_only(self, cwd: Path, target: str) -> FastForwardMerged | FastForwardMergeError:
        branch = next((ref for ref, path in self._worktrees.items() if path == cwd), None)
        if branch is None:
            return FastForwardMergeError(message="fatal: HEAD is detached")
        if self._dirty_worktree_message is not None:
            return FastForwardMergeError(message=self._dirty_worktree_message)

        current = self._refs.get(branch)
        if current is None or current not in self._ancestors(target):
            return FastForwardMergeError(message="fatal: Not possible to fast-forward, aborting.")

        self._refs[branch] = target
        self._ff_merges.append((cwd, target))
        return FastForwardMerged()

    def fetch(self, repo_root: Path, remote: str | None) -> Fetched | FetchError:
        self._fetch_calls.append(remote)
        if self._fetch_error is not None:
            return FetchError(remote=remote, message=self._fetch_error)
        self._refs.update(self._fetched_refs)
        return Fetched()

    # ============================================================================
    # Helpers and test assertions
    # ============================================================================

    def _ancestors(self, sha: str) -> set[str]:
        """Return sha and every commit reachable from it."""
        seen: set[str] = set()
        stack = [sha]
        while stack:
            current = stack.pop()
            if current in seen or current not in self._commits:
                continue
            seen.add(current)
            stack.extend(self._commits[current])
        return seen

    @property
    def refs(self) -> dict[str, str]:
        """Current ref namespace.

        This property is for test assertions only.
        """
        return self._refs.copy()

    @property
    def updated_refs(self) -> list[tuple[str, str, str]]:
        """Get list of successful ref updates as (ref, new_hash, expected_old) tuples.

        This property is for test assertions only.
        """
        return self._updated_refs.copy()

    @property
    def ff_merges(self) -> list[tuple[Path, str]]:
        """Get list of working tree fast-forwards as (cwd, target) tuples.

        This property is for test assertions only.
        """
        return self._ff_merges.copy()

    @property
    def fetch_calls(self) -> list[str | None]:
        """Get list of remotes passed to fetch().

        This property is for test assertions only.
        """
        return self._fetch_calls.copy()
