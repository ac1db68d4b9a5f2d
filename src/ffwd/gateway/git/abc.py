"""Narrow git interface used by the fast-forward engine.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory commit graph for tests

Every operation is a blocking call. Query operations follow LBYL and return
None when git cannot answer; mutating operations return discriminated unions
(see types.py) instead of raising for expected failures. Unexpected failures
surface as RuntimeError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

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


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    # ============================================================================
    # Query Operations
    # ============================================================================

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the working tree containing cwd.

        Returns:
            Repository root, or None if cwd is not inside a git working tree
        """
        ...

    @abstractmethod
    def resolve_commit(self, repo_root: Path, rev: str) -> str | None:
        """Resolve a ref or commit-ish to a full commit hash.

        Args:
            repo_root: Path to the repository root
            rev: Anything git can peel to a commit (branch, tag, hash, ...)

        Returns:
            Full commit hash, or None if rev does not name a commit
        """
        ...

    @abstractmethod
    def list_local_branches(self, repo_root: Path) -> list[LocalBranch]:
        """List local branches together with their configured upstream.

        Returns:
            Branches in git's enumeration order (sorted by ref name)
        """
        ...

    @abstractmethod
    def get_merge_base(self, repo_root: Path, a: str, b: str) -> str | None:
        """Get the best common ancestor of two commits.

        Returns:
            Commit hash of the merge-base, or None if the histories are unrelated

        Raises:
            RuntimeError: If git fails for any reason other than "no merge-base"
        """
        ...

    @abstractmethod
    def list_worktree_branches(self, repo_root: Path) -> dict[str, Path]:
        """Map every branch checked out in a worktree of this repository to that worktree.

        Covers the main worktree and all linked worktrees. Worktrees with a
        detached HEAD are left out.

        Returns:
            Fully qualified branch ref -> worktree root
        """
        ...

    @abstractmethod
    def get_head_symbolic_ref(self, cwd: Path) -> str | None:
        """Get the fully qualified ref HEAD points to (e.g. "refs/heads/main").

        Returns:
            The ref name, or None when HEAD is detached
        """
        ...

    @abstractmethod
    def get_diff_stat(self, repo_root: Path, base: str, target: str) -> DiffStat | None:
        """Summarize the changes between two commits.

        Returns:
            DiffStat, or None if git could not compute it
        """
        ...

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    @abstractmethod
    def update_ref(
        self,
        repo_root: Path,
        ref: str,
        *,
        new_hash: str,
        expected_old: str,
        message: str,
    ) -> RefUpdated | RefUpdateError:
        """Point ref at new_hash only if it currently points at expected_old.

        The compare-and-swap makes a concurrent external change to the ref
        fail the update instead of being overwritten.

        Args:
            repo_root: Path to the repository root
            ref: Fully qualified ref name
            new_hash: Commit the ref should point to afterwards
            expected_old: Commit the ref must point to right now
            message: Reflog message
        """
        ...

    @abstractmethod
    def merge_ff_only(self, cwd: Path, target: str) -> FastForwardMerged | FastForwardMergeError:
        """Fast-forward the checked-out branch and its working tree to target.

        Fails without touching anything when local changes would be overwritten
        or the update is not a fast-forward. Local changes are never stashed,
        whatever merge.autostash says.
        """
        ...

    @abstractmethod
    def fetch(self, repo_root: Path, remote: str | None) -> Fetched | FetchError:
        """Fetch from a remote.

        Args:
            repo_root: Path to the repository root
            remote: Remote name, or None for git's default remote
        """
        ...
