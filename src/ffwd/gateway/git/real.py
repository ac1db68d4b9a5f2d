"""Production implementation of the git gateway using subprocess."""

import re
import subprocess
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
from ffwd.subprocess_utils import copied_env_for_git_subprocess, run_subprocess_with_context

_SHORTSTAT_FILES = re.compile(r"(\d+) files? changed")
_SHORTSTAT_INSERTIONS = re.compile(r"(\d+) insertions?\(\+\)")
_SHORTSTAT_DELETIONS = re.compile(r"(\d+) deletions?\(-\)")


def parse_shortstat(output: str) -> DiffStat:
    """Parse the summary line printed by ``git diff --shortstat``.

    An empty summary (no changes between the two commits) parses to all zeros.
    """
    files = _SHORTSTAT_FILES.search(output)
    insertions = _SHORTSTAT_INSERTIONS.search(output)
    deletions = _SHORTSTAT_DELETIONS.search(output)
    return DiffStat(
        files_changed=int(files.group(1)) if files else 0,
        insertions=int(insertions.group(1)) if insertions else 0,
        deletions=int(deletions.group(1)) if deletions else 0,
    )


def parse_worktree_branches(output: str) -> dict[str, Path]:
    """Parse ``git worktree list --porcelain`` into branch ref -> worktree root.

    Each worktree is a block of "key value" lines separated by a blank line;
    only blocks with a "branch" line name a checked-out branch.
    """
    branches: dict[str, Path] = {}
    worktree: Path | None = None
    for line in output.splitlines():
        if line.startswith("worktree "):
            worktree = Path(line.removeprefix("worktree "))
        elif line.startswith("branch ") and worktree is not None:
            branches[line.removeprefix("branch ")] = worktree
        elif not line:
            worktree = None
    return branches


def _error_text(result: subprocess.CompletedProcess[str]) -> str:
    return (result.stderr or result.stdout or "").strip()


class RealGit(Git):
    """Production implementation of git operations using subprocess.

    All operations execute actual git commands via subprocess.
    """

    # ============================================================================
    # Query Operations
    # ============================================================================

    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the working tree containing cwd."""
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def resolve_commit(self, repo_root: Path, rev: str) -> str | None:
        """Resolve a ref or commit-ish to a full commit hash."""
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def list_local_branches(self, repo_root: Path) -> list[LocalBranch]:
        """List local branches together with their configured upstream."""
        result = run_subprocess_with_context(
            cmd=[
                "git",
                "for-each-ref",
                "--format=%(refname)\t%(refname:short)\t%(upstream)",
                "refs/heads/",
            ],
            operation_context="list local branches",
            cwd=repo_root,
        )

        branches: list[LocalBranch] = []
        for line in result.stdout.splitlines():
            if not line:
                continue
            full_name, name, upstream = line.split("\t")
            branches.append(
                LocalBranch(name=name, full_name=full_name, upstream=upstream if upstream else None)
            )
        return branches

    def get_merge_base(self, repo_root: Path, a: str, b: str) -> str | None:
        """Get the best common ancestor of two commits.

        git merge-base exits 1 with no output when the histories are unrelated;
        any other non-zero exit is a real failure.
        """
        result = run_subprocess_with_context(
            cmd=["git", "merge-base", a, b],
            operation_context=f"compute merge-base of {a} and {b}",
            cwd=repo_root,
            check=False,
        )
        if result.returncode == 0:
            return result.stdout.strip()
        if result.returncode == 1 and not result.stderr.strip():
            return None
        raise RuntimeError(
            f"Failed to compute merge-base of {a} and {b}\n"
            f"Command: git merge-base {a} {b}\n"
            f"stderr: {_error_text(result)}"
        )

    def list_worktree_branches(self, repo_root: Path) -> dict[str, Path]:
        """Map checked-out branches to their worktree via git worktree list --porcelain."""
        result = run_subprocess_with_context(
            cmd=["git", "worktree", "list", "--porcelain"],
            operation_context="list worktrees",
            cwd=repo_root,
        )
        return parse_worktree_branches(result.stdout)

    def get_head_symbolic_ref(self, cwd: Path) -> str | None:
        """Get the fully qualified ref HEAD points to."""
        result = subprocess.run(
            ["git", "symbolic-ref", "--quiet", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def get_diff_stat(self, repo_root: Path, base: str, target: str) -> DiffStat | None:
        """Summarize the changes between two commits via git diff --shortstat."""
        result = subprocess.run(
            ["git", "diff", "--shortstat", base, target],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return parse_shortstat(result.stdout)

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
        """Point ref at new_hash only if it currently points at expected_old."""
        result = run_subprocess_with_context(
            cmd=["git", "update-ref", "-m", message, ref, new_hash, expected_old],
            operation_context=f"update ref '{ref}'",
            cwd=repo_root,
            check=False,
        )
        if result.returncode != 0:
            return RefUpdateError(ref=ref, message=_error_text(result))
        return RefUpdated()

    def merge_ff_only(self, cwd: Path, target: str) -> FastForwardMerged | FastForwardMergeError:
        """Fast-forward the checked-out branch and its working tree to target."""
        result = run_subprocess_with_context(
            cmd=["git", "merge", "--ff-only", "--no-autostash", "--quiet", target],
            operation_context=f"fast-forward working tree to {target}",
            cwd=cwd,
            check=False,
        )
        if result.returncode != 0:
            return FastForwardMergeError(message=_error_text(result))
        return FastForwardMerged()

    def fetch(self, repo_root: Path, remote: str | None) -> Fetched | FetchError:
        """Fetch from a remote (git's default remote when remote is None)."""
        cmd = ["git", "fetch", "--quiet"]
        if remote is not None:
            cmd.append(remote)
        result = run_subprocess_with_context(
            cmd=cmd,
            operation_context=f"fetch from remote '{remote or 'default'}'",
            cwd=repo_root,
            check=False,
            env=copied_env_for_git_subprocess(),
        )
        if result.returncode != 0:
            return FetchError(remote=remote, message=_error_text(result))
        return Fetched()
