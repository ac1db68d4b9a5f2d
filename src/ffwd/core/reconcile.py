"""Batch reconciliation of local branches with their upstream.

Refs are processed strictly one at a time in enumeration order. Every ref gets
exactly one outcome; a failure on one ref is recorded and the batch moves on.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from ffwd.core.fast_forward import fast_forward_ref
from ffwd.core.outcomes import (
    BranchRef,
    FastForwarded,
    NoUpstream,
    Outcome,
    ReconciliationReport,
    ReportEntry,
    UnexpectedFailure,
    UpstreamUnresolvable,
)
from ffwd.gateway.git.abc import Git
from ffwd.gateway.git.types import FetchError, LocalBranch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileOptions:
    """Knobs shared by single-ref and all-branches reconciliation.

    Attributes:
        dry_run: Classify refs without mutating anything
        fetch: Fetch once before processing (all-branches mode only)
        remote: Remote to fetch from, None for git's default remote
        diffstat: Attach a diff summary to every completed fast-forward
    """

    dry_run: bool
    fetch: bool
    remote: str | None
    diffstat: bool


def branch_ref(branch: LocalBranch, worktrees: dict[str, Path]) -> BranchRef:
    """Build the BranchRef for a local branch given the checked-out branch of every worktree."""
    return BranchRef(
        name=branch.name,
        full_name=branch.full_name,
        worktree=worktrees.get(branch.full_name),
    )


def reconcile_branch(
    git: Git,
    repo_root: Path,
    branch: LocalBranch,
    *,
    worktrees: dict[str, Path],
    committish: str | None,
    options: ReconcileOptions,
) -> ReportEntry:
    """Reconcile one branch with an explicit commit-ish, or with its upstream.

    Args:
        git: Git gateway
        repo_root: Repository root
        branch: Branch to advance
        worktrees: Branch full name -> root of the worktree it is checked out in
        committish: Explicit target; None means "use the upstream binding"
        options: Reconciliation options

    Returns:
        The entry for this branch. Never raises for git failures: an
        unexpected RuntimeError from the gateway becomes UnexpectedFailure.
    """
    ref = branch_ref(branch, worktrees)
    target_rev = committish if committish is not None else branch.upstream
    if target_rev is None:
        return ReportEntry(ref=ref, outcome=NoUpstream())

    try:
        outcome = _resolve_and_fast_forward(git, repo_root, ref, target_rev, options)
    except RuntimeError as e:
        logger.warning("Unexpected git failure while processing %s: %s", ref.full_name, e)
        return ReportEntry(ref=ref, outcome=UnexpectedFailure(message=str(e)))

    diff_stat = None
    if isinstance(outcome, FastForwarded) and not outcome.dry_run and options.diffstat:
        diff_stat = git.get_diff_stat(repo_root, outcome.from_hash, outcome.to_hash)
        if diff_stat is None:
            logger.debug("Could not compute diffstat for %s", ref.full_name)

    return ReportEntry(ref=ref, outcome=outcome, diff_stat=diff_stat)


def _resolve_and_fast_forward(
    git: Git,
    repo_root: Path,
    ref: BranchRef,
    target_rev: str,
    options: ReconcileOptions,
) -> Outcome:
    target = git.resolve_commit(repo_root, target_rev)
    if target is None:
        return UpstreamUnresolvable(upstream=target_rev)
    return fast_forward_ref(git, repo_root, ref, target, dry_run=options.dry_run)


def reconcile_all(
    git: Git,
    repo_root: Path,
    options: ReconcileOptions,
) -> ReconciliationReport | FetchError:
    """Reconcile every local branch with its upstream.

    If options.fetch is set, fetches exactly once first. A failed fetch aborts
    the whole batch before any branch is touched, since every branch would be
    compared against stale remote-tracking refs.

    Returns:
        The report, with one entry per local branch in enumeration order, or
        the FetchError that aborted the batch

    Raises:
        RuntimeError: If git fails while enumerating branches or worktrees
    """
    if options.fetch:
        logger.debug("Fetching from %s", options.remote or "default remote")
        fetch_result = git.fetch(repo_root, options.remote)
        if isinstance(fetch_result, FetchError):
            return fetch_result

    worktrees = git.list_worktree_branches(repo_root)
    entries = [
        reconcile_branch(
            git, repo_root, branch, worktrees=worktrees, committish=None, options=options
        )
        for branch in git.list_local_branches(repo_root)
    ]
    return ReconciliationReport(entries=tuple(entries))
