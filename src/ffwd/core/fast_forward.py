"""Fast-forward decision engine.

Classifies the relationship between a ref and a target commit and, when the
advance is a pure fast-forward, applies it through the mechanism that suits the
ref:

- a branch checked out in any worktree moves with ``git merge --ff-only`` run
  in that worktree, so its index and files follow, and local changes are
  never overwritten;
- any other branch moves with a compare-and-swap ``git update-ref`` guarded by
  the hash read at the start, so a concurrent external update fails the call
  instead of being lost.

At most one mutation happens per call, and none in dry-run mode.
"""

import logging
from pathlib import Path

from ffwd.core.outcomes import (
    AlreadyUpToDate,
    BranchRef,
    Diverged,
    FastForwarded,
    Outcome,
    RefMissing,
    UpdateFailed,
    WorkingTreeDirty,
)
from ffwd.gateway.git.abc import Git
from ffwd.gateway.git.types import FastForwardMergeError, RefUpdateError

logger = logging.getLogger(__name__)

REFLOG_MESSAGE = "ffwd: fast-forward"


def fast_forward_ref(
    git: Git,
    repo_root: Path,
    ref: BranchRef,
    target: str,
    *,
    dry_run: bool,
) -> Outcome:
    """Advance ref to target if and only if that is a fast-forward.

    Args:
        git: Git gateway
        repo_root: Repository root
        ref: Branch to advance
        target: Full hash of the commit to advance to
        dry_run: Classify without mutating anything

    Returns:
        Exactly one outcome. FastForwarded is returned only when the ref's
        current commit is a strict ancestor of target.

    Raises:
        RuntimeError: If git fails unexpectedly while computing the merge-base
    """
    base = git.resolve_commit(repo_root, ref.full_name)
    if base is None:
        logger.debug("%s: ref does not resolve", ref.full_name)
        return RefMissing()

    if base == target:
        logger.debug("%s: already at %s", ref.full_name, target)
        return AlreadyUpToDate(commit=base)

    merge_base = git.get_merge_base(repo_root, base, target)
    if merge_base != base:
        logger.debug("%s: %s is not an ancestor of %s", ref.full_name, base, target)
        return Diverged(base=base, target=target)

    if dry_run:
        logger.debug("%s: would fast-forward %s..%s", ref.full_name, base, target)
        return FastForwarded(from_hash=base, to_hash=target, dry_run=True)

    if ref.worktree is not None:
        merge_result = git.merge_ff_only(ref.worktree, target)
        if isinstance(merge_result, FastForwardMergeError):
            logger.debug("%s: working tree update refused: %s", ref.full_name, merge_result.message)
            return WorkingTreeDirty(message=merge_result.message)
    else:
        update_result = git.update_ref(
            repo_root,
            ref.full_name,
            new_hash=target,
            expected_old=base,
            message=REFLOG_MESSAGE,
        )
        if isinstance(update_result, RefUpdateError):
            logger.debug("%s: update-ref rejected: %s", ref.full_name, update_result.message)
            return UpdateFailed(message=update_result.message)

    logger.debug("%s: fast-forwarded %s..%s", ref.full_name, base, target)
    return FastForwarded(from_hash=base, to_hash=target)
