"""Per-ref outcomes and the reconciliation report.

Outcome is a discriminated union: every processed ref gets exactly one of the
frozen dataclasses below. Callers narrow with isinstance().
"""

from dataclasses import dataclass
from pathlib import Path

from ffwd.gateway.git.types import DiffStat


@dataclass(frozen=True)
class BranchRef:
    """A local branch taking part in a reconciliation pass.

    Attributes:
        name: Short name, e.g. "feature"
        full_name: Fully qualified name, e.g. "refs/heads/feature"
        worktree: Root of the worktree (main or linked) that has this branch
            checked out, None if no worktree does
    """

    name: str
    full_name: str
    worktree: Path | None

    @property
    def is_checked_out(self) -> bool:
        return self.worktree is not None


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AlreadyUpToDate:
    """The ref already points at the target."""

    commit: str


@dataclass(frozen=True)
class FastForwarded:
    """The ref was (or, in dry-run, would be) advanced from from_hash to to_hash.

    from_hash is always a strict ancestor of to_hash.
    """

    from_hash: str
    to_hash: str
    dry_run: bool = False


@dataclass(frozen=True)
class Diverged:
    """The target is not reachable forward from the ref; no fast-forward possible."""

    base: str
    target: str


@dataclass(frozen=True)
class WorkingTreeDirty:
    """The checked-out branch could not be fast-forwarded without touching local changes."""

    message: str


@dataclass(frozen=True)
class UpdateFailed:
    """The compare-and-swap ref update was rejected by git."""

    message: str


@dataclass(frozen=True)
class RefMissing:
    """The ref does not exist."""


@dataclass(frozen=True)
class NoUpstream:
    """The branch has no tracking branch configured."""


@dataclass(frozen=True)
class UpstreamUnresolvable:
    """The upstream (or explicit target) does not name a commit."""

    upstream: str


@dataclass(frozen=True)
class UnexpectedFailure:
    """git behaved in a way the engine does not account for."""

    message: str


Outcome = (
    AlreadyUpToDate
    | FastForwarded
    | Diverged
    | WorkingTreeDirty
    | UpdateFailed
    | RefMissing
    | NoUpstream
    | UpstreamUnresolvable
    | UnexpectedFailure
)

# Outcomes that are policy decisions rather than failures.
SKIP_OUTCOMES = (Diverged, WorkingTreeDirty, NoUpstream)
ERROR_OUTCOMES = (UpdateFailed, RefMissing, UpstreamUnresolvable, UnexpectedFailure)


def is_error(outcome: Outcome) -> bool:
    """Return True if the outcome represents a failure rather than a result or a skip."""
    return isinstance(outcome, ERROR_OUTCOMES)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReportEntry:
    """The outcome for one ref, with the diff summary of a completed fast-forward."""

    ref: BranchRef
    outcome: Outcome
    diff_stat: DiffStat | None = None


@dataclass(frozen=True)
class ReconciliationReport:
    """Ordered outcomes of a reconciliation pass, one entry per ref in enumeration order."""

    entries: tuple[ReportEntry, ...]

    @property
    def has_errors(self) -> bool:
        return any(is_error(entry.outcome) for entry in self.entries)

    @property
    def has_unexpected_failures(self) -> bool:
        return any(isinstance(entry.outcome, UnexpectedFailure) for entry in self.entries)

    @property
    def fast_forwarded(self) -> tuple[ReportEntry, ...]:
        return tuple(e for e in self.entries if isinstance(e.outcome, FastForwarded))

    @property
    def skipped(self) -> tuple[ReportEntry, ...]:
        return tuple(e for e in self.entries if isinstance(e.outcome, SKIP_OUTCOMES))

    @property
    def errors(self) -> tuple[ReportEntry, ...]:
        return tuple(e for e in self.entries if is_error(e.outcome))
