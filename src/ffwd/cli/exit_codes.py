"""Process exit codes and their mapping from outcomes."""

from ffwd.core.outcomes import (
    AlreadyUpToDate,
    Diverged,
    FastForwarded,
    NoUpstream,
    Outcome,
    ReconciliationReport,
    RefMissing,
    UpdateFailed,
    UpstreamUnresolvable,
    WorkingTreeDirty,
)

EXIT_OK = 0
EXIT_NOT_FAST_FORWARD = 1  # diverged, or working tree dirty
EXIT_UPDATE_FAILED = 2  # ref update failed, or ref does not exist
EXIT_UNEXPECTED = 10
EXIT_RESOLUTION_ERROR = 128  # not a repository, branch not found, invalid commit-ish
EXIT_USAGE_ERROR = 129


def exit_code_for_outcome(outcome: Outcome) -> int:
    """Exit code for single-ref mode."""
    if isinstance(outcome, (FastForwarded, AlreadyUpToDate)):
        return EXIT_OK
    if isinstance(outcome, (Diverged, WorkingTreeDirty)):
        return EXIT_NOT_FAST_FORWARD
    if isinstance(outcome, (UpdateFailed, RefMissing)):
        return EXIT_UPDATE_FAILED
    if isinstance(outcome, (NoUpstream, UpstreamUnresolvable)):
        return EXIT_RESOLUTION_ERROR
    return EXIT_UNEXPECTED


def exit_code_for_report(report: ReconciliationReport) -> int:
    """Exit code for all-branches mode.

    Skipped branches (diverged, dirty, no tracking branch) are not failures.
    """
    if report.has_unexpected_failures:
        return EXIT_UNEXPECTED
    if report.has_errors:
        return EXIT_UPDATE_FAILED
    return EXIT_OK
