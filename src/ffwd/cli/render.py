"""Human-readable rendering of reconciliation outcomes."""

import click

from ffwd.core.outcomes import (
    AlreadyUpToDate,
    Diverged,
    FastForwarded,
    NoUpstream,
    Outcome,
    ReconciliationReport,
    RefMissing,
    ReportEntry,
    UnexpectedFailure,
    UpdateFailed,
    UpstreamUnresolvable,
    WorkingTreeDirty,
)
from ffwd.gateway.git.types import DiffStat

_DETAIL_INDENT = "    "


def short_hash(sha: str, abbrev: int) -> str:
    return sha[:abbrev]


def format_status(outcome: Outcome, abbrev: int) -> str:
    """One-line status for an outcome, e.g. "fast-forwarded: 1a2b3c4..5d6e7f8"."""
    if isinstance(outcome, FastForwarded):
        span = f"{short_hash(outcome.from_hash, abbrev)}..{short_hash(outcome.to_hash, abbrev)}"
        verb = "would fast-forward" if outcome.dry_run else "fast-forwarded"
        return click.style(f"{verb}: {span}", fg="green")
    if isinstance(outcome, AlreadyUpToDate):
        return click.style("nothing to do", dim=True)
    if isinstance(outcome, Diverged):
        return click.style("skipped: diverged", fg="yellow")
    if isinstance(outcome, WorkingTreeDirty):
        return click.style("skipped: working tree is dirty", fg="yellow")
    if isinstance(outcome, NoUpstream):
        return click.style("skipped: no tracking branch", fg="yellow")
    if isinstance(outcome, UpstreamUnresolvable):
        return click.style("error: upstream doesn't point to anything", fg="red")
    if isinstance(outcome, UpdateFailed):
        return click.style("error: update ref failed", fg="red")
    if isinstance(outcome, RefMissing):
        return click.style("error: ref doesn't exist", fg="red")
    return click.style("error: unexpected failure", fg="red")


def format_diff_stat(stat: DiffStat) -> str:
    """Format a DiffStat the way ``git diff --shortstat`` prints it."""
    files = "file" if stat.files_changed == 1 else "files"
    parts = [f"{stat.files_changed} {files} changed"]
    if stat.insertions or not stat.deletions:
        noun = "insertion" if stat.insertions == 1 else "insertions"
        parts.append(f"{stat.insertions} {noun}(+)")
    if stat.deletions or not stat.insertions:
        noun = "deletion" if stat.deletions == 1 else "deletions"
        parts.append(f"{stat.deletions} {noun}(-)")
    return ", ".join(parts)


def _detail(outcome: Outcome) -> str | None:
    if isinstance(outcome, (WorkingTreeDirty, UpdateFailed, UnexpectedFailure)):
        return outcome.message
    if isinstance(outcome, UpstreamUnresolvable):
        return outcome.upstream
    return None


def render_entry(entry: ReportEntry, abbrev: int) -> list[str]:
    """Lines for one report entry: the status line, then indented details."""
    lines = [f"{click.style(entry.ref.name, bold=True)}: {format_status(entry.outcome, abbrev)}"]
    if entry.diff_stat is not None:
        lines.append(_DETAIL_INDENT + format_diff_stat(entry.diff_stat))
    detail = _detail(entry.outcome)
    if detail:
        lines.extend(_DETAIL_INDENT + line for line in detail.splitlines())
    return lines


def render_summary(report: ReconciliationReport) -> str:
    """Closing line for all-branches mode, e.g. "3 branches: 1 fast-forwarded, ..."."""
    total = len(report.entries)
    noun = "branch" if total == 1 else "branches"
    dry_run = any(
        isinstance(e.outcome, FastForwarded) and e.outcome.dry_run for e in report.fast_forwarded
    )
    verb = "would fast-forward" if dry_run else "fast-forwarded"
    return (
        f"{total} {noun}: {len(report.fast_forwarded)} {verb}, "
        f"{len(report.skipped)} skipped, {len(report.errors)} failed"
    )
