"""Tests for report rendering."""

import click
import pytest

from ffwd.cli.render import format_diff_stat, format_status, render_entry, render_summary
from ffwd.core.outcomes import (
    AlreadyUpToDate,
    BranchRef,
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

A = "1a2b3c4d5e6f" + "0" * 28
B = "5d6e7f8a9b0c" + "0" * 28
MAIN = BranchRef(name="main", full_name="refs/heads/main", worktree=None)


def _plain(lines: list[str]) -> list[str]:
    return [click.unstyle(line) for line in lines]


@pytest.mark.parametrize(
    ("outcome", "expected"),
    [
        (FastForwarded(from_hash=A, to_hash=B), "fast-forwarded: 1a2b3c4..5d6e7f8"),
        (
            FastForwarded(from_hash=A, to_hash=B, dry_run=True),
            "would fast-forward: 1a2b3c4..5d6e7f8",
        ),
        (AlreadyUpToDate(commit=A), "nothing to do"),
        (Diverged(base=A, target=B), "skipped: diverged"),
        (WorkingTreeDirty(message="x"), "skipped: working tree is dirty"),
        (NoUpstream(), "skipped: no tracking branch"),
        (UpstreamUnresolvable(upstream="origin/gone"), "error: upstream doesn't point to anything"),
        (UpdateFailed(message="x"), "error: update ref failed"),
        (RefMissing(), "error: ref doesn't exist"),
        (UnexpectedFailure(message="x"), "error: unexpected failure"),
    ],
)
def test_format_status(outcome: Outcome, expected: str) -> None:
    assert click.unstyle(format_status(outcome, abbrev=7)) == expected


def test_format_status_honors_abbrev() -> None:
    status = format_status(FastForwarded(from_hash=A, to_hash=B), abbrev=10)

    assert click.unstyle(status) == "fast-forwarded: 1a2b3c4d5e..5d6e7f8a9b"


@pytest.mark.parametrize(
    ("stat", "expected"),
    [
        (DiffStat(3, 10, 2), "3 files changed, 10 insertions(+), 2 deletions(-)"),
        (DiffStat(1, 1, 0), "1 file changed, 1 insertion(+)"),
        (DiffStat(2, 0, 1), "2 files changed, 1 deletion(-)"),
        (DiffStat(0, 0, 0), "0 files changed, 0 insertions(+), 0 deletions(-)"),
    ],
)
def test_format_diff_stat(stat: DiffStat, expected: str) -> None:
    assert format_diff_stat(stat) == expected


def test_render_entry_with_diff_stat() -> None:
    entry = ReportEntry(
        ref=MAIN,
        outcome=FastForwarded(from_hash=A, to_hash=B),
        diff_stat=DiffStat(files_changed=1, insertions=4, deletions=0),
    )

    assert _plain(render_entry(entry, abbrev=7)) == [
        "main: fast-forwarded: 1a2b3c4..5d6e7f8",
        "    1 file changed, 4 insertions(+)",
    ]


def test_render_entry_indents_every_line_of_a_git_message() -> None:
    entry = ReportEntry(
        ref=MAIN,
        outcome=WorkingTreeDirty(message="error: local changes would be overwritten\n\tREADME.md"),
    )

    assert _plain(render_entry(entry, abbrev=7)) == [
        "main: skipped: working tree is dirty",
        "    error: local changes would be overwritten",
        "    \tREADME.md",
    ]


def test_render_entry_names_the_unresolvable_upstream() -> None:
    entry = ReportEntry(ref=MAIN, outcome=UpstreamUnresolvable(upstream="refs/remotes/origin/main"))

    assert _plain(render_entry(entry, abbrev=7)) == [
        "main: error: upstream doesn't point to anything",
        "    refs/remotes/origin/main",
    ]


def _entry(outcome: Outcome) -> ReportEntry:
    return ReportEntry(ref=MAIN, outcome=outcome)


def test_render_summary_counts_each_category() -> None:
    report = ReconciliationReport(
        entries=(
            _entry(FastForwarded(from_hash=A, to_hash=B)),
            _entry(AlreadyUpToDate(commit=A)),
            _entry(Diverged(base=A, target=B)),
            _entry(NoUpstream()),
            _entry(UpdateFailed(message="x")),
        )
    )

    assert render_summary(report) == "5 branches: 1 fast-forwarded, 2 skipped, 1 failed"


def test_render_summary_in_dry_run() -> None:
    report = ReconciliationReport(entries=(_entry(FastForwarded(A, B, dry_run=True)),))

    assert render_summary(report) == "1 branch: 1 would fast-forward, 0 skipped, 0 failed"
