import logging
from pathlib import Path

import click

from ffwd.cli.ensure import Ensure
from ffwd.cli.exit_codes import (
    EXIT_OK,
    EXIT_UNEXPECTED,
    EXIT_USAGE_ERROR,
    exit_code_for_outcome,
    exit_code_for_report,
)
from ffwd.cli.render import render_entry, render_summary
from ffwd.core.context import FfwdContext, create_context
from ffwd.core.outcomes import NoUpstream, UpstreamUnresolvable
from ffwd.core.reconcile import ReconcileOptions, reconcile_all, reconcile_branch
from ffwd.gateway.git.abc import Git
from ffwd.gateway.git.types import FetchError, LocalBranch
from ffwd.output.output import machine_output, user_output

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

_BRANCH_PREFIX = "refs/heads/"


class FfwdCommand(click.Command):
    """Command class reporting every usage error with git's usage exit code."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = EXIT_USAGE_ERROR
            raise


class FfwdUsageError(click.UsageError):
    exit_code = EXIT_USAGE_ERROR


@click.command("git-ffwd", cls=FfwdCommand, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="git-ffwd")
@click.option(
    "-n",
    "--dryrun",
    "dry_run",
    is_flag=True,
    help="Report what would happen without updating refs",
)
@click.option(
    "-a",
    "--all",
    "all_branches",
    is_flag=True,
    help="Fast-forward every local branch that has a tracking branch",
)
@click.option("--fetch", is_flag=True, help="Fetch the remote once before --all")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.argument("branch", required=False)
@click.argument("committish", required=False)
@click.pass_context
def cli(
    ctx: click.Context,
    dry_run: bool,
    all_branches: bool,
    fetch: bool,
    debug: bool,
    branch: str | None,
    committish: str | None,
) -> None:
    """Fast-forward BRANCH to COMMITTISH, refusing anything that is not a fast-forward.

    With no arguments the current branch is fast-forwarded to its upstream.
    BRANCH alone is fast-forwarded to its upstream. With --all, every local
    branch with a tracking branch is processed and a per-branch report printed.

    The checked-out branch is updated with 'git merge --ff-only' and is skipped
    when local changes are in the way; other branches are moved with a
    compare-and-swap 'git update-ref'.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    if fetch and not all_branches:
        raise FfwdUsageError("--fetch can only be used together with --all", ctx=ctx)
    if all_branches and branch is not None:
        raise FfwdUsageError("--all cannot be combined with a branch or commit-ish", ctx=ctx)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()
    ffwd_ctx: FfwdContext = ctx.obj

    options = ReconcileOptions(
        dry_run=dry_run,
        fetch=fetch,
        remote=ffwd_ctx.config.remote,
        diffstat=ffwd_ctx.config.diffstat,
    )

    if all_branches:
        _run_all(ffwd_ctx, options)
    else:
        _run_single(ffwd_ctx, options, branch=branch, committish=committish)


def _run_single(
    ctx: FfwdContext,
    options: ReconcileOptions,
    *,
    branch: str | None,
    committish: str | None,
) -> None:
    git = ctx.git
    repo_root = Ensure.not_none(git.get_repository_root(ctx.cwd), "Not a git repository")
    head = git.get_head_symbolic_ref(ctx.cwd)

    if branch is None:
        full_name = Ensure.not_none(head, "HEAD is detached; name the branch to fast-forward")
    elif branch.startswith(_BRANCH_PREFIX):
        full_name = branch
    else:
        full_name = _BRANCH_PREFIX + branch

    branches, worktrees = _enumerate(git, repo_root)
    local_branch = Ensure.not_none(
        next((b for b in branches if b.full_name == full_name), None),
        f"Branch '{full_name.removeprefix(_BRANCH_PREFIX)}' not found",
    )

    entry = reconcile_branch(
        git, repo_root, local_branch, worktrees=worktrees, committish=committish, options=options
    )

    if isinstance(entry.outcome, NoUpstream):
        Ensure.fail(
            f"Branch '{local_branch.name}' has no tracking branch; "
            "specify the commit to fast-forward to"
        )
    if isinstance(entry.outcome, UpstreamUnresolvable):
        if committish is not None:
            Ensure.fail(f"'{committish}' is not a valid commit-ish")
        Ensure.fail(
            f"Upstream '{entry.outcome.upstream}' of '{local_branch.name}' "
            "doesn't point to anything"
        )

    for line in render_entry(entry, ctx.config.abbrev):
        machine_output(line)

    exit_code = exit_code_for_outcome(entry.outcome)
    if exit_code != EXIT_OK:
        raise SystemExit(exit_code)


def _enumerate(git: Git, repo_root: Path) -> tuple[list[LocalBranch], dict[str, Path]]:
    """Local branches and the worktree each checked-out branch lives in."""
    try:
        return git.list_local_branches(repo_root), git.list_worktree_branches(repo_root)
    except RuntimeError as e:
        Ensure.fail(str(e), exit_code=EXIT_UNEXPECTED)

def _run_all(ctx: FfwdContext, options: ReconcileOptions) -> None:
    repo_root = Ensure.not_none(ctx.git.get_repository_root(ctx.cwd), "Not a git repository")

    try:
        result = reconcile_all(ctx.git, repo_root, options)
    except RuntimeError as e:
        Ensure.fail(str(e), exit_code=EXIT_UNEXPECTED)
    if isinstance(result, FetchError):
        Ensure.fail(f"Fetch failed, no branch was updated\n{result.message}")

    for entry in result.entries:
        for line in render_entry(entry, ctx.config.abbrev):
            machine_output(line)
    user_output(render_summary(result))

    exit_code = exit_code_for_report(result)
    if exit_code != EXIT_OK:
        raise SystemExit(exit_code)
