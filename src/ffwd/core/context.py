"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

import click

from ffwd.cli.config import LoadedConfig, default_config_dir, load_config
from ffwd.cli.exit_codes import EXIT_RESOLUTION_ERROR
from ffwd.gateway.git.abc import Git
from ffwd.gateway.git.real import RealGit
from ffwd.output.output import user_output


@dataclass(frozen=True)
class FfwdContext:
    """Immutable context holding all dependencies for a run.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    cwd: Path  # Current working directory at CLI invocation
    config: LoadedConfig

    @staticmethod
    def for_test(
        git: Git | None = None,
        cwd: Path | None = None,
        config: LoadedConfig | None = None,
    ) -> "FfwdContext":
        """Create a context for tests, defaulting to an empty FakeGit.

        Example:
            >>> git = FakeGit(commits={"a1": ()}, refs={"refs/heads/main": "a1"})
            >>> ctx = FfwdContext.for_test(git=git, cwd=tmp_path)
            >>> result = runner.invoke(cli, ["--all"], obj=ctx)
        """
        from ffwd.gateway.git.fake import FakeGit

        return FfwdContext(
            git=git if git is not None else FakeGit(),
            cwd=cwd if cwd is not None else Path("/fake/repo"),
            config=config if config is not None else LoadedConfig.defaults(),
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        tuple[Path | None, str | None]: (path, error_message)
        - If successful: (Path, None)
        - If directory deleted: (None, error_message)
    """
    try:
        return (Path.cwd(), None)
    except (FileNotFoundError, OSError):
        return (None, "Current working directory no longer exists")


def create_context() -> FfwdContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.
    """
    cwd, error_msg = safe_cwd()
    if cwd is None:
        assert error_msg is not None
        user_output(click.style("Error: ", fg="red") + error_msg)
        raise SystemExit(EXIT_RESOLUTION_ERROR)

    try:
        config = load_config(default_config_dir())
    except ValueError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(EXIT_RESOLUTION_ERROR) from e

    return FfwdContext(git=RealGit(), cwd=cwd, config=config)
