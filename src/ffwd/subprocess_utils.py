"""Subprocess helpers with consistent error reporting."""

import os
import subprocess
from collections.abc import Sequence
from pathlib import Path


def copied_env_for_git_subprocess() -> dict[str, str]:
    """Return a copy of the environment suitable for network-touching git commands.

    Interactive credential prompts are disabled so that a fetch against a remote
    requiring authentication fails instead of hanging on a terminal prompt.
    """
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def run_subprocess_with_context(
    *,
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path,
    check: bool = True,
    env: dict[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a subprocess, attaching human-readable context to any failure.

    Output is always captured as text. When ``check`` is True and the command
    exits non-zero, the CalledProcessError is re-raised as a RuntimeError whose
    message names the operation, the command and git's stderr. The original
    exception is available via ``__cause__``.

    Args:
        cmd: Command and arguments
        operation_context: Short description of what is being attempted,
            e.g. "list local branches"
        cwd: Working directory for the command
        check: Raise on non-zero exit (default True)
        env: Environment for the child process (default: inherit)

    Returns:
        The completed process

    Raises:
        RuntimeError: If check is True and the command fails
    """
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            check=check,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        message = f"Failed to {operation_context}\nCommand: {' '.join(cmd)}"
        stderr = (e.stderr or "").strip()
        if stderr:
            message += f"\nstderr: {stderr}"
        raise RuntimeError(message) from e
