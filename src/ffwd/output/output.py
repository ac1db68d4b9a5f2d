"""Output helpers separating user-facing messages from machine-readable output.

- user_output(): progress, status and error messages. Goes to stderr so that
  stdout stays clean for piping.
- machine_output(): results intended for consumption by other programs.
  Goes to stdout.
"""

from typing import Any

import click


def user_output(message: Any = "", *, nl: bool = True) -> None:
    """Emit a message for the human running the command (stderr)."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", *, nl: bool = True) -> None:
    """Emit a result line for scripts and pipes (stdout)."""
    click.echo(message, nl=nl)
