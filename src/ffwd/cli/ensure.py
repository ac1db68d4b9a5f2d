"""CLI precondition checks that exit with a user-friendly error."""

from typing import NoReturn, TypeVar

import click

from ffwd.cli.exit_codes import EXIT_RESOLUTION_ERROR
from ffwd.output.output import user_output

T = TypeVar("T")


class Ensure:
    """Helper class for asserting CLI preconditions.

    Every failing check prints ``Error: <message>`` and raises SystemExit, so
    callers can use the returned values without further narrowing.
    """

    @staticmethod
    def fail(error_message: str, *, exit_code: int = EXIT_RESOLUTION_ERROR) -> NoReturn:
        """Exit with an error message."""
        user_output(click.style("Error: ", fg="red") + error_message)
        raise SystemExit(exit_code)

    @staticmethod
    def not_none(
        value: T | None, error_message: str, *, exit_code: int = EXIT_RESOLUTION_ERROR
    ) -> T:
        """Ensure value is not None, otherwise exit with error.

        Args:
            value: Value that may be None
            error_message: Message to display if value is None
            exit_code: Process exit code on failure (default 128)

        Returns:
            The value unchanged (with narrowed type T)

        Example:
            >>> root = Ensure.not_none(git.get_repository_root(cwd), "Not a git repository")
        """
        if value is None:
            Ensure.fail(error_message, exit_code=exit_code)
        return value
