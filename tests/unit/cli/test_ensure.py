"""Tests for CLI Ensure utility class."""

import pytest

from ffwd.cli.ensure import Ensure


class TestEnsureNotNone:
    """Tests for Ensure.not_none method."""

    def test_returns_value_when_not_none(self) -> None:
        assert Ensure.not_none("hello", "Value is None") == "hello"

    def test_falsy_values_are_not_none(self) -> None:
        assert Ensure.not_none(0, "Value is None") == 0
        assert Ensure.not_none("", "Value is None") == ""

    def test_exits_with_resolution_error_by_default(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as exc_info:
            Ensure.not_none(None, "Not a git repository")

        assert exc_info.value.code == 128
        assert "Error: Not a git repository" in capsys.readouterr().err


def test_fail_uses_given_exit_code(capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as exc_info:
        Ensure.fail("something broke", exit_code=2)

    assert exc_info.value.code == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error: something broke" in captured.err
