"""Tests for context creation."""

from pathlib import Path

import pytest

from ffwd.cli.config import CONFIG_DIR_ENV_VAR, LoadedConfig
from ffwd.core.context import FfwdContext, create_context
from ffwd.gateway.git.fake import FakeGit
from ffwd.gateway.git.real import RealGit


def test_for_test_defaults() -> None:
    ctx = FfwdContext.for_test()

    assert isinstance(ctx.git, FakeGit)
    assert ctx.cwd == Path("/fake/repo")
    assert ctx.config == LoadedConfig.defaults()


def test_create_context_reads_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "config.toml").write_text("abbrev = 12\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_DIR_ENV_VAR, str(tmp_path))
    monkeypatch.chdir(tmp_path)

    ctx = create_context()

    assert isinstance(ctx.git, RealGit)
    assert ctx.cwd == Path.cwd()
    assert ctx.config.abbrev == 12


def test_create_context_exits_128_on_invalid_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    (tmp_path / "config.toml").write_text("diffstat = 1\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_DIR_ENV_VAR, str(tmp_path))

    with pytest.raises(SystemExit) as exc_info:
        create_context()

    assert exc_info.value.code == 128
    assert "'diffstat' must be true or false" in capsys.readouterr().err
