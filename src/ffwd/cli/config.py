import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

DEFAULT_ABBREV = 7
CONFIG_DIR_ENV_VAR = "FFWD_CONFIG_DIR"


@dataclass(frozen=True)
class LoadedConfig:
    """In-memory representation of `config.toml`.

    Example config.toml:
      # Remote used by --fetch (default: git's default remote)
      remote = "origin"

      # Short hash length in reports
      abbrev = 10

      # Print a diff summary under every fast-forwarded branch
      diffstat = true
    """

    remote: str | None
    abbrev: int
    diffstat: bool

    @staticmethod
    def defaults() -> "LoadedConfig":
        return LoadedConfig(remote=None, abbrev=DEFAULT_ABBREV, diffstat=True)


def default_config_dir() -> Path:
    """Directory holding config.toml: $FFWD_CONFIG_DIR, else ~/.ffwd."""
    override = os.environ.get(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".ffwd"


def load_config(config_dir: Path) -> LoadedConfig:
    """Load config.toml from the given directory if present; otherwise return defaults.

    Raises:
        ValueError: If the file is not valid TOML or a value has the wrong type
    """
    cfg_path = config_dir / "config.toml"
    if not cfg_path.exists():
        return LoadedConfig.defaults()

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {cfg_path}: {e}") from e

    remote = data.get("remote")
    if remote is not None and (not isinstance(remote, str) or not remote):
        raise ValueError(f"{cfg_path}: 'remote' must be a non-empty string")

    abbrev = data.get("abbrev", DEFAULT_ABBREV)
    # bool is a subclass of int
    if not isinstance(abbrev, int) or isinstance(abbrev, bool) or not 4 <= abbrev <= 40:
        raise ValueError(f"{cfg_path}: 'abbrev' must be an integer between 4 and 40")

    diffstat = data.get("diffstat", True)
    if not isinstance(diffstat, bool):
        raise ValueError(f"{cfg_path}: 'diffstat' must be true or false")

    return LoadedConfig(remote=remote, abbrev=abbrev, diffstat=diffstat)
