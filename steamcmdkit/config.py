"""YAML configuration for steamcmdkit.

Configuration is an explicit, immutable value. Defaults are applied once when
a SteamCmdConfig is built (directly, from a dict or from steamcmdkit.yaml)
and the resulting value is passed to every operation unchanged.

Example steamcmdkit.yaml:

    bin_dir: /opt/steamcmd
    settle_delay: 0.5
    ready_timeout: 10
    run_timeout: 3600
"""

import logging
import os
import platform
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from steamcmdkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "steamcmdkit.yaml"
BIN_DIR_ENV_VAR = "STEAMCMDKIT_BIN_DIR"


def get_home_dir() -> Path:
    """
    Get the steamcmdkit home directory.

    Returns:
        Path to ~/.steamcmdkit (AppData/Local/steamcmdkit on Windows)
    """
    if platform.system() == "Windows":
        return Path.home() / "AppData" / "Local" / "steamcmdkit"
    return Path.home() / ".steamcmdkit"


def get_default_bin_dir() -> Path:
    """
    Get the default SteamCMD bin directory.

    STEAMCMDKIT_BIN_DIR overrides the location under the home directory.
    """
    override = os.environ.get(BIN_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    return get_home_dir() / "steamcmd_bin"


@dataclass(frozen=True)
class SteamCmdConfig:
    """
    Settings shared by every SteamCMD operation.

    Attributes:
        bin_dir: Directory SteamCMD is installed into and run from
        settle_delay: Seconds to wait after SteamCMD is present before first run
        ready_timeout: Seconds to wait for the executable and lock to be available
        run_timeout: Seconds a single SteamCMD run may take (None waits forever)
        lock_timeout: Seconds to wait for the bin dir lock (-1 waits forever)
        download_timeout: HTTP request timeout in seconds
        download_retries: HTTP download attempts (1 means no retry)
    """

    bin_dir: Path = field(default_factory=get_default_bin_dir)
    settle_delay: float = 0.5
    ready_timeout: float = 10.0
    run_timeout: Optional[float] = None
    lock_timeout: float = -1
    download_timeout: int = 30
    download_retries: int = 1

    def __post_init__(self):
        object.__setattr__(
            self, "bin_dir", Path(self.bin_dir).expanduser().resolve()
        )
        for name in (
            "settle_delay",
            "ready_timeout",
            "lock_timeout",
            "download_timeout",
        ):
            _require_number(name, getattr(self, name))
        _require_number("download_retries", self.download_retries, integer=True)
        if self.run_timeout is not None:
            _require_number("run_timeout", self.run_timeout)

        if self.settle_delay < 0:
            raise ConfigError("settle_delay must not be negative")
        if self.ready_timeout < 0:
            raise ConfigError("ready_timeout must not be negative")
        if self.lock_timeout < 0 and self.lock_timeout != -1:
            raise ConfigError(
                "lock_timeout must not be negative (use -1 to wait forever)"
            )
        if self.run_timeout is not None and self.run_timeout <= 0:
            raise ConfigError("run_timeout must be positive")
        if self.download_timeout <= 0:
            raise ConfigError("download_timeout must be positive")
        if self.download_retries < 1:
            raise ConfigError("download_retries must be at least 1")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SteamCmdConfig":
        """
        Build a configuration from a mapping, applying defaults for missing keys.

        Raises:
            ConfigError: If the mapping has unknown keys or wrong value types
        """
        if not isinstance(data, dict):
            raise ConfigError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if value is None and key != "run_timeout":
                continue
            kwargs[key] = _coerce(key, value)

        return cls(**kwargs)

    def with_overrides(self, **overrides) -> "SteamCmdConfig":
        """Return a copy with the given fields replaced (None values are ignored)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _require_number(name: str, value: Any, integer: bool = False) -> None:
    allowed = int if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, allowed):
        kind = "an integer" if integer else "a number"
        raise ConfigError(f"{name} must be {kind}, got {value!r}")


def _coerce(key: str, value: Any) -> Any:
    if key == "bin_dir":
        if not isinstance(value, (str, Path)):
            raise ConfigError(f"bin_dir must be a path string, got {value!r}")
        return Path(value)

    if key == "run_timeout" and value is None:
        return None

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")

    if key in ("download_timeout", "download_retries"):
        return int(value)
    return float(value)


def load_config(
    config_path: Optional[Union[str, Path]] = None, required: bool = False
) -> SteamCmdConfig:
    """
    Load steamcmdkit configuration from a YAML file.

    Args:
        config_path: Path to YAML file (default: ./steamcmdkit.yaml)
        required: If True, raise error if file doesn't exist

    Returns:
        SteamCmdConfig with defaults applied for missing keys

    Raises:
        ConfigError: If the file is missing (when required) or invalid

    Example:
        >>> config = load_config(Path("steamcmdkit.yaml"))
        >>> config.bin_dir
        PosixPath('/opt/steamcmd')
    """
    config_path = Path(config_path) if config_path else Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_path}")
        logger.debug(f"Config file not found (optional): {config_path}")
        return SteamCmdConfig()

    logger.debug(f"Loading configuration from {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    data = data or {}

    # Relative bin_dir is relative to the config file, not the cwd
    bin_dir = data.get("bin_dir") if isinstance(data, dict) else None
    if isinstance(bin_dir, str) and not Path(bin_dir).expanduser().is_absolute():
        data["bin_dir"] = str(config_path.parent / bin_dir)

    return SteamCmdConfig.from_dict(data)


__all__ = [
    "CONFIG_FILENAME",
    "BIN_DIR_ENV_VAR",
    "SteamCmdConfig",
    "get_home_dir",
    "get_default_bin_dir",
    "load_config",
]
