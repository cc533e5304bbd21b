"""
steamcmdkit - scripted installs and app metadata through Valve's SteamCMD.

Example Usage:
-------------
    from pathlib import Path
    import steamcmdkit

    config = steamcmdkit.SteamCmdConfig(bin_dir=Path("/opt/steamcmd"))
    steamcmdkit.prep(config)

    info = steamcmdkit.get_app_info(730, config)
    updated = steamcmdkit.update_app(1007, Path("/srv/steamworks"), config)
"""

__version__ = "0.1.0"

from steamcmdkit.config import SteamCmdConfig, load_config
from steamcmdkit.core.exceptions import (
    SteamCmdKitError,
    ConfigError,
    UnsupportedPlatformError,
    SteamCmdInstallError,
    SteamCmdNotInstalledError,
    SteamCmdNotReadyError,
    SteamCmdProcessError,
    SteamCmdTimeoutError,
    SteamCmdUpdateError,
    AppInfoError,
    AppInfoNotFoundError,
    AppInfoParseError,
    InvalidInstallDirError,
)
from steamcmdkit.steamcmd import (
    SteamCmdInstaller,
    ensure_present,
    download,
    ProcessResult,
    directive,
    run,
    UpdateOutcome,
    UpdateResult,
    parse_app_info,
    classify_update_result,
    touch,
    prep,
    get_app_info,
    update_app,
)

__all__ = [
    "__version__",
    "SteamCmdConfig",
    "load_config",
    "SteamCmdKitError",
    "ConfigError",
    "UnsupportedPlatformError",
    "SteamCmdInstallError",
    "SteamCmdNotInstalledError",
    "SteamCmdNotReadyError",
    "SteamCmdProcessError",
    "SteamCmdTimeoutError",
    "SteamCmdUpdateError",
    "AppInfoError",
    "AppInfoNotFoundError",
    "AppInfoParseError",
    "InvalidInstallDirError",
    "SteamCmdInstaller",
    "ensure_present",
    "download",
    "ProcessResult",
    "directive",
    "run",
    "UpdateOutcome",
    "UpdateResult",
    "parse_app_info",
    "classify_update_result",
    "touch",
    "prep",
    "get_app_info",
    "update_app",
]
