"""
Core functionality for steamcmdkit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
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

from .platform import (
    SteamCmdDistribution,
    detect_os,
    resolve_distribution,
    is_supported_platform,
    get_supported_platforms,
    clear_platform_cache,
)

from .locking import (
    bin_dir_lock,
    LockTimeout,
)

__all__ = [
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
    "SteamCmdDistribution",
    "detect_os",
    "resolve_distribution",
    "is_supported_platform",
    "get_supported_platforms",
    "clear_platform_cache",
    "bin_dir_lock",
    "LockTimeout",
]
