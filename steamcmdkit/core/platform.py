"""
Platform detection and SteamCMD distribution lookup for steamcmdkit.

This module maps the running operating system to the SteamCMD distributable
published by Valve: the download URL, the archive format and the name of the
launcher inside the archive.

Usage:
    from steamcmdkit.core.platform import detect_os, resolve_distribution

    # Resolve the distributable for this machine
    dist = resolve_distribution()
    print(f"Downloading {dist.url} ({dist.archive_kind})")

    # Resolve for an explicit platform
    dist = resolve_distribution("windows")
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional

from steamcmdkit.core.exceptions import UnsupportedPlatformError

STEAMCMD_CDN = "https://steamcdn-a.akamaihd.net/client/installer"


@dataclass(frozen=True)
class SteamCmdDistribution:
    """
    SteamCMD distributable for one platform.

    Attributes:
        os: Normalized OS name ('windows', 'macos', 'linux')
        url: HTTPS URL of the archive
        archive_kind: 'zip' or 'tar.gz'
        executable_name: Launcher inside the archive
    """

    os: str
    url: str
    archive_kind: str
    executable_name: str

    @property
    def archive_name(self) -> str:
        """File name of the archive as published on the CDN."""
        return self.url.rsplit("/", 1)[-1]


_DISTRIBUTIONS = {
    "windows": SteamCmdDistribution(
        os="windows",
        url=f"{STEAMCMD_CDN}/steamcmd.zip",
        archive_kind="zip",
        executable_name="steamcmd.exe",
    ),
    "macos": SteamCmdDistribution(
        os="macos",
        url=f"{STEAMCMD_CDN}/steamcmd_osx.tar.gz",
        archive_kind="tar.gz",
        executable_name="steamcmd.sh",
    ),
    "linux": SteamCmdDistribution(
        os="linux",
        url=f"{STEAMCMD_CDN}/steamcmd_linux.tar.gz",
        archive_kind="tar.gz",
        executable_name="steamcmd.sh",
    ),
}

# sys.platform style identifiers
_OS_ALIASES = {
    "win32": "windows",
    "cygwin": "windows",
    "darwin": "macos",
    "osx": "macos",
}


@functools.lru_cache(maxsize=1)
def detect_os() -> str:
    """
    Detect the current operating system.

    This function is cached - it only runs detection once per process.

    Returns:
        'windows', 'macos' or 'linux'. Other systems are returned lower-cased
        as reported by platform.system() so the caller can reject them.
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "darwin":
        return "macos"
    elif system == "linux":
        return "linux"
    else:
        return system


def normalize_os_name(os_name: str) -> str:
    """
    Normalize an OS identifier to steamcmdkit's naming.

    Args:
        os_name: OS name ('linux', 'Windows', 'win32', 'darwin', ...)

    Returns:
        Normalized lower-case name
    """
    name = os_name.strip().lower()
    return _OS_ALIASES.get(name, name)


def resolve_distribution(os_name: Optional[str] = None) -> SteamCmdDistribution:
    """
    Get the SteamCMD distributable for a platform.

    Args:
        os_name: OS identifier. If None, detects the current platform.

    Returns:
        SteamCmdDistribution for the platform

    Raises:
        UnsupportedPlatformError: If SteamCMD is not published for the platform

    Example:
        >>> resolve_distribution("linux").archive_kind
        'tar.gz'
    """
    if os_name is None:
        os_name = detect_os()

    try:
        return _DISTRIBUTIONS[normalize_os_name(os_name)]
    except KeyError:
        raise UnsupportedPlatformError(os_name) from None


def is_supported_platform(os_name: Optional[str] = None) -> bool:
    """
    Check if SteamCMD is available for a platform.

    Args:
        os_name: OS identifier. If None, detects the current platform.

    Returns:
        True if platform is supported
    """
    if os_name is None:
        os_name = detect_os()
    return normalize_os_name(os_name) in _DISTRIBUTIONS


def get_supported_platforms() -> list[str]:
    """
    Get list of all supported OS names.

    Returns:
        List of OS names
    """
    return list(_DISTRIBUTIONS)


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_os() to re-detect.
    Useful for testing.
    """
    detect_os.cache_clear()


__all__ = [
    "SteamCmdDistribution",
    "detect_os",
    "normalize_os_name",
    "resolve_distribution",
    "is_supported_platform",
    "get_supported_platforms",
    "clear_platform_cache",
]
