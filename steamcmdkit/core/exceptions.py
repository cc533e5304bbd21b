"""
Centralized exception hierarchy for steamcmdkit.

This module defines all custom exceptions raised while installing, running
and scraping SteamCMD, so callers can catch a single base class.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SteamCmdKitError(Exception):
    """Base exception for all steamcmdkit errors."""

    pass


class ConfigError(SteamCmdKitError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Installation Exceptions
# ============================================================================


class UnsupportedPlatformError(SteamCmdKitError):
    """Raised when SteamCMD has no distributable for the host platform."""

    def __init__(self, os_name: str):
        self.os_name = os_name
        super().__init__(f"Unsupported platform: {os_name}")


class SteamCmdInstallError(SteamCmdKitError):
    """Raised when downloading or extracting SteamCMD fails."""

    pass


class SteamCmdNotInstalledError(SteamCmdKitError):
    """Raised when the SteamCMD executable is missing from the bin directory."""

    pass


class SteamCmdNotReadyError(SteamCmdKitError):
    """Raised when SteamCMD does not become ready within the readiness timeout."""

    pass


# ============================================================================
# Process Exceptions
# ============================================================================


class SteamCmdProcessError(SteamCmdKitError):
    """Raised when SteamCMD exits with an unexpected exit code."""

    def __init__(self, message: str, result=None):
        self.result = result
        super().__init__(message)


class SteamCmdTimeoutError(SteamCmdProcessError):
    """Raised when a SteamCMD run exceeds the configured timeout."""

    pass


class SteamCmdUpdateError(SteamCmdProcessError):
    """Raised when SteamCMD output carries neither update success marker."""

    def __init__(self, app_id, reason: str, result=None):
        self.app_id = app_id
        self.reason = reason
        super().__init__(
            f"Unable to update {app_id}. SteamCMD error was: {reason}", result
        )


# ============================================================================
# Output Parsing Exceptions
# ============================================================================


class AppInfoError(SteamCmdKitError):
    """Base exception for app info scraping errors."""

    pass


class AppInfoNotFoundError(AppInfoError):
    """Raised when the app info block for an app is absent from the output."""

    def __init__(self, app_id, marker: str):
        self.app_id = app_id
        self.marker = marker
        super().__init__(
            f"App info for {app_id} not found in SteamCMD output "
            f"(missing marker {marker!r})"
        )


class AppInfoParseError(AppInfoError):
    """Raised when the app info block is not valid KeyValues text."""

    pass


# ============================================================================
# Validation Exceptions
# ============================================================================


class InvalidInstallDirError(SteamCmdKitError, TypeError):
    """Raised when an install directory is not an absolute path."""

    def __init__(self, install_dir):
        self.install_dir = install_dir
        super().__init__(
            f"install_dir must be an absolute path in update_app, got {install_dir!r}"
        )
