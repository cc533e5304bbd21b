"""
High-level SteamCMD operations.

Composes the installer, the process runner and the output parsers into the
public operations of steamcmdkit.

Usage:
    from pathlib import Path
    from steamcmdkit import SteamCmdConfig, prep, get_app_info, update_app

    config = SteamCmdConfig(bin_dir=Path("/opt/steamcmd"))
    prep(config)

    info = get_app_info(730, config)
    print(info["common"]["name"])

    if update_app(90, Path("/srv/hlds"), config):
        print("HLDS was installed or updated")
"""

import logging
import time
from pathlib import Path, PurePath
from typing import Any, Dict, List, Optional, Union

from steamcmdkit.config import SteamCmdConfig
from steamcmdkit.core.exceptions import (
    InvalidInstallDirError,
    SteamCmdNotReadyError,
    SteamCmdUpdateError,
)
from steamcmdkit.core.locking import is_locked
from steamcmdkit.steamcmd.installer import SteamCmdInstaller
from steamcmdkit.steamcmd.parsers import (
    AppId,
    UpdateOutcome,
    classify_update_result,
    parse_app_info,
)
from steamcmdkit.steamcmd.runner import Directive, ProcessResult, directive, run

logger = logging.getLogger(__name__)

SHUTDOWN_ON_FAILED_COMMAND_OFF = directive("@ShutdownOnFailedCommand", "0")
LOGIN_ANONYMOUS = directive("login", "anonymous")

# HLDS needs a second app_update pass before it reports fully installed
DOUBLE_UPDATE_APP_IDS = frozenset({90})

# Throwaway app used to make SteamCMD populate its app info cache
CACHE_WARMUP_APP_ID = 4
CACHE_WARMUP_INSTALL_DIR = "./4"

READY_POLL_INTERVAL = 0.1


def touch(config: Optional[SteamCmdConfig] = None) -> ProcessResult:
    """
    Start SteamCMD with no directives besides quit.

    SteamCMD updates itself on first start, so this confirms the install works
    and completes the self-update.
    """
    config = config or SteamCmdConfig()
    logger.info("Starting SteamCMD to complete its self-update")
    return run([], config)


def wait_until_ready(config: Optional[SteamCmdConfig] = None) -> None:
    """
    Wait until SteamCMD can be started.

    Polls until the launcher exists and no other process holds the bin
    directory lock, then waits config.settle_delay seconds so SteamCMD can
    release the lock on its own files after extraction.

    Raises:
        SteamCmdNotReadyError: If not ready within config.ready_timeout seconds
    """
    config = config or SteamCmdConfig()
    executable = SteamCmdInstaller(config).get_executable_path()
    deadline = time.monotonic() + config.ready_timeout

    while not executable.exists() or is_locked(config.bin_dir):
        if time.monotonic() >= deadline:
            raise SteamCmdNotReadyError(
                f"SteamCMD at {config.bin_dir} not ready after {config.ready_timeout}s"
            )
        time.sleep(READY_POLL_INTERVAL)

    if config.settle_delay:
        logger.debug(f"Waiting {config.settle_delay}s for SteamCMD to settle")
        time.sleep(config.settle_delay)


def prep(config: Optional[SteamCmdConfig] = None) -> None:
    """
    Make sure SteamCMD is installed, ready and self-updated.

    Raises:
        UnsupportedPlatformError: If SteamCMD does not run on the platform
        SteamCmdInstallError: If installation fails
        SteamCmdNotReadyError: If SteamCMD does not become ready
        SteamCmdProcessError: If the first run fails
    """
    config = config or SteamCmdConfig()
    SteamCmdInstaller(config).ensure_present()
    wait_until_ready(config)
    touch(config)


def build_app_info_warmup_directives(app_id: AppId) -> List[Directive]:
    """Directives that make SteamCMD fetch app info into its local cache."""
    return [
        SHUTDOWN_ON_FAILED_COMMAND_OFF,
        LOGIN_ANONYMOUS,
        directive("app_info_print", app_id),
        directive("force_install_dir", CACHE_WARMUP_INSTALL_DIR),
        directive("app_update", CACHE_WARMUP_APP_ID),
    ]


def build_app_info_directives(app_id: AppId) -> List[Directive]:
    """
    Directives that print the info block for an app.

    ``find e`` prints the ConVars listing, which marks the end of the block.
    """
    return [
        SHUTDOWN_ON_FAILED_COMMAND_OFF,
        LOGIN_ANONYMOUS,
        directive("app_info_update", 1),
        directive("app_info_print", app_id),
        directive("find", "e"),
    ]


def get_app_info(
    app_id: AppId, config: Optional[SteamCmdConfig] = None
) -> Dict[str, Any]:
    """
    Fetch the metadata SteamCMD holds for an app.

    Args:
        app_id: Steam application ID
        config: steamcmdkit configuration (defaults if None)

    Returns:
        Nested mapping of the app's metadata

    Raises:
        AppInfoNotFoundError: If SteamCMD printed no info block for the app
        AppInfoParseError: If the info block could not be parsed
        SteamCmdProcessError: If SteamCMD fails
    """
    config = config or SteamCmdConfig()
    logger.info(f"Fetching app info for {app_id}")

    run(build_app_info_warmup_directives(app_id), config)
    result = run(build_app_info_directives(app_id), config)

    return parse_app_info(result.stdout, app_id)


def _needs_double_update(app_id: AppId) -> bool:
    try:
        return int(app_id) in DOUBLE_UPDATE_APP_IDS
    except (TypeError, ValueError):
        return False


def build_update_directives(
    app_id: AppId, install_dir: Union[str, PurePath]
) -> List[Directive]:
    """
    Directives that install or update an app into install_dir.

    Raises:
        InvalidInstallDirError: If install_dir is not absolute
    """
    if not PurePath(install_dir).is_absolute():
        raise InvalidInstallDirError(install_dir)

    update = directive("app_update", app_id)
    directives = [
        SHUTDOWN_ON_FAILED_COMMAND_OFF,
        LOGIN_ANONYMOUS,
        directive("force_install_dir", install_dir),
        update,
    ]
    if _needs_double_update(app_id):
        directives.append(update)
    return directives


def update_app(
    app_id: AppId,
    install_dir: Union[str, Path],
    config: Optional[SteamCmdConfig] = None,
) -> bool:
    """
    Install or update an app.

    Args:
        app_id: Steam application ID
        install_dir: Absolute directory to install the app into
        config: steamcmdkit configuration (defaults if None)

    Returns:
        True if the app was installed or updated, False if it was already
        up to date

    Raises:
        InvalidInstallDirError: If install_dir is not absolute (no process is
            started)
        SteamCmdUpdateError: If SteamCMD reported neither success message
        SteamCmdProcessError: If SteamCMD fails
    """
    directives = build_update_directives(app_id, install_dir)
    config = config or SteamCmdConfig()

    logger.info(f"Updating app {app_id} in {install_dir}")
    result = run(directives, config)
    verdict = classify_update_result(result.stdout, app_id)

    if verdict.outcome is UpdateOutcome.FAILED:
        raise SteamCmdUpdateError(app_id, verdict.message, result)

    if verdict.changed:
        logger.info(f"App {app_id} fully installed")
    else:
        logger.info(f"App {app_id} already up to date")
    return verdict.changed


__all__ = [
    "touch",
    "wait_until_ready",
    "prep",
    "build_app_info_warmup_directives",
    "build_app_info_directives",
    "get_app_info",
    "build_update_directives",
    "update_app",
]
