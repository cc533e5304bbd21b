"""
SteamCMD integration for steamcmdkit.

Available Components:
--------------------
- SteamCmdInstaller: Download SteamCMD into a bin directory
- run / directive: Run SteamCMD with a batch of directives
- parse_app_info / classify_update_result: Scrape SteamCMD output
- touch, prep, get_app_info, update_app: High-level operations
"""

from steamcmdkit.steamcmd.installer import SteamCmdInstaller, ensure_present, download
from steamcmdkit.steamcmd.runner import (
    Directive,
    ProcessResult,
    directive,
    build_arguments,
    run,
)
from steamcmdkit.steamcmd.parsers import (
    UpdateOutcome,
    UpdateResult,
    parse_app_info,
    classify_update_result,
)
from steamcmdkit.steamcmd.client import (
    touch,
    wait_until_ready,
    prep,
    get_app_info,
    build_update_directives,
    update_app,
)

__all__ = [
    "SteamCmdInstaller",
    "ensure_present",
    "download",
    "Directive",
    "ProcessResult",
    "directive",
    "build_arguments",
    "run",
    "UpdateOutcome",
    "UpdateResult",
    "parse_app_info",
    "classify_update_result",
    "touch",
    "wait_until_ready",
    "prep",
    "get_app_info",
    "build_update_directives",
    "update_app",
]
