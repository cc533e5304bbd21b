"""
Parsers for SteamCMD console output.

SteamCMD has no machine-readable output mode, so these functions locate
literal markers in captured stdout. Keeping every marker in this module means
a change in SteamCMD's phrasing only needs fixing here, and the parsers can be
tested against captured text without spawning SteamCMD.
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import vdf

from steamcmdkit.core.exceptions import AppInfoNotFoundError, AppInfoParseError

AppId = Union[int, str]

CONVARS_MARKER = "ConVars:"


def normalize_newlines(text: str) -> str:
    """Convert Windows line endings to ``\\n``."""
    return text.replace("\r\n", "\n")


# ============================================================================
# App Info
# ============================================================================


def extract_info_block(text: str, app_id: AppId) -> str:
    """
    Cut the KeyValues info block for an app out of SteamCMD output.

    The block starts at the first ``"<app_id>"`` token and ends before the
    ``ConVars:`` listing printed by the trailing ``find`` directive. Anything
    after the last closing brace is console noise and is dropped.

    Raises:
        AppInfoNotFoundError: If either marker is missing
    """
    text = normalize_newlines(text)
    start_marker = f'"{app_id}"'

    start = text.find(start_marker)
    if start == -1:
        raise AppInfoNotFoundError(app_id, start_marker)

    end = text.find(CONVARS_MARKER, start)
    if end == -1:
        raise AppInfoNotFoundError(app_id, CONVARS_MARKER)

    block = text[start:end]
    closing = block.rfind("}")
    if closing != -1:
        block = block[: closing + 1]
    return block


def parse_app_info(text: str, app_id: AppId) -> Dict[str, Any]:
    """
    Parse the app info printed by ``app_info_print``.

    Args:
        text: Captured SteamCMD stdout
        app_id: Steam application ID

    Returns:
        Nested mapping of the app's metadata (the value under the app ID key)

    Raises:
        AppInfoNotFoundError: If the info block is absent
        AppInfoParseError: If the info block is not valid KeyValues text

    Example:
        >>> info = parse_app_info(stdout, 730)
        >>> info["common"]["name"]
        'Counter-Strike: Global Offensive'
    """
    block = extract_info_block(text, app_id)

    try:
        parsed = vdf.loads(block)
    except (SyntaxError, ValueError) as e:
        raise AppInfoParseError(f"Could not parse app info for {app_id}: {e}") from e

    key = str(app_id)
    if key not in parsed:
        raise AppInfoParseError(f"App info block does not contain key {key!r}")
    return parsed[key]


# ============================================================================
# App Update
# ============================================================================


class UpdateOutcome(enum.Enum):
    """Verdict of an ``app_update`` run."""

    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class UpdateResult:
    """Classified ``app_update`` output."""

    outcome: UpdateOutcome
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is not UpdateOutcome.FAILED

    @property
    def changed(self) -> bool:
        return self.outcome is UpdateOutcome.UPDATED


def _error_line(lines: list) -> str:
    # SteamCMD prints its error just before the final line
    if len(lines) >= 2 and lines[-2].strip():
        return lines[-2].strip()

    for line in reversed(lines):
        if line.strip():
            return line.strip()
    return "no output"


def classify_update_result(text: str, app_id: AppId) -> UpdateResult:
    """
    Classify SteamCMD output from an ``app_update`` batch.

    Args:
        text: Captured SteamCMD stdout
        app_id: Steam application ID that was updated

    Returns:
        UPDATED if the app was installed or updated, UNCHANGED if it was
        already up to date, FAILED otherwise with SteamCMD's error line as
        the message.
    """
    text = normalize_newlines(text)

    if f"Success! App '{app_id}' fully installed" in text:
        return UpdateResult(UpdateOutcome.UPDATED)
    if f"Success! App '{app_id}' already up to date." in text:
        return UpdateResult(UpdateOutcome.UNCHANGED)

    return UpdateResult(UpdateOutcome.FAILED, _error_line(text.split("\n")))


__all__ = [
    "CONVARS_MARKER",
    "normalize_newlines",
    "extract_info_block",
    "parse_app_info",
    "UpdateOutcome",
    "UpdateResult",
    "classify_update_result",
]
