"""
SteamCMD process runner.

Directives are passed to SteamCMD on its command line, each introduced by a
``+`` marker, and the batch always ends with ``+quit``. A directive is an
ordered tuple of tokens; tokens are handed to the process verbatim so a path
containing spaces stays a single argument.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from steamcmdkit.config import SteamCmdConfig
from steamcmdkit.core.exceptions import (
    SteamCmdNotInstalledError,
    SteamCmdProcessError,
    SteamCmdTimeoutError,
)
from steamcmdkit.core.locking import bin_dir_lock
from steamcmdkit.core.platform import resolve_distribution

logger = logging.getLogger(__name__)

Directive = Tuple[str, ...]
DirectiveLike = Union[Directive, Sequence[str], str]

QUIT: Directive = ("quit",)

# SteamCMD exits with 7 after a clean +quit in several situations
SUCCESS_EXIT_CODES = frozenset({0, 7})


@dataclass
class ProcessResult:
    """Outcome of a single SteamCMD invocation."""

    args: List[str]
    returncode: int
    stdout: str
    stderr: str


def directive(*tokens) -> Directive:
    """
    Build a directive from tokens.

    Example:
        >>> directive("force_install_dir", "/srv/my server")
        ('force_install_dir', '/srv/my server')
    """
    if not tokens:
        raise ValueError("A directive needs at least a command token")
    return tuple(str(token) for token in tokens)


def _as_directive(item: DirectiveLike) -> Directive:
    if isinstance(item, str):
        # Convenience form, split on whitespace by the caller's choice
        tokens = item.split()
    else:
        tokens = [str(token) for token in item]

    if not tokens or not tokens[0]:
        raise ValueError(f"Empty directive: {item!r}")
    return tuple(tokens)


def build_arguments(directives: Iterable[DirectiveLike]) -> List[str]:
    """
    Build the SteamCMD argument list for a batch of directives.

    The ``quit`` directive is appended, and the first token of every
    directive gets the ``+`` marker.

    Example:
        >>> build_arguments([("login", "anonymous"), ("app_update", "90")])
        ['+login', 'anonymous', '+app_update', '90', '+quit']
    """
    args: List[str] = []
    for item in [*directives, QUIT]:
        command, *params = _as_directive(item)
        args.append(f"+{command}")
        args.extend(params)
    return args


def get_executable_path(
    config: SteamCmdConfig, os_name: Optional[str] = None
) -> Path:
    """Get the SteamCMD launcher path inside the bin directory."""
    return config.bin_dir / resolve_distribution(os_name).executable_name


def run(
    directives: Iterable[DirectiveLike],
    config: Optional[SteamCmdConfig] = None,
    os_name: Optional[str] = None,
) -> ProcessResult:
    """
    Run SteamCMD with a batch of directives.

    Args:
        directives: Directives to run, without the trailing quit
        config: steamcmdkit configuration (defaults if None)
        os_name: Platform override, mainly for tests

    Returns:
        ProcessResult with captured stdout and stderr

    Raises:
        UnsupportedPlatformError: If SteamCMD does not run on the platform
        SteamCmdNotInstalledError: If the launcher is missing
        SteamCmdTimeoutError: If config.run_timeout is exceeded
        SteamCmdProcessError: If SteamCMD exits with an unexpected code
    """
    config = config or SteamCmdConfig()
    executable = get_executable_path(config, os_name)
    args = build_arguments(directives)

    if not executable.exists():
        raise SteamCmdNotInstalledError(
            f"SteamCMD executable not found: {executable}. Run prep() first."
        )

    command = [str(executable), *args]
    logger.info(f"Running SteamCMD with {len(args)} arguments")
    logger.debug(f"Command: {command}")

    with bin_dir_lock(config.bin_dir, timeout=config.lock_timeout):
        try:
            completed = subprocess.run(
                command,
                cwd=config.bin_dir,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=config.run_timeout,
            )
        except subprocess.TimeoutExpired as e:
            result = ProcessResult(
                args=command,
                returncode=-1,
                stdout=_decode(e.stdout),
                stderr=_decode(e.stderr),
            )
            raise SteamCmdTimeoutError(
                f"SteamCMD timed out after {config.run_timeout}s", result
            ) from e

    result = ProcessResult(
        args=command,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    logger.debug(f"SteamCMD exited with code {result.returncode}")

    if result.returncode not in SUCCESS_EXIT_CODES:
        raise SteamCmdProcessError(
            f"SteamCMD exited with code {result.returncode}: "
            f"{result.stderr.strip() or result.stdout.strip()[-500:]}",
            result,
        )

    return result


def _decode(output) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


__all__ = [
    "Directive",
    "ProcessResult",
    "QUIT",
    "SUCCESS_EXIT_CODES",
    "directive",
    "build_arguments",
    "get_executable_path",
    "run",
]
