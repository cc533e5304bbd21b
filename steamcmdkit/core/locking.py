"""
Concurrent access control for a SteamCMD bin directory.

SteamCMD takes locks on its own cache files, so two processes driving the
same installation at once fail in confusing ways. This module provides a
file-based lock, held while installing and while running SteamCMD, so
concurrent steamcmdkit processes queue up instead.

Usage:
    from steamcmdkit.core.locking import bin_dir_lock

    with bin_dir_lock(config.bin_dir, timeout=60):
        # Safely run SteamCMD
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from filelock import FileLock, Timeout as LockTimeout

logger = logging.getLogger(__name__)


def get_lock_path(bin_dir: Union[str, Path]) -> Path:
    """
    Get the lock file path for a bin directory.

    The lock lives next to the bin directory so it never counts as an
    installation and is not wiped by a forced reinstall.

    Args:
        bin_dir: SteamCMD bin directory

    Returns:
        Path to the lock file
    """
    bin_dir = Path(bin_dir)
    return bin_dir.parent / f".{bin_dir.name}.lock"


@contextmanager
def bin_dir_lock(bin_dir: Union[str, Path], timeout: float = -1):
    """
    Acquire the lock for a SteamCMD bin directory.

    Args:
        bin_dir: SteamCMD bin directory
        timeout: Maximum wait time in seconds (-1 waits forever)

    Yields:
        None

    Raises:
        LockTimeout: If lock can't be acquired within timeout
    """
    lock_path = get_lock_path(bin_dir)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired bin dir lock: {lock_path}")
            yield
            logger.debug(f"Released bin dir lock: {lock_path}")
    except LockTimeout as e:
        logger.error(
            f"Could not acquire lock on {bin_dir} after {timeout}s. "
            "Another steamcmdkit process may be running SteamCMD."
        )
        raise LockTimeout(lock_path) from e


def is_locked(bin_dir: Union[str, Path]) -> bool:
    """
    Check whether another process currently holds the bin directory lock.

    Args:
        bin_dir: SteamCMD bin directory

    Returns:
        True if the lock could not be acquired immediately
    """
    lock_path = get_lock_path(bin_dir)
    if not lock_path.parent.exists():
        return False

    lock = FileLock(lock_path, timeout=0)
    try:
        with lock:
            return False
    except LockTimeout:
        return True


__all__ = ["bin_dir_lock", "get_lock_path", "is_locked", "LockTimeout"]
