"""
Touch command implementation.

Starts SteamCMD once so it completes its self-update.
"""

import logging

from steamcmdkit.cli.utils import config_from_args
from steamcmdkit.steamcmd.client import touch

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the touch command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    result = touch(config_from_args(args))
    logger.debug(result.stdout)
    return 0
