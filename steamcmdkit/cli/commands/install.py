"""
Install command implementation.

Downloads SteamCMD into the bin directory.
"""

import logging

from steamcmdkit.cli.utils import config_from_args
from steamcmdkit.core.download import DownloadProgress
from steamcmdkit.steamcmd.installer import SteamCmdInstaller

logger = logging.getLogger(__name__)


def _log_progress(progress: DownloadProgress) -> None:
    logger.info(f"  {progress}")


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = config_from_args(args)
    installer = SteamCmdInstaller(config, progress_callback=_log_progress)

    if args.force:
        bin_dir = installer.download(force=True)
    else:
        bin_dir = installer.ensure_present()

    print(f"SteamCMD is installed at {bin_dir}")
    return 0
