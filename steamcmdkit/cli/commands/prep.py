"""
Prep command implementation.

Installs SteamCMD if needed and completes its self-update.
"""

from steamcmdkit.cli.utils import config_from_args
from steamcmdkit.steamcmd.client import prep


def run(args) -> int:
    """
    Run the prep command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = config_from_args(args)
    prep(config)
    print(f"SteamCMD is ready at {config.bin_dir}")
    return 0
