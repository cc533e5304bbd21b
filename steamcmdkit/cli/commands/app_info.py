"""
App info command implementation.

Prints the metadata SteamCMD holds for an app.
"""

from steamcmdkit.cli.utils import config_from_args, format_data
from steamcmdkit.steamcmd.client import get_app_info


def run(args) -> int:
    """
    Run the app-info command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    info = get_app_info(args.app_id, config_from_args(args))
    print(format_data(info, args.format))
    return 0
