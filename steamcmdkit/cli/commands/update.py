"""
Update command implementation.

Installs or updates a Steam app.
"""

from steamcmdkit.cli.utils import config_from_args, print_error
from steamcmdkit.core.exceptions import InvalidInstallDirError
from steamcmdkit.steamcmd.client import update_app


def run(args) -> int:
    """
    Run the update command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 2 for an invalid install directory)
    """
    try:
        updated = update_app(args.app_id, args.install_dir, config_from_args(args))
    except InvalidInstallDirError as e:
        print_error(str(e), "Pass an absolute path as INSTALL_DIR")
        return 2

    if updated:
        print(f"App {args.app_id} was installed or updated in {args.install_dir}")
    else:
        print(f"App {args.app_id} is already up to date in {args.install_dir}")
    return 0
