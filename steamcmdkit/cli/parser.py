"""
steamcmdkit CLI argument parser.

This module implements the command-line interface for steamcmdkit using argparse.
"""

import argparse
import importlib
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from steamcmdkit import __version__
from steamcmdkit.core.exceptions import SteamCmdKitError

logger = logging.getLogger(__name__)

COMMAND_MODULES = {
    "install": "steamcmdkit.cli.commands.install",
    "touch": "steamcmdkit.cli.commands.touch",
    "prep": "steamcmdkit.cli.commands.prep",
    "app-info": "steamcmdkit.cli.commands.app_info",
    "update": "steamcmdkit.cli.commands.update",
}


class CLI:
    """steamcmdkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="steamcmdkit",
            description="steamcmdkit - scripted SteamCMD installs and app metadata",
            epilog='Use "steamcmdkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"steamcmdkit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./steamcmdkit.yaml)",
        )
        parser.add_argument(
            "--bin-dir",
            type=Path,
            metavar="PATH",
            help="SteamCMD bin directory (overrides the configuration file)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_touch_command(subparsers)
        self._add_prep_command(subparsers)
        self._add_app_info_command(subparsers)
        self._add_update_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Download SteamCMD if it is not present",
            description="Download and extract SteamCMD into the bin directory",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Reinstall even if the bin directory exists",
        )

    def _add_touch_command(self, subparsers):
        """Add 'touch' subcommand."""
        subparsers.add_parser(
            "touch",
            help="Start SteamCMD once so it updates itself",
            description="Run SteamCMD with no directives besides quit",
        )

    def _add_prep_command(self, subparsers):
        """Add 'prep' subcommand."""
        subparsers.add_parser(
            "prep",
            help="Install SteamCMD if needed and complete its self-update",
            description="Install, wait until ready, then start SteamCMD once",
        )

    def _add_app_info_command(self, subparsers):
        """Add 'app-info' subcommand."""
        parser = subparsers.add_parser(
            "app-info",
            help="Print the metadata SteamCMD holds for an app",
            description="Fetch and print the app info block for a Steam app",
        )
        parser.add_argument("app_id", type=int, metavar="APP_ID", help="Steam app ID")
        parser.add_argument(
            "--format",
            choices=["json", "yaml"],
            default="json",
            help="Output format (default: json)",
        )

    def _add_update_command(self, subparsers):
        """Add 'update' subcommand."""
        parser = subparsers.add_parser(
            "update",
            help="Install or update an app",
            description="Install or update a Steam app into an absolute directory",
        )
        parser.add_argument("app_id", type=int, metavar="APP_ID", help="Steam app ID")
        parser.add_argument(
            "install_dir",
            type=Path,
            metavar="INSTALL_DIR",
            help="Absolute directory to install the app into",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """Parse args (sys.argv when None) into a namespace."""
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Parse args and run the selected command.

        Args:
            args: Command line without the program name (sys.argv when None)

        Returns:
            Process exit code: 0 on success, 1 on failure or missing command,
            130 when interrupted. Commands may return their own codes.
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Interrupted")
            return 130
        except SteamCmdKitError as e:
            logger.error(str(e))
            logger.debug("Details:", exc_info=True)
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            if parsed_args.verbose:
                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """Set the root log level and format from --verbose / --quiet."""
        if args.verbose:
            level, fmt = logging.DEBUG, "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level, fmt = logging.ERROR, "%(levelname)s: %(message)s"
        else:
            level, fmt = logging.INFO, "%(message)s"

        logging.basicConfig(level=level, format=fmt, force=True)

    def _dispatch_command(self, args) -> int:
        """Import the handler module for args.command and call its run()."""
        module_name = COMMAND_MODULES.get(args.command)
        if module_name is None:
            logger.error(f"No handler for command {args.command!r}")
            return 1

        return importlib.import_module(module_name).run(args)


def main(args: Optional[List[str]] = None):
    """Console script entry point."""
    sys.exit(CLI().run(args))


if __name__ == "__main__":
    main()
