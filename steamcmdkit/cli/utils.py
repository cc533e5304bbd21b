"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import json
import logging
import sys
from typing import Any, Optional

import yaml

from steamcmdkit.config import SteamCmdConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def config_from_args(args) -> SteamCmdConfig:
    """
    Build the configuration for a CLI invocation.

    Loads --config (required if given, else ./steamcmdkit.yaml if present)
    and applies --bin-dir on top.

    Args:
        args: Parsed arguments with config and bin_dir

    Returns:
        SteamCmdConfig for the command
    """
    config_file = getattr(args, "config", None)
    config = load_config(config_file, required=config_file is not None)

    bin_dir = getattr(args, "bin_dir", None)
    if bin_dir is not None:
        config = config.with_overrides(bin_dir=bin_dir.expanduser().resolve())

    logger.debug(f"Using SteamCMD bin directory: {config.bin_dir}")
    return config


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def format_data(data: Any, output_format: str = "json") -> str:
    """
    Render a mapping for display.

    Args:
        data: Data to render
        output_format: 'json' or 'yaml'

    Returns:
        Rendered text
    """
    if output_format == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
