"""
Pytest configuration and shared fixtures for steamcmdkit tests.
"""

import pytest

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.steamcmd import (
    steamcmd_config,
    installed_steamcmd,
    read_output,
    steamcmd_tar_gz,
    steamcmd_zip,
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that download and run the real SteamCMD",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from steamcmdkit.core import platform

    platform.clear_platform_cache()
    yield
