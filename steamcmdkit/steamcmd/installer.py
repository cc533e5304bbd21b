"""
SteamCMD installer.

Downloads the SteamCMD archive published by Valve for the current platform and
extracts it into the configured bin directory.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Optional

from steamcmdkit.config import SteamCmdConfig
from steamcmdkit.core.download import DownloadError, DownloadProgress, download_file
from steamcmdkit.core.exceptions import SteamCmdInstallError
from steamcmdkit.core.filesystem import (
    FilesystemError,
    extract_archive,
    make_executable,
    safe_rmtree,
)
from steamcmdkit.core.locking import bin_dir_lock
from steamcmdkit.core.platform import (
    SteamCmdDistribution,
    detect_os,
    resolve_distribution,
)
from steamcmdkit.steamcmd.runner import get_executable_path

logger = logging.getLogger(__name__)


class SteamCmdInstaller:
    """
    Download and install SteamCMD.

    Any existing bin directory counts as an installation; its contents are
    not validated. Installation goes through a staging directory that is
    renamed into place, so a failed download never leaves a bin directory
    behind.
    """

    def __init__(
        self,
        config: Optional[SteamCmdConfig] = None,
        os_name: Optional[str] = None,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Initialize SteamCMD installer.

        Args:
            config: steamcmdkit configuration (defaults if None)
            os_name: Platform override (auto-detected if None)
            progress_callback: Optional callback for download progress
        """
        self.config = config or SteamCmdConfig()
        self.os_name = os_name or detect_os()
        self.progress_callback = progress_callback
        self.bin_dir = self.config.bin_dir

    @property
    def distribution(self) -> SteamCmdDistribution:
        """SteamCMD distributable for the platform."""
        return resolve_distribution(self.os_name)

    def is_installed(self) -> bool:
        """
        Check if SteamCMD is installed.

        Returns:
            True if the bin directory exists
        """
        return self.bin_dir.is_dir()

    def get_executable_path(self) -> Path:
        """
        Get path to the SteamCMD launcher.

        Raises:
            UnsupportedPlatformError: If SteamCMD does not run on the platform
        """
        return get_executable_path(self.config, self.os_name)

    def ensure_present(self) -> Path:
        """
        Install SteamCMD unless the bin directory already exists.

        Returns:
            Path to the bin directory

        Raises:
            UnsupportedPlatformError: If SteamCMD does not run on the platform
            SteamCmdInstallError: If download or extraction fails
        """
        if self.is_installed():
            logger.debug(f"SteamCMD already present at {self.bin_dir}")
            return self.bin_dir

        return self.download()

    def download(self, force: bool = False) -> Path:
        """
        Download and extract SteamCMD into the bin directory.

        Args:
            force: Reinstall even if the bin directory exists

        Returns:
            Path to the bin directory

        Raises:
            UnsupportedPlatformError: If SteamCMD does not run on the platform
            SteamCmdInstallError: If download or extraction fails
        """
        distribution = self.distribution

        with bin_dir_lock(self.bin_dir, timeout=self.config.lock_timeout):
            # Another process may have installed while we waited for the lock
            if self.is_installed() and not force:
                logger.info(f"SteamCMD already installed at {self.bin_dir}")
                return self.bin_dir

            logger.info(f"Installing SteamCMD to {self.bin_dir}")
            self.bin_dir.parent.mkdir(parents=True, exist_ok=True)

            try:
                with tempfile.TemporaryDirectory(
                    prefix=f".{self.bin_dir.name}-", dir=self.bin_dir.parent
                ) as tmp:
                    tmp_path = Path(tmp)
                    archive_path = tmp_path / distribution.archive_name
                    staging_dir = tmp_path / "staging"

                    download_file(
                        distribution.url,
                        archive_path,
                        progress_callback=self.progress_callback,
                        timeout=self.config.download_timeout,
                        max_retries=self.config.download_retries,
                    )

                    logger.info(f"Extracting {archive_path.name}...")
                    extract_archive(
                        archive_path, staging_dir, distribution.archive_kind
                    )

                    launcher = staging_dir / distribution.executable_name
                    if not launcher.exists():
                        raise SteamCmdInstallError(
                            f"Archive did not contain {distribution.executable_name}"
                        )
                    make_executable(launcher)

                    if force and self.bin_dir.exists():
                        safe_rmtree(self.bin_dir, require_prefix=self.bin_dir.parent)

                    shutil.move(str(staging_dir), str(self.bin_dir))

            except SteamCmdInstallError:
                raise
            except (DownloadError, FilesystemError, OSError) as e:
                logger.error(f"Failed to install SteamCMD: {e}")
                raise SteamCmdInstallError(f"SteamCMD installation failed: {e}") from e

        logger.info(f"SteamCMD installed at {self.bin_dir}")
        return self.bin_dir


def ensure_present(config: Optional[SteamCmdConfig] = None) -> Path:
    """Install SteamCMD into config.bin_dir unless it already exists."""
    return SteamCmdInstaller(config).ensure_present()


def download(config: Optional[SteamCmdConfig] = None, force: bool = False) -> Path:
    """Download SteamCMD into config.bin_dir (reinstalling if force is set)."""
    return SteamCmdInstaller(config).download(force=force)


__all__ = ["SteamCmdInstaller", "ensure_present", "download"]
