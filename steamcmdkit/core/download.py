"""
HTTP download of the SteamCMD installer archive.

The archive is streamed to a ``.part`` file next to the destination and
renamed into place once complete, so a destination path never holds a
truncated archive. Retrying failed requests with exponential backoff is
opt-in, and progress can be reported to a callback while the body streams.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from steamcmdkit.core.exceptions import SteamCmdKitError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
PROGRESS_INTERVAL = 0.5
MIB = 1024 * 1024


@dataclass
class DownloadProgress:
    """Snapshot of an in-flight download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float
    eta_seconds: float

    def __str__(self) -> str:
        return format_progress(self)


ProgressCallback = Callable[[DownloadProgress], None]


class DownloadError(SteamCmdKitError):
    """Raised when the archive could not be fetched."""

    pass


class _ProgressReporter:
    """Throttles progress callbacks to one per PROGRESS_INTERVAL."""

    def __init__(self, callback: Optional[ProgressCallback], total_bytes: int):
        self.callback = callback
        self.total_bytes = total_bytes
        self.received = 0
        self.started = time.time()
        self.last_report = self.started

    def advance(self, count: int) -> None:
        self.received += count
        if self.callback is None:
            return

        now = time.time()
        finished = self.total_bytes > 0 and self.received >= self.total_bytes
        if finished or now - self.last_report >= PROGRESS_INTERVAL:
            self.callback(self._snapshot(now))
            self.last_report = now

    def _snapshot(self, now: float) -> DownloadProgress:
        elapsed = now - self.started
        speed = self.received / elapsed if elapsed > 0 else 0.0

        if self.total_bytes > 0:
            remaining = max(self.total_bytes - self.received, 0)
            return DownloadProgress(
                bytes_downloaded=self.received,
                total_bytes=self.total_bytes,
                percentage=self.received * 100 / self.total_bytes,
                speed_bps=speed,
                eta_seconds=remaining / speed if speed > 0 else 0.0,
            )

        # Server sent no Content-Length
        return DownloadProgress(self.received, self.received, 0.0, speed, 0.0)


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[ProgressCallback] = None,
    timeout: int = 30,
    max_retries: int = 1,
) -> Path:
    """
    Fetch url into destination.

    A failed request is surfaced as-is unless max_retries allows more
    attempts.

    Args:
        url: HTTPS URL of the archive
        destination: File to write (parent directories are created)
        progress_callback: Called with DownloadProgress while streaming
        timeout: Per-request connect/read timeout in seconds
        max_retries: Total number of attempts (1 means no retry)

    Returns:
        destination

    Raises:
        DownloadError: If every attempt failed
        ValueError: If url is empty or max_retries is below 1

    Example:
        >>> download_file(
        ...     "https://steamcdn-a.akamaihd.net/client/installer/steamcmd_linux.tar.gz",
        ...     Path("/tmp/steamcmd_linux.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("A download URL is required")
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    partial = destination.with_name(destination.name + ".part")

    attempt = 1
    while True:
        try:
            _stream_to_file(url, partial, progress_callback, timeout)
            break
        except RequestException as e:
            if attempt >= max_retries:
                partial.unlink(missing_ok=True)
                logger.error(f"Giving up on {url}: {e}")
                raise DownloadError(
                    f"Could not download {url} ({attempt} attempts): {e}"
                ) from e

            delay = 2 ** (attempt - 1)
            logger.warning(
                f"Attempt {attempt}/{max_retries} for {url} failed: {e}; "
                f"next try in {delay}s"
            )
            time.sleep(delay)
            attempt += 1

    partial.replace(destination)
    logger.info(f"Saved {destination.name} ({destination.stat().st_size} bytes)")
    return destination


def _stream_to_file(
    url: str,
    target: Path,
    progress_callback: Optional[ProgressCallback],
    timeout: int,
) -> None:
    logger.info(f"Fetching {url}")

    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        size = response.headers.get("content-length")
        reporter = _ProgressReporter(progress_callback, int(size) if size else 0)

        with open(target, "wb") as out:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    out.write(chunk)
                    reporter.advance(len(chunk))


def format_progress(progress: DownloadProgress) -> str:
    """
    Render progress as a single status line.

    Example:
        >>> format_progress(DownloadProgress(1048576, 2097152, 50.0, 1048576, 1))
        '1.0/2.0 MB (50.0%) at 1.0 MB/s ETA: 1s'
    """
    done = progress.bytes_downloaded / MIB
    rate = f"at {progress.speed_bps / MIB:.1f} MB/s"

    if progress.percentage <= 0:
        return f"{done:.1f} MB {rate}"

    total = progress.total_bytes / MIB
    return (
        f"{done:.1f}/{total:.1f} MB ({progress.percentage:.1f}%) {rate} "
        f"ETA: {progress.eta_seconds:.0f}s"
    )


__all__ = ["DownloadProgress", "DownloadError", "download_file", "format_progress"]
