"""
Archive and directory helpers used by the SteamCMD installer.

Valve ships SteamCMD as a zip on Windows and a gzipped tarball elsewhere.
Every member name is checked against the extraction root before anything is
written, and tarballs additionally use the ``data`` extraction filter where
the interpreter provides it.
"""

import os
import shutil
import stat
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Union

from steamcmdkit.core.exceptions import SteamCmdKitError

IS_WINDOWS = os.name == "nt"

PathLike = Union[str, Path]


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(SteamCmdKitError):
    """A filesystem operation on the bin directory failed."""

    pass


class ArchiveExtractionError(FilesystemError):
    """The SteamCMD archive could not be unpacked."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """The archive is neither a zip nor a gzipped tarball."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """An archive member would land outside the extraction root."""

    pass


# ============================================================================
# Paths and permissions
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """Return True if path lies inside parent (or is parent itself)."""
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def make_executable(path: PathLike) -> None:
    """
    Set the execute bits on a file.

    The tarballs do not always carry the mode bits for ``steamcmd.sh``.
    No-op on Windows.
    """
    if IS_WINDOWS:
        return

    path = Path(path)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


# ============================================================================
# Archive extraction
# ============================================================================


def _check_members(names: Iterable[str], root: Path) -> None:
    root = root.resolve()
    for name in names:
        if not is_relative_to((root / name).resolve(), root):
            raise InsecureArchiveError(
                f"Refusing to extract {name!r}: it resolves outside {root}"
            )


def _unpack_zip(archive_path: Path, root: Path) -> None:
    with zipfile.ZipFile(archive_path) as zf:
        _check_members(zf.namelist(), root)
        zf.extractall(root)


def _unpack_tar_gz(archive_path: Path, root: Path) -> None:
    with tarfile.open(archive_path, "r:gz") as tar:
        _check_members((member.name for member in tar.getmembers()), root)
        if sys.version_info >= (3, 12):
            tar.extractall(root, filter="data")
        else:
            tar.extractall(root)


_UNPACKERS: Dict[str, Callable[[Path, Path], None]] = {
    "zip": _unpack_zip,
    "tar.gz": _unpack_tar_gz,
}


def _kind_from_name(archive_path: Path) -> str:
    name = archive_path.name.lower()
    if name.endswith(".zip"):
        return "zip"
    if name.endswith((".tar.gz", ".tgz")):
        return "tar.gz"
    raise UnsupportedArchiveFormat(
        f"Cannot tell the archive format of {archive_path.name} "
        f"(expected one of: {', '.join(_UNPACKERS)})"
    )


def extract_archive(
    archive_path: PathLike,
    destination: PathLike,
    archive_kind: Optional[str] = None,
) -> None:
    """
    Unpack a SteamCMD archive into destination.

    Args:
        archive_path: Downloaded archive
        destination: Extraction root, created if missing
        archive_kind: 'zip' or 'tar.gz'; guessed from the file name if None

    Raises:
        UnsupportedArchiveFormat: If the kind is unknown
        InsecureArchiveError: If a member escapes destination
        ArchiveExtractionError: If the archive is missing or corrupt

    Example:
        >>> extract_archive("steamcmd_linux.tar.gz", "/opt/steamcmd", "tar.gz")
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.is_file():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    kind = archive_kind or _kind_from_name(archive_path)
    unpack = _UNPACKERS.get(kind)
    if unpack is None:
        raise UnsupportedArchiveFormat(
            f"Unknown archive kind {kind!r} (expected one of: {', '.join(_UNPACKERS)})"
        )

    destination.mkdir(parents=True, exist_ok=True)
    try:
        unpack(archive_path, destination)
    except ArchiveExtractionError:
        raise
    except (OSError, zipfile.BadZipFile, tarfile.TarError, EOFError) as e:
        raise ArchiveExtractionError(
            f"Could not unpack {archive_path.name}: {e}"
        ) from e


# ============================================================================
# Directory removal
# ============================================================================


def _clear_readonly_and_retry(func, path, _exc_info) -> None:
    # Windows refuses to delete read-only files
    os.chmod(path, stat.S_IWRITE)
    func(path)


def safe_rmtree(path: PathLike, require_prefix: Optional[PathLike] = None) -> None:
    """
    Delete a directory tree.

    Args:
        path: Directory to delete; a missing directory is not an error
        require_prefix: Refuse to delete anything outside this directory

    Raises:
        ValueError: If path is outside require_prefix
        FilesystemError: If path is not a directory or deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, prefix):
            raise ValueError(f"Refusing to delete {path}: outside {prefix}")

    if not path.exists():
        return
    if not path.is_dir():
        raise FilesystemError(f"Cannot remove {path}: not a directory")

    try:
        if not IS_WINDOWS:
            shutil.rmtree(path)
        elif sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=_clear_readonly_and_retry)
        else:
            shutil.rmtree(path, onerror=_clear_readonly_and_retry)
    except OSError as e:
        raise FilesystemError(f"Could not remove {path}: {e}") from e


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "is_relative_to",
    "make_executable",
    "extract_archive",
    "safe_rmtree",
]
