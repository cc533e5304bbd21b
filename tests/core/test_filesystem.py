"""
Unit tests for filesystem utilities.

Tests archive extraction, traversal protection and safe removal.
"""

import io
import os
import stat
import tarfile
import zipfile

import pytest

from steamcmdkit.core.filesystem import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
    extract_archive,
    is_relative_to,
    make_executable,
    safe_rmtree,
)


def _write_tar(path, members):
    with tarfile.open(path, "w:gz") as tar:
        for name, data in members:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))


class TestExtractArchive:
    """Test extract_archive function."""

    def test_extract_zip(self, tmp_path, steamcmd_zip):
        archive = tmp_path / "steamcmd.zip"
        archive.write_bytes(steamcmd_zip)

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "steamcmd.exe").read_bytes() == b"MZ"

    def test_extract_tar_gz(self, tmp_path, steamcmd_tar_gz):
        archive = tmp_path / "steamcmd_linux.tar.gz"
        archive.write_bytes(steamcmd_tar_gz)

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "steamcmd.sh").exists()
        assert (tmp_path / "out" / "linux32" / "steamcmd").exists()

    def test_explicit_kind_overrides_name(self, tmp_path, steamcmd_tar_gz):
        """Test archive_kind is used instead of the file name."""
        archive = tmp_path / "download.bin"
        archive.write_bytes(steamcmd_tar_gz)

        extract_archive(archive, tmp_path / "out", archive_kind="tar.gz")

        assert (tmp_path / "out" / "steamcmd.sh").exists()

    def test_unknown_extension(self, tmp_path):
        archive = tmp_path / "steamcmd.rar"
        archive.write_bytes(b"Rar!")

        with pytest.raises(UnsupportedArchiveFormat):
            extract_archive(archive, tmp_path / "out")

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="not found"):
            extract_archive(tmp_path / "missing.zip", tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "steamcmd.zip"
        archive.write_bytes(b"not a zip file")

        with pytest.raises(ArchiveExtractionError):
            extract_archive(archive, tmp_path / "out")

    def test_zip_traversal_blocked(self, tmp_path):
        """Test zip members escaping the destination are rejected."""
        archive = tmp_path / "evil.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("../evil.txt", b"pwned")

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")

        assert not (tmp_path / "evil.txt").exists()

    def test_tar_traversal_blocked(self, tmp_path):
        """Test tar members escaping the destination are rejected."""
        archive = tmp_path / "evil.tar.gz"
        _write_tar(archive, [("../../evil.txt", b"pwned")])

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")


class TestPathHelpers:
    """Test path helper functions."""

    def test_is_relative_to(self, tmp_path):
        assert is_relative_to(tmp_path / "a" / "b", tmp_path) is True
        assert is_relative_to(tmp_path.parent, tmp_path) is False

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions only")
    def test_make_executable(self, tmp_path):
        script = tmp_path / "steamcmd.sh"
        script.write_text("#!/bin/sh\n")
        script.chmod(0o644)

        make_executable(script)

        assert script.stat().st_mode & stat.S_IXUSR


class TestSafeRmtree:
    """Test safe_rmtree function."""

    def test_removes_directory(self, tmp_path):
        target = tmp_path / "steamcmd_bin"
        (target / "public").mkdir(parents=True)
        (target / "steamcmd.sh").write_text("")

        safe_rmtree(target, require_prefix=tmp_path)

        assert not target.exists()

    def test_missing_directory_is_ignored(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_outside_prefix_refused(self, tmp_path):
        target = tmp_path / "a"
        target.mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(target, require_prefix=tmp_path / "b")

        assert target.exists()

    def test_file_is_refused(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("")

        with pytest.raises(FilesystemError, match="not a directory"):
            safe_rmtree(target)
