"""
Unit tests for filesystem utilities.
"""

import io
import os
import stat
import sys
import tarfile
import zipfile
from pathlib import Path

import pytest

from leakskit.core.filesystem import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
    extract_tar,
    extract_zip,
    find_executable,
    make_executable,
    move_file,
    prepend_to_path,
    safe_rmtree,
    temporary_directory,
)


def _write_tar(path: Path, members: dict) -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    return path


def _write_tar_with_link(path: Path, link: str, target: str, hard=False) -> Path:
    """Write a tarball holding a link followed by a file written through it."""
    with tarfile.open(path, "w:gz") as tar:
        info = tarfile.TarInfo(link)
        info.type = tarfile.LNKTYPE if hard else tarfile.SYMTYPE
        info.linkname = target
        tar.addfile(info)

        payload = tarfile.TarInfo(f"{link}/evil")
        payload.size = 1
        tar.addfile(payload, io.BytesIO(b"x"))
    return path


def _write_zip(path: Path, members: dict) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return path


class TestExtraction:
    """Test archive extraction."""

    def test_extract_tar(self, tmp_path):
        archive = _write_tar(tmp_path / "a.tar.gz", {"gitleaks": b"bin"})
        extract_tar(archive, tmp_path / "out")
        assert (tmp_path / "out" / "gitleaks").read_bytes() == b"bin"

    def test_extract_zip(self, tmp_path):
        archive = _write_zip(tmp_path / "a.zip", {"gitleaks.exe": b"bin"})
        extract_zip(archive, tmp_path / "out")
        assert (tmp_path / "out" / "gitleaks.exe").read_bytes() == b"bin"

    def test_tar_traversal_rejected(self, tmp_path):
        """Test that ../ members are refused before anything is written."""
        archive = _write_tar(tmp_path / "evil.tar.gz", {"../evil": b"x"})

        with pytest.raises(InsecureArchiveError):
            extract_tar(archive, tmp_path / "out")

        assert not (tmp_path / "evil").exists()

    def test_tar_symlink_outside_destination_rejected(self, tmp_path):
        """A symlink out of the destination must not be written through."""
        outside = tmp_path / "outside"
        outside.mkdir()
        archive = _write_tar_with_link(tmp_path / "evil.tar.gz", "d", str(outside))

        with pytest.raises(InsecureArchiveError):
            extract_tar(archive, tmp_path / "out")

        assert not (outside / "evil").exists()
        assert not (tmp_path / "out" / "d").exists()

    def test_tar_relative_symlink_escape_rejected(self, tmp_path):
        archive = _write_tar_with_link(
            tmp_path / "evil.tar.gz", "sub/d", "../../outside"
        )

        with pytest.raises(InsecureArchiveError, match="points outside"):
            extract_tar(archive, tmp_path / "out")

    def test_tar_hardlink_outside_destination_rejected(self, tmp_path):
        archive = _write_tar_with_link(
            tmp_path / "evil.tar.gz", "h", "../secret", hard=True
        )

        with pytest.raises(InsecureArchiveError, match="points outside"):
            extract_tar(archive, tmp_path / "out")

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_tar_internal_symlink_allowed(self, tmp_path):
        archive = tmp_path / "ok.tar.gz"
        with tarfile.open(archive, "w:gz") as tar:
            binary = tarfile.TarInfo("gitleaks")
            binary.size = 3
            tar.addfile(binary, io.BytesIO(b"bin"))
            link = tarfile.TarInfo("bin/gitleaks")
            link.type = tarfile.SYMTYPE
            link.linkname = "../gitleaks"
            tar.addfile(link)

        extract_tar(archive, tmp_path / "out")

        assert (tmp_path / "out" / "bin" / "gitleaks").read_bytes() == b"bin"

    def test_zip_traversal_rejected(self, tmp_path):
        archive = _write_zip(tmp_path / "evil.zip", {"../../evil": b"x"})

        with pytest.raises(InsecureArchiveError):
            extract_zip(archive, tmp_path / "out")

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "broken.tar.gz"
        archive.write_bytes(b"not a tarball")

        with pytest.raises(ArchiveExtractionError):
            extract_tar(archive, tmp_path / "out")

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError, match="not found"):
            extract_zip(tmp_path / "missing.zip", tmp_path / "out")

    def test_progress_callback(self, tmp_path):
        archive = _write_zip(tmp_path / "a.zip", {"a": b"1", "b": b"2"})
        calls = []

        extract_zip(archive, tmp_path / "out", lambda cur, total: calls.append(cur))

        assert calls == [1, 2]


class TestFileOperations:
    """Test move/chmod/delete helpers."""

    def test_move_file_creates_parent(self, tmp_path):
        source = tmp_path / "gitleaks-linux-amd64"
        source.write_bytes(b"bin")

        moved = move_file(source, tmp_path / "install" / "gitleaks")

        assert moved.read_bytes() == b"bin"
        assert not source.exists()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_make_executable(self, tmp_path):
        target = tmp_path / "gitleaks"
        target.write_bytes(b"bin")
        target.chmod(0o644)

        make_executable(target)

        mode = target.stat().st_mode
        assert mode & stat.S_IXUSR
        assert mode & stat.S_IXGRP
        assert mode & stat.S_IXOTH

    def test_make_executable_missing(self, tmp_path):
        with pytest.raises(FilesystemError) as exc_info:
            make_executable(tmp_path / "missing")

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_move_file_missing_source_chains_cause(self, tmp_path):
        with pytest.raises(FilesystemError, match="Failed to move") as exc_info:
            move_file(tmp_path / "missing", tmp_path / "target")

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_safe_rmtree(self, tmp_path):
        target = tmp_path / "dir"
        (target / "sub").mkdir(parents=True)
        (target / "sub" / "file").write_text("x")

        safe_rmtree(target, require_prefix=tmp_path)

        assert not target.exists()

    def test_safe_rmtree_outside_prefix(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()

        with pytest.raises(ValueError, match="Refusing to delete"):
            safe_rmtree(tmp_path / "b", require_prefix=tmp_path / "a")

    def test_safe_rmtree_missing_is_noop(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_temporary_directory_cleanup(self):
        with temporary_directory(prefix="leakskit_test_") as tmp:
            (tmp / "file").write_text("x")
            assert tmp.name.startswith("leakskit_test_")

        assert not tmp.exists()


class TestPathHelpers:
    """Test executable lookup and PATH mutation."""

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_find_executable_in_search_paths(self, tmp_path):
        binary = tmp_path / "gitleaks"
        binary.write_text("#!/bin/sh\n")
        binary.chmod(0o755)

        assert find_executable("gitleaks", [tmp_path]) == binary.absolute()

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_find_executable_ignores_non_executable(self, tmp_path):
        (tmp_path / "gitleaks").write_text("data")
        (tmp_path / "gitleaks").chmod(0o644)

        assert find_executable("gitleaks", [tmp_path]) is None

    def test_prepend_to_path(self, tmp_path):
        prepend_to_path(tmp_path)
        assert os.environ["PATH"].split(os.pathsep)[0] == str(tmp_path)

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_prepended_dir_wins_lookup(self, tmp_path):
        binary = tmp_path / "gitleaks"
        binary.write_text("#!/bin/sh\n")
        binary.chmod(0o755)

        prepend_to_path(tmp_path)

        assert find_executable("gitleaks") == binary.absolute()
