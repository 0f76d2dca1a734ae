"""
File system utilities for leakskit.

This module provides the filesystem primitives the installer relies on:
- Archive extraction (tar.gz, zip) with directory traversal protection
- Safe file operations (move, chmod, safe deletion)
- Executable lookup on PATH and PATH mutation
"""

import os
import shutil
import stat
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Optional, Union

from leakskit.core.exceptions import InstallError

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(InstallError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def find_executable(
    name: str, search_paths: Optional[list[Path]] = None
) -> Optional[Path]:
    """
    Find an executable in the system PATH or provided search paths.

    Args:
        name: Executable name (e.g., 'gitleaks')
        search_paths: Optional list of directories to search

    Returns:
        Absolute path to executable if found, None otherwise

    Example:
        >>> find_executable('gitleaks')
        PosixPath('/tmp/gitleaks-8.18.0/gitleaks')
    """
    extensions = [""] if not IS_WINDOWS else ["", ".exe", ".bat", ".cmd"]

    if search_paths is None:
        path_env = os.environ.get("PATH", "")
        search_paths = [Path(p) for p in path_env.split(os.pathsep) if p]

    for directory in search_paths:
        for ext in extensions:
            exe_path = directory / f"{name}{ext}"
            if exe_path.is_file() and os.access(exe_path, os.X_OK):
                return exe_path.absolute()

    return None


def prepend_to_path(directory: Union[str, Path]) -> None:
    """
    Put a directory first on this process's PATH.

    Child processes started afterwards inherit the updated PATH.
    """
    current = os.environ.get("PATH", "")
    entry = str(directory)
    os.environ["PATH"] = f"{entry}{os.pathsep}{current}" if current else entry


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _validate_tar_member(member: tarfile.TarInfo, destination: Path) -> None:
    """
    Validate a tar member name and, for links, the link target.

    A link pointing outside the destination would let later members
    write through it.

    Raises:
        InsecureArchiveError: If the member or its link target escapes
    """
    _validate_archive_path(member.name, destination)

    if member.issym():
        target = Path(member.name).parent / member.linkname
    elif member.islnk():
        target = Path(member.linkname)
    else:
        return

    if not (destination / target).resolve().is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive link '{member.name}' -> '{member.linkname}' points outside "
            "the destination. Extraction has been blocked."
        )


def extract_zip(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> None:
    """Extract a ZIP archive."""
    archive_path, destination = _prepare_extraction(archive_path, destination)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.namelist()
            total = len(members)

            for member in members:
                _validate_archive_path(member, destination)

            for i, member in enumerate(members):
                zf.extract(member, destination)
                if progress_callback:
                    progress_callback(i + 1, total)
    except InsecureArchiveError:
        raise
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def extract_tar(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> None:
    """Extract a gzipped tar archive."""
    archive_path, destination = _prepare_extraction(archive_path, destination)

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            members = tar.getmembers()
            total = len(members)

            for member in members:
                _validate_tar_member(member, destination)

            if hasattr(tarfile, "data_filter"):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)

            if progress_callback:
                progress_callback(total, total)
    except InsecureArchiveError:
        raise
    except (OSError, tarfile.TarError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _prepare_extraction(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> tuple[Path, Path]:
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)
    return archive_path, destination


# ============================================================================
# Safe File Operations
# ============================================================================


def move_file(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Move a file, creating the destination's parent directory if needed.

    Raises:
        FilesystemError: If the move fails
    """
    source = Path(source)
    destination = Path(destination)

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))
    except OSError as e:
        raise FilesystemError(
            f"Failed to move '{source}' to '{destination}': {e}"
        ) from e

    return destination


def make_executable(path: Union[str, Path]) -> None:
    """
    Grant execute permission to owner, group and others.

    Raises:
        FilesystemError: If permissions cannot be changed
    """
    path = Path(path)

    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise FilesystemError(f"Failed to make '{path}' executable: {e}") from e


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/tmp/gitleaks-8.18.0', require_prefix='/tmp')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


# ============================================================================
# Temporary File/Directory Management
# ============================================================================


@contextmanager
def temporary_directory(prefix: str = "leakskit_", cleanup: bool = True):
    """
    Context manager for temporary directory with automatic cleanup.

    Yields:
        Path to temporary directory

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if cleanup and temp_dir.exists():
            safe_rmtree(temp_dir)


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "find_executable",
    "prepend_to_path",
    "extract_zip",
    "extract_tar",
    "move_file",
    "make_executable",
    "safe_rmtree",
    "temporary_directory",
]
