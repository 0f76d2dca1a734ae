"""
gitleaks installation.

This module orchestrates getting a gitleaks binary onto PATH:
1. Compute cache key and install directory
2. Restore from the install cache
3. On a miss, locate and download the release artifact
4. Extract the archive, or place the bare executable
5. Store the install directory in the cache (best effort)
6. Prepend the install directory to PATH
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from leakskit.caching.install_cache import CacheStatus, InstallCache, cache_key
from leakskit.ci.workflow import WorkflowContext
from leakskit.core.directory import install_dir_for
from leakskit.core.download import DownloadProgress, download_file
from leakskit.core.exceptions import InstallError, UnsupportedArchiveError
from leakskit.core.filesystem import (
    extract_tar,
    extract_zip,
    make_executable,
    move_file,
    prepend_to_path,
    safe_rmtree,
    temporary_directory,
)
from leakskit.core.platform import PlatformKey
from leakskit.release.locator import DistDescriptor, DistKind, locate
from leakskit.release.version import ResolvedVersion

logger = logging.getLogger(__name__)

BINARY_NAME = "gitleaks"


@dataclass
class InstallResult:
    """Result of an install operation."""

    version: ResolvedVersion
    """Installed gitleaks version"""

    install_dir: Path
    """Directory holding the binary, now on PATH"""

    cache_key: str
    """Key the install directory is cached under"""

    was_cached: bool
    """Whether the install was restored from cache"""

    download_time: float = 0.0
    """Time spent downloading in seconds"""


class Installer:
    """
    Installs a gitleaks release for one platform.

    Example:
        >>> installer = Installer(PlatformKey("linux", "x64"))
        >>> result = installer.install(resolve_version("8.18.0"))
        >>> print(f"Installed at: {result.install_dir}")
    """

    def __init__(
        self,
        platform: PlatformKey,
        cache: Optional[InstallCache] = None,
        install_root: Optional[Path] = None,
        workflow: Optional[WorkflowContext] = None,
        downloader: Callable[..., Path] = download_file,
    ):
        """
        Initialize installer.

        Args:
            platform: Target platform
            cache: Install cache (local snapshot cache if None)
            install_root: Parent of install directories (temp dir if None)
            workflow: Workflow context for PATH publication
            downloader: Download function, download_file by default
        """
        self.platform = platform
        self.cache = cache if cache is not None else InstallCache()
        self.install_root = install_root
        self.workflow = workflow or WorkflowContext()
        self.downloader = downloader

    def install(self, version: ResolvedVersion) -> InstallResult:
        """
        Install gitleaks and put it on PATH.

        Args:
            version: Resolved gitleaks version

        Returns:
            InstallResult with the install directory

        Raises:
            UnsupportedPlatformError: If no artifact exists for the platform
            InstallError: If download, extraction or placement fails
        """
        key = cache_key(version.version, self.platform.os, self.platform.arch)
        install_dir = install_dir_for(version.version, self.install_root)

        logger.info(f"Version to install: {version} (path: {install_dir})")

        status = self.cache.restore(key, install_dir)
        download_time = 0.0

        if status is CacheStatus.HIT:
            logger.info("Restored from cache")
        else:
            logger.debug(f"Cache {status.value} for {key}")
            descriptor = locate(version, self.platform.os, self.platform.arch)

            start = time.time()
            self._download_and_materialize(descriptor, install_dir)
            download_time = time.time() - start

            self.cache.save(key, install_dir)

        prepend_to_path(install_dir)
        self.workflow.add_path(install_dir)

        return InstallResult(
            version=version,
            install_dir=install_dir,
            cache_key=key,
            was_cached=status is CacheStatus.HIT,
            download_time=download_time,
        )

    def _download_and_materialize(
        self, descriptor: DistDescriptor, install_dir: Path
    ) -> None:
        """Download an artifact and turn it into a populated install directory."""
        with temporary_directory(prefix="leakskit_download_") as download_dir:
            download_path = download_dir / descriptor.artifact
            self.downloader(
                descriptor.uri,
                download_path,
                progress_callback=_log_progress,
            )

            try:
                self._materialize(descriptor.kind, download_path, install_dir)
            except InstallError:
                self._cleanup_on_error(install_dir)
                raise
            except OSError as e:
                self._cleanup_on_error(install_dir)
                raise InstallError(
                    f"Failed to install {descriptor.artifact}: {e}"
                ) from e

    def _materialize(self, kind: DistKind, artifact: Path, install_dir: Path) -> None:
        """
        Populate install_dir from a downloaded artifact.

        Raises:
            UnsupportedArchiveError: If the artifact kind is not handled
        """
        if kind is DistKind.TAR_GZ:
            extract_tar(artifact, install_dir)
        elif kind is DistKind.ZIP:
            extract_zip(artifact, install_dir)
        elif kind is DistKind.RAW_EXECUTABLE:
            install_dir.mkdir(parents=True, exist_ok=True)
            binary = move_file(
                artifact, install_dir / self.platform.executable_name(BINARY_NAME)
            )
            make_executable(binary)
        else:
            raise UnsupportedArchiveError(f"Unsupported archive format: {kind}")

    def _cleanup_on_error(self, install_dir: Path) -> None:
        """Remove a partially populated install directory."""
        if not install_dir.exists():
            return

        try:
            safe_rmtree(install_dir)
            logger.debug(f"Removed partial installation: {install_dir}")
        except Exception as e:
            logger.warning(f"Failed to remove partial installation: {e}")


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"Downloaded {progress}")
