"""
Content-addressed cache for gitleaks install directories.

The cache key is a pure function of (version, os, arch), so any two runs that
compute the same key may share one snapshot. Cache problems never fail an
install: every backend error is logged and reported as UNAVAILABLE.

Usage:
    from leakskit.caching.install_cache import InstallCache, LocalCacheBackend

    cache = InstallCache(LocalCacheBackend(Path("~/.leakskit/cache")))
    key = cache_key("8.18.0", "linux", "x64")
    if cache.restore(key, install_dir) is not CacheStatus.HIT:
        ...  # download and extract
        cache.save(key, install_dir)
"""

import logging
import tarfile
import tempfile
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional

from filelock import FileLock

from leakskit.core.directory import get_cache_dir
from leakskit.core.filesystem import extract_tar

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "gitleaks"


class CacheStatus(Enum):
    """Outcome of a cache operation."""

    HIT = "hit"
    MISS = "miss"
    UNAVAILABLE = "unavailable"


def cache_key(version: str, os_name: str, arch: str) -> str:
    """
    Build the cache key for an install.

    Example:
        >>> cache_key("8.18.0", "linux", "x64")
        'gitleaks-8.18.0-linux-x64'
    """
    return f"{CACHE_NAMESPACE}-{version}-{os_name}-{arch}"


class CacheBackend(ABC):
    """Key/value store of directory snapshots."""

    @abstractmethod
    def restore(self, key: str, target_dir: Path) -> bool:
        """
        Restore the snapshot stored under key into target_dir.

        Returns:
            True if a snapshot was found and restored, False otherwise
        """

    @abstractmethod
    def save(self, key: str, source_dir: Path) -> bool:
        """
        Store source_dir under key.

        Returns:
            True if a snapshot was written, False if the backend keeps nothing
        """


class NullCacheBackend(CacheBackend):
    """Backend used when caching is disabled; never holds anything."""

    def restore(self, key: str, target_dir: Path) -> bool:
        return False

    def save(self, key: str, source_dir: Path) -> bool:
        logger.debug(f"Caching disabled, not saving {key}")
        return False


class LocalCacheBackend(CacheBackend):
    """
    Snapshot store on the local filesystem.

    Each key maps to <cache_dir>/<key>.tar.gz. Writers of the same key are
    serialized with a file lock and publish with an atomic rename, so readers
    never see a partial snapshot.

    Attributes:
        cache_dir: Directory holding snapshots
        lock_timeout: Seconds to wait for another writer of the same key
    """

    def __init__(self, cache_dir: Optional[Path] = None, lock_timeout: int = 60):
        self.cache_dir = Path(cache_dir) if cache_dir else get_cache_dir()
        self.lock_timeout = lock_timeout

    def snapshot_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.tar.gz"

    def _lock(self, key: str) -> FileLock:
        lock_dir = self.cache_dir / "lock"
        lock_dir.mkdir(parents=True, exist_ok=True)
        return FileLock(lock_dir / f"{key}.lock", timeout=self.lock_timeout)

    def restore(self, key: str, target_dir: Path) -> bool:
        snapshot = self.snapshot_path(key)
        if not snapshot.exists():
            return False

        extract_tar(snapshot, target_dir)
        return True

    def save(self, key: str, source_dir: Path) -> bool:
        snapshot = self.snapshot_path(key)
        snapshot.parent.mkdir(parents=True, exist_ok=True)

        with self._lock(key):
            temp_fd, temp_name = tempfile.mkstemp(
                dir=snapshot.parent, prefix=f".{snapshot.name}.", suffix=".tmp"
            )
            temp_path = Path(temp_name)

            try:
                with open(temp_fd, "wb") as f:
                    with tarfile.open(fileobj=f, mode="w:gz") as tar:
                        for item in sorted(Path(source_dir).iterdir()):
                            tar.add(item, arcname=item.name)
                temp_path.replace(snapshot)
            except Exception:
                temp_path.unlink(missing_ok=True)
                raise

        logger.debug(f"Stored snapshot {snapshot}")
        return True


class InstallCache:
    """
    Best-effort cache in front of a backend.

    Translates backend exceptions into CacheStatus.UNAVAILABLE with a
    warning, so callers branch on the status instead of catching errors.
    """

    def __init__(self, backend: Optional[CacheBackend] = None):
        self.backend = backend if backend is not None else LocalCacheBackend()

    def restore(self, key: str, target_dir: Path) -> CacheStatus:
        """
        Restore an install directory.

        Returns:
            HIT if restored, MISS if the key is unknown, UNAVAILABLE on errors
        """
        try:
            restored = self.backend.restore(key, Path(target_dir))
        except Exception as e:
            logger.warning(f"Cache restore failed for {key}: {e}")
            return CacheStatus.UNAVAILABLE

        return CacheStatus.HIT if restored else CacheStatus.MISS

    def save(self, key: str, source_dir: Path) -> CacheStatus:
        """
        Save an install directory.

        Returns:
            HIT if stored, MISS if the backend keeps nothing, UNAVAILABLE on errors
        """
        try:
            stored = self.backend.save(key, Path(source_dir))
        except Exception as e:
            logger.warning(f"Cache save failed for {key}: {e}")
            return CacheStatus.UNAVAILABLE

        return CacheStatus.HIT if stored else CacheStatus.MISS
