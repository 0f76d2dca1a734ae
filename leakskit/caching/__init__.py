"""
Install cache for leakskit.

Modules:
    install_cache: Content-addressed snapshots of gitleaks install directories
"""

from .install_cache import (
    CacheBackend,
    CacheStatus,
    InstallCache,
    LocalCacheBackend,
    NullCacheBackend,
    cache_key,
)

__all__ = [
    "CacheBackend",
    "CacheStatus",
    "InstallCache",
    "LocalCacheBackend",
    "NullCacheBackend",
    "cache_key",
]
