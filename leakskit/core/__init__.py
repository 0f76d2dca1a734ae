"""
Core functionality for leakskit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    LeaksKitError,
    ConfigurationError,
    VersionError,
    InvalidVersionError,
    UnsupportedVersionError,
    ReleaseIndexError,
    UnsupportedPlatformError,
    InstallError,
    UnsupportedArchiveError,
    VerificationError,
    BinaryNotFoundError,
    ToolExecutionError,
)

from .platform import (
    PlatformKey,
    detect_platform,
    make_platform_key,
    clear_platform_cache,
)

from .process import execute

__all__ = [
    "LeaksKitError",
    "ConfigurationError",
    "VersionError",
    "InvalidVersionError",
    "UnsupportedVersionError",
    "ReleaseIndexError",
    "UnsupportedPlatformError",
    "InstallError",
    "UnsupportedArchiveError",
    "VerificationError",
    "BinaryNotFoundError",
    "ToolExecutionError",
    "PlatformKey",
    "detect_platform",
    "make_platform_key",
    "clear_platform_cache",
    "execute",
]
