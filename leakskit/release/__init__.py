"""
gitleaks release handling.

Resolves version specifiers against the GitHub release index and maps a
resolved version and platform to its published artifact.
"""

from leakskit.release.version import (
    LATEST,
    Dialect,
    ResolvedVersion,
    normalize_version_spec,
    resolve_version,
)
from leakskit.release.locator import DistDescriptor, DistKind, locate

__all__ = [
    "LATEST",
    "Dialect",
    "ResolvedVersion",
    "normalize_version_spec",
    "resolve_version",
    "DistDescriptor",
    "DistKind",
    "locate",
]
