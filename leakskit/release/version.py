"""
Version resolution for gitleaks.

Turns the user-supplied version token into a concrete version and decides,
once, which CLI/packaging dialect that version speaks.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from leakskit.core.exceptions import InvalidVersionError, UnsupportedVersionError
from leakskit.release.github import GitHubReleaseIndex

logger = logging.getLogger(__name__)

LATEST = "latest"

GITLEAKS_OWNER = "gitleaks"
GITLEAKS_REPO = "gitleaks"


class Dialect(Enum):
    """CLI flag grammar and packaging family of a gitleaks major version."""

    LEGACY = "legacy"  # 7.x: raw binaries, --path/--report flags
    CURRENT = "current"  # 8.x+: archives, detect subcommand


@dataclass(frozen=True)
class ResolvedVersion:
    """Concrete gitleaks version with its dialect."""

    version: str
    dialect: Dialect

    @property
    def is_legacy(self) -> bool:
        return self.dialect is Dialect.LEGACY

    def __str__(self) -> str:
        return self.version


def strip_v_prefix(tag: str) -> str:
    """Remove one leading 'v' or 'V' from a tag."""
    return tag[1:] if tag[:1] in ("v", "V") else tag


def normalize_version_spec(raw: str) -> str:
    """
    Normalize a version specifier.

    Trims whitespace, lower-cases, and strips a leading 'v'. The result is
    either the 'latest' sentinel or starts with a digit.

    Raises:
        InvalidVersionError: If the result is neither

    Example:
        >>> normalize_version_spec(" Latest ")
        'latest'
        >>> normalize_version_spec("v8.18.0")
        '8.18.0'
    """
    spec = (raw or "").strip().lower()

    if spec == LATEST:
        return spec

    spec = strip_v_prefix(spec)
    if not spec[:1].isdigit():
        raise InvalidVersionError(f"Invalid version: {raw!r}")

    return spec


def major_version(version: str) -> Optional[int]:
    """Return the leading numeric component of a version, or None."""
    head = version.split(".", 1)[0]
    return int(head) if head.isdigit() else None


def dialect_for_version(version: str) -> Dialect:
    """
    Pick the dialect for a concrete version.

    Raises:
        UnsupportedVersionError: For majors below 7 or unparseable versions
    """
    major = major_version(version)

    if major == 7:
        return Dialect.LEGACY
    if major is not None and major >= 8:
        return Dialect.CURRENT

    raise UnsupportedVersionError(version)


def resolve_version(
    raw: str,
    token: Optional[str] = None,
    index: Optional[GitHubReleaseIndex] = None,
) -> ResolvedVersion:
    """
    Resolve a version specifier to a concrete version.

    'latest' queries the release index exactly once; anything else is used
    as given after normalization.

    Args:
        raw: Version specifier as supplied by the user
        token: GitHub token for the release index
        index: Release index client (created on demand)

    Returns:
        ResolvedVersion with its dialect

    Raises:
        InvalidVersionError: If the specifier is malformed
        ReleaseIndexError: If the latest release cannot be determined
        UnsupportedVersionError: If the version has no known dialect
    """
    spec = normalize_version_spec(raw)

    if spec == LATEST:
        logger.debug("Requesting latest gitleaks version...")
        index = index or GitHubReleaseIndex(token=token)
        tag = index.get_latest_release_tag(GITLEAKS_OWNER, GITLEAKS_REPO)
        version = strip_v_prefix(tag.strip())
        logger.info(f"Latest gitleaks version: {version}")
    else:
        version = spec

    return ResolvedVersion(version=version, dialect=dialect_for_version(version))
