"""
Distribution locator for gitleaks release artifacts.

Maps (version, os, arch) to the download URI and packaging kind published on
GitHub releases. 7.x ships bare executables; 8.x+ ships tar.gz/zip archives.

Reference: https://github.com/gitleaks/gitleaks/releases
"""

from dataclasses import dataclass
from enum import Enum

from leakskit.core.exceptions import UnsupportedPlatformError
from leakskit.release.version import Dialect, ResolvedVersion

RELEASE_BASE_URL = "https://github.com/gitleaks/gitleaks/releases/download"


class DistKind(Enum):
    """How a release artifact is packaged."""

    TAR_GZ = "tar.gz"
    ZIP = "zip"
    RAW_EXECUTABLE = "raw"


@dataclass(frozen=True)
class DistDescriptor:
    """Download location and packaging of one release artifact."""

    uri: str
    kind: DistKind

    @property
    def artifact(self) -> str:
        return self.uri.rsplit("/", 1)[-1]


# 7.x: one bare executable per platform
_LEGACY_ARTIFACTS = {
    ("linux", "x64"): "gitleaks-linux-amd64",
    ("linux", "arm"): "gitleaks-linux-arm",
    ("darwin", "x64"): "gitleaks-darwin-amd64",
    ("windows", "x32"): "gitleaks-windows-386.exe",
    ("windows", "x64"): "gitleaks-windows-amd64.exe",
}

# 8.x+: archives named after the platform ids themselves
_CURRENT_PLATFORMS = {
    ("linux", "x32"): DistKind.TAR_GZ,
    ("linux", "x64"): DistKind.TAR_GZ,
    ("linux", "arm64"): DistKind.TAR_GZ,
    ("darwin", "x64"): DistKind.TAR_GZ,
    ("darwin", "arm64"): DistKind.TAR_GZ,
    ("windows", "x32"): DistKind.ZIP,
    ("windows", "x64"): DistKind.ZIP,
    ("windows", "arm64"): DistKind.ZIP,
}


def release_uri(version: str, artifact: str) -> str:
    """Build the download URI of an artifact of a release."""
    return f"{RELEASE_BASE_URL}/v{version}/{artifact}"


def locate(resolved: ResolvedVersion, os_name: str, arch: str) -> DistDescriptor:
    """
    Locate the release artifact for a platform.

    Args:
        resolved: Resolved gitleaks version
        os_name: Operating system id ('linux', 'darwin', 'windows')
        arch: Architecture id ('x32', 'x64', 'arm', 'arm64')

    Returns:
        DistDescriptor with URI and packaging kind

    Raises:
        UnsupportedPlatformError: If no artifact exists for the combination

    Example:
        >>> locate(ResolvedVersion("8.18.0", Dialect.CURRENT), "linux", "x64").uri
        'https://github.com/gitleaks/gitleaks/releases/download/v8.18.0/gitleaks_8.18.0_linux_x64.tar.gz'
    """
    version = resolved.version
    platform_key = (os_name, arch)

    if resolved.dialect is Dialect.LEGACY:
        artifact = _LEGACY_ARTIFACTS.get(platform_key)
        if artifact is None:
            raise UnsupportedPlatformError(os_name, arch, version)
        return DistDescriptor(
            uri=release_uri(version, artifact), kind=DistKind.RAW_EXECUTABLE
        )

    kind = _CURRENT_PLATFORMS.get(platform_key)
    if kind is None:
        raise UnsupportedPlatformError(os_name, arch, version)

    artifact = f"gitleaks_{version}_{os_name}_{arch}.{kind.value}"
    return DistDescriptor(uri=release_uri(version, artifact), kind=kind)


def supported_platforms(dialect: Dialect) -> list[tuple[str, str]]:
    """List the (os, arch) pairs with an artifact in a dialect."""
    table = _LEGACY_ARTIFACTS if dialect is Dialect.LEGACY else _CURRENT_PLATFORMS
    return sorted(table)
