"""
Platform detection for leakskit.

Maps the host operating system and CPU to the identifiers used by gitleaks
release artifacts.

Features:
- Operating system detection (linux, darwin, windows)
- CPU architecture detection (x32, x64, arm, arm64)
- Validation of user supplied overrides against the closed enumeration

Usage:
    from leakskit.core.platform import detect_platform

    key = detect_platform()
    print(f"Running on {key}")
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional

from leakskit.core.exceptions import UnsupportedPlatformError

SUPPORTED_OS = ("linux", "darwin", "windows")
SUPPORTED_ARCH = ("x32", "x64", "arm", "arm64")

_OS_MAP = {
    "linux": "linux",
    "darwin": "darwin",
    "macos": "darwin",
    "windows": "windows",
    "win32": "windows",
}

_ARCH_MAP = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "i386": "x32",
    "i686": "x32",
    "x86": "x32",
    "x32": "x32",
    "386": "x32",
    "aarch64": "arm64",
    "arm64": "arm64",
}


@dataclass(frozen=True)
class PlatformKey:
    """
    Operating system and CPU architecture pair.

    Attributes:
        os: Operating system ('linux', 'darwin', 'windows')
        arch: CPU architecture ('x32', 'x64', 'arm', 'arm64')
    """

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def executable_name(self, name: str) -> str:
        """
        Get platform-appropriate executable file name.

        Example:
            >>> PlatformKey("windows", "x64").executable_name("gitleaks")
            'gitleaks.exe'
        """
        return f"{name}.exe" if self.is_windows else name

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


def normalize_os(name: str) -> str:
    """
    Normalize an operating system name.

    Args:
        name: Raw OS name (e.g. 'Linux', 'Darwin', 'win32')

    Returns:
        Normalized OS id

    Raises:
        UnsupportedPlatformError: If the OS is not one of linux, darwin, windows
    """
    normalized = _OS_MAP.get(name.strip().lower())
    if normalized is None:
        raise UnsupportedPlatformError(name, "")
    return normalized


def normalize_arch(machine: str) -> str:
    """
    Normalize a CPU architecture name.

    Args:
        machine: Raw architecture (e.g. 'x86_64', 'aarch64', 'armv7l')

    Returns:
        Normalized architecture id

    Raises:
        UnsupportedPlatformError: If the architecture is unknown
    """
    machine = machine.strip().lower()

    if machine in _ARCH_MAP:
        return _ARCH_MAP[machine]
    if machine.startswith("arm"):
        return "arm"

    raise UnsupportedPlatformError("", machine)


def make_platform_key(os_name: str, arch: str) -> PlatformKey:
    """
    Build a validated PlatformKey from raw identifiers.

    Raises:
        UnsupportedPlatformError: If either component is outside the enumeration
    """
    try:
        return PlatformKey(os=normalize_os(os_name), arch=normalize_arch(arch))
    except UnsupportedPlatformError:
        raise UnsupportedPlatformError(os_name, arch) from None


@functools.lru_cache(maxsize=1)
def _detect_host() -> PlatformKey:
    return make_platform_key(platform.system(), platform.machine())


def detect_platform(
    os_override: Optional[str] = None, arch_override: Optional[str] = None
) -> PlatformKey:
    """
    Detect the current platform, honouring explicit overrides.

    Host detection is cached; it only runs once per process.

    Args:
        os_override: Use this OS instead of the host's
        arch_override: Use this architecture instead of the host's

    Returns:
        PlatformKey for the host or the overridden values

    Raises:
        UnsupportedPlatformError: If the platform cannot be mapped
    """
    if os_override and arch_override:
        return make_platform_key(os_override, arch_override)

    host = _detect_host()
    return make_platform_key(os_override or host.os, arch_override or host.arch)


def clear_platform_cache():
    """Clear the host detection cache."""
    _detect_host.cache_clear()


__all__ = [
    "SUPPORTED_OS",
    "SUPPORTED_ARCH",
    "PlatformKey",
    "normalize_os",
    "normalize_arch",
    "make_platform_key",
    "detect_platform",
    "clear_platform_cache",
]
