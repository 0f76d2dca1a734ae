"""
Centralized exception hierarchy for leakskit.

Fatal errors (unsupported versions or platforms, failed installs, missing
binaries, release index failures) derive from LeaksKitError and propagate
to the CLI, which turns them into exit code 1.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class LeaksKitError(Exception):
    """Base exception for all leakskit errors."""

    pass


class ConfigurationError(LeaksKitError):
    """Raised when action inputs or the configuration file are invalid."""

    pass


# ============================================================================
# Version Exceptions
# ============================================================================


class VersionError(LeaksKitError):
    """Base exception for version-related errors."""

    pass


class InvalidVersionError(VersionError):
    """Version specifier is neither 'latest' nor a version string."""

    pass


class UnsupportedVersionError(VersionError):
    """Raised when the gitleaks major version has no known dialect."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Unsupported version: {version}")


class ReleaseIndexError(VersionError):
    """Raised when the latest release cannot be fetched from the release index."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedPlatformError(LeaksKitError):
    """Raised for OS/architecture combinations without a gitleaks artifact."""

    def __init__(self, os_name: str, arch: str, version: str = ""):
        self.os_name = os_name
        self.arch = arch
        self.version = version
        msg = f"Unsupported platform/architecture: {os_name}/{arch}"
        if version:
            msg += f" for gitleaks {version}"
        super().__init__(msg)


# ============================================================================
# Install Exceptions
# ============================================================================


class InstallError(LeaksKitError):
    """Base exception for installation errors."""

    pass


class UnsupportedArchiveError(InstallError):
    """Raised when a distribution kind cannot be materialized."""

    pass


class VerificationError(LeaksKitError):
    """Raised when the installed binary fails its self check."""

    pass


class BinaryNotFoundError(VerificationError):
    """Raised when the binary cannot be found on PATH after install."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} binary not found on PATH")


# ============================================================================
# Execution Exceptions
# ============================================================================


class ToolExecutionError(LeaksKitError):
    """Raised when a tool cannot be launched or exits non-zero unexpectedly."""

    def __init__(self, message: str, exit_code: int = -1):
        self.exit_code = exit_code
        super().__init__(message)
