"""
Directory layout for leakskit.

Directory Structure:
    Home (~/.leakskit/ or $LEAKSKIT_HOME):
        - cache/      : Install directory snapshots (<cache-key>.tar.gz)
        - cache/lock/ : Per-key lock files

    Install root (system temp directory by default):
        - gitleaks-<version>/ : Installed gitleaks binary
        - gitleaks.sarif      : Scan report
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

LEAKSKIT_HOME_ENV = "LEAKSKIT_HOME"

REPORT_FILE_NAME = "gitleaks.sarif"


def get_leakskit_home() -> Path:
    """
    Get the leakskit home directory.

    Resolution order:
    1. LEAKSKIT_HOME environment variable (if set)
    2. ~/.leakskit

    Example:
        >>> get_leakskit_home()
        PosixPath('/home/runner/.leakskit')
    """
    env_home = os.environ.get(LEAKSKIT_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / ".leakskit"


def get_cache_dir() -> Path:
    """Default directory for install snapshots."""
    return get_leakskit_home() / "cache"


def get_install_root(override: Optional[Path] = None) -> Path:
    """Directory that holds per-version install directories."""
    return Path(override) if override else Path(tempfile.gettempdir())


def install_dir_for(version: str, install_root: Optional[Path] = None) -> Path:
    """
    Get the install directory of a gitleaks version.

    Example:
        >>> install_dir_for("8.18.0", Path("/tmp"))
        PosixPath('/tmp/gitleaks-8.18.0')
    """
    return get_install_root(install_root) / f"gitleaks-{version}"


def report_path_for(install_root: Optional[Path] = None) -> Path:
    """Path of the SARIF report written by a scan."""
    return get_install_root(install_root) / REPORT_FILE_NAME
