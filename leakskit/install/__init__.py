"""
gitleaks installation and verification.
"""

from leakskit.install.installer import BINARY_NAME, InstallResult, Installer
from leakskit.install.verifier import verify_installation

__all__ = ["BINARY_NAME", "InstallResult", "Installer", "verify_installation"]
