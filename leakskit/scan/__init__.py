"""
gitleaks scan execution.
"""

from .runner import ScanOutcome, ScanRunner, build_scan_args, discover_config

__all__ = ["ScanOutcome", "ScanRunner", "build_scan_args", "discover_config"]
