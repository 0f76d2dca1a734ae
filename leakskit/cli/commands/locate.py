"""
Locate command implementation.

Prints where a gitleaks release artifact lives without downloading it.
"""

import logging

from leakskit.cli.utils import load_config_from_args
from leakskit.core.platform import detect_platform
from leakskit.release.locator import locate
from leakskit.release.version import resolve_version

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Print the download URI and archive kind for a version and platform.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_config_from_args(args)
    platform = detect_platform(config.os, config.arch)

    resolved = resolve_version(config.version, token=config.github_token)
    descriptor = locate(resolved, platform.os, platform.arch)

    print(f"version:  {resolved}")
    print(f"platform: {platform}")
    print(f"kind:     {descriptor.kind.value}")
    print(f"uri:      {descriptor.uri}")
    return 0
