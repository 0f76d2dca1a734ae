"""
Install command implementation.

Resolves, installs and verifies gitleaks without scanning.
"""

import dataclasses
import logging

from leakskit.action import GitleaksAction
from leakskit.cli.utils import load_config_from_args

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Install and verify gitleaks.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = dataclasses.replace(load_config_from_args(args), run=False)

    result = GitleaksAction(config).run()

    source = "cache" if result.install.was_cached else "download"
    print(f"gitleaks {result.version} installed from {source}: {result.binary}")
    return 0
