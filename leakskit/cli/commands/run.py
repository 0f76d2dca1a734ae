"""
Run command implementation.

Installs gitleaks, verifies it and scans the configured directory.
"""

import logging

from leakskit.action import run_action
from leakskit.cli.utils import load_config_from_args

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the full pipeline.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (gitleaks' exit code when fail-on-error is set and leaks
        were found, otherwise 0)
    """
    logger.debug(f"Arguments: {args}")
    config = load_config_from_args(args)
    return run_action(config)
