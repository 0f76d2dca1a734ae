"""
Shared utilities for CLI commands.

Turns parsed arguments into action inputs so every command resolves its
configuration the same way.
"""

import logging
from typing import Any, Dict, Optional

from leakskit.config.parser import ActionConfig, load_action_config

logger = logging.getLogger(__name__)

# argparse destination -> action input name
ARG_TO_INPUT = {
    "gitleaks_version": "version",
    "config_path": "config-path",
    "path": "path",
    "run": "run",
    "fail_on_error": "fail-on-error",
    "github_token": "github-token",
    "cache": "cache",
    "cache_dir": "cache-dir",
    "install_dir": "install-dir",
    "os": "os",
    "arch": "arch",
}


def cli_values_from_args(args) -> Dict[str, Optional[Any]]:
    """
    Extract action inputs from parsed arguments.

    Options the command does not define, and options left unset, come back as
    None so lower priority sources keep their values.
    """
    return {
        input_name: getattr(args, dest, None)
        for dest, input_name in ARG_TO_INPUT.items()
    }


def load_config_from_args(args) -> ActionConfig:
    """
    Build the ActionConfig for a command invocation.

    Raises:
        ConfigurationError: If the configuration is invalid or incomplete
    """
    config = load_action_config(
        cli_values_from_args(args),
        config_file=getattr(args, "config_file", None),
    )
    logger.debug(f"Configuration: version={config.version} run={config.run}")
    return config
