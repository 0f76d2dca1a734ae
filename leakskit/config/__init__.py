"""Configuration module for leakskit.

This module merges defaults, leakskit.yaml, GitHub Actions inputs and command
line flags into one immutable ActionConfig.
"""

from leakskit.config.parser import (
    ActionConfig,
    build_config,
    load_action_config,
    load_config_file,
    string_to_bool,
)

__all__ = [
    "ActionConfig",
    "build_config",
    "load_action_config",
    "load_config_file",
    "string_to_bool",
]
