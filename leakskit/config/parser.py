"""Action configuration for leakskit.

Inputs are read once at startup and frozen into an ActionConfig that is
passed to every component. Sources, lowest priority first:

1. Built-in defaults
2. YAML configuration file (leakskit.yaml)
3. GitHub Actions inputs (INPUT_<NAME> environment variables)
4. Command-line flags
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from leakskit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "leakskit.yaml"

TRUTHY = frozenset({"true", "1", "yes", "ok"})

# Input names as they appear in action.yml and leakskit.yaml
INPUT_NAMES = (
    "version",
    "config-path",
    "path",
    "run",
    "fail-on-error",
    "github-token",
    "cache",
    "cache-dir",
    "install-dir",
    "os",
    "arch",
)

DEFAULTS: Dict[str, str] = {
    "version": "",
    "config-path": "",
    "path": "",
    "run": "true",
    "fail-on-error": "false",
    "github-token": "",
    "cache": "true",
    "cache-dir": "",
    "install-dir": "",
    "os": "",
    "arch": "",
}


def string_to_bool(value: Any) -> bool:
    """
    Interpret a boolean-ish input.

    Example:
        >>> string_to_bool("Yes")
        True
        >>> string_to_bool("false")
        False
    """
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


@dataclass(frozen=True)
class ActionConfig:
    """Complete, immutable action configuration."""

    version: str
    config_path: Optional[str] = None
    path: Optional[Path] = None
    run: bool = True
    fail_on_error: bool = False
    github_token: Optional[str] = None
    cache: bool = True
    cache_dir: Optional[Path] = None
    install_dir: Optional[Path] = None
    os: Optional[str] = None
    arch: Optional[str] = None

    @property
    def source_path(self) -> Path:
        """Directory to scan; the working directory when unset."""
        return self.path if self.path else Path.cwd()


def read_env_inputs(environ: Mapping[str, str]) -> Dict[str, str]:
    """
    Collect GitHub Actions inputs from the environment.

    The runner exposes input 'fail-on-error' as INPUT_FAIL-ON-ERROR; the
    underscore spelling is accepted too.
    """
    inputs = {}
    for name in INPUT_NAMES:
        for key in (f"INPUT_{name.upper()}", f"INPUT_{name.upper().replace('-', '_')}"):
            if key in environ:
                inputs[name] = environ[key]
                break
    return inputs


def load_config_file(config_file: Path, required: bool = False) -> Dict[str, str]:
    """
    Load inputs from a YAML configuration file.

    Args:
        config_file: Path to leakskit.yaml
        required: If True, raise error if file doesn't exist

    Returns:
        Mapping of input name to value (empty if the file is absent)

    Raises:
        ConfigurationError: If the file is required and missing, is not valid
            YAML, or contains unknown keys
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}")

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file} must contain a mapping")

    unknown = sorted(set(data) - set(INPUT_NAMES))
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in {config_file}: {', '.join(unknown)}"
        )

    return {key: _stringify(value) for key, value in data.items()}


def _stringify(value: Any) -> str:
    # YAML booleans arrive as bool; inputs are compared as lower-case strings
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def build_config(values: Mapping[str, Any]) -> ActionConfig:
    """
    Turn merged raw inputs into an ActionConfig.

    Raises:
        ConfigurationError: If 'version' is missing
    """
    merged = {**DEFAULTS, **values}

    version = str(merged["version"]).strip()
    if not version:
        raise ConfigurationError("Input required and not supplied: version")

    def optional(name: str) -> Optional[str]:
        value = str(merged[name]).strip()
        return value or None

    def optional_path(name: str) -> Optional[Path]:
        value = optional(name)
        return Path(value) if value else None

    return ActionConfig(
        version=version,
        config_path=optional("config-path"),
        path=optional_path("path"),
        run=string_to_bool(merged["run"]),
        fail_on_error=string_to_bool(merged["fail-on-error"]),
        github_token=optional("github-token"),
        cache=string_to_bool(merged["cache"]),
        cache_dir=optional_path("cache-dir"),
        install_dir=optional_path("install-dir"),
        os=optional("os"),
        arch=optional("arch"),
    )


def load_action_config(
    cli_values: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_file: Optional[Path] = None,
) -> ActionConfig:
    """
    Load the action configuration from all sources.

    Args:
        cli_values: Values given on the command line; None entries are ignored
        environ: Environment (os.environ by default)
        config_file: Explicit YAML file; ./leakskit.yaml is used when present

    Returns:
        ActionConfig

    Raises:
        ConfigurationError: If any source is invalid or 'version' is missing
    """
    environ = os.environ if environ is None else environ

    if config_file is not None:
        file_values = load_config_file(Path(config_file), required=True)
    else:
        file_values = load_config_file(Path.cwd() / DEFAULT_CONFIG_FILE)

    values: Dict[str, Any] = {}
    values.update(file_values)
    values.update(read_env_inputs(environ))
    values.update(
        {key: value for key, value in (cli_values or {}).items() if value is not None}
    )

    return build_config(values)
