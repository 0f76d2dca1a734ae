"""
Installation verification.

Confirms the installed gitleaks is the one found on PATH and that it answers
its version subcommand.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from leakskit.ci.workflow import WorkflowContext
from leakskit.core.exceptions import (
    BinaryNotFoundError,
    ToolExecutionError,
    VerificationError,
)
from leakskit.core.filesystem import find_executable
from leakskit.core.process import execute
from leakskit.install.installer import BINARY_NAME
from leakskit.release.version import Dialect, ResolvedVersion

logger = logging.getLogger(__name__)

# Self identification subcommand per dialect
VERSION_ARGS = {
    Dialect.LEGACY: ["--version"],
    Dialect.CURRENT: ["version"],
}


def version_args(dialect: Dialect) -> list[str]:
    """Arguments that make gitleaks print its version."""
    return list(VERSION_ARGS[dialect])


def verify_installation(
    version: ResolvedVersion,
    workflow: Optional[WorkflowContext] = None,
    runner: Callable[..., int] = execute,
) -> Path:
    """
    Verify that gitleaks is on PATH and runs.

    Args:
        version: Installed version; selects the version subcommand
        workflow: Workflow context receiving the 'gitleaks-bin' output
        runner: Process runner, execute by default

    Returns:
        Absolute path of the gitleaks binary

    Raises:
        BinaryNotFoundError: If gitleaks is not on PATH
        VerificationError: If the version subcommand fails
    """
    workflow = workflow or WorkflowContext()

    binary = find_executable(BINARY_NAME)
    if binary is None:
        raise BinaryNotFoundError(BINARY_NAME)

    logger.info(f"gitleaks installed: {binary}")
    workflow.set_output("gitleaks-bin", binary)

    try:
        runner(binary, version_args(version.dialect), silent=True)
    except ToolExecutionError as e:
        raise VerificationError(f"gitleaks self check failed: {e}") from e

    return binary
