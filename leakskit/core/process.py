"""
Subprocess execution for external tools.

Wraps subprocess.Popen so a tool's non-zero exit can be treated as data and
an interrupted run still gives the child a grace period before it is killed.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from leakskit.core.exceptions import ToolExecutionError

logger = logging.getLogger(__name__)

# Seconds a child gets to exit after terminate() before it is killed
DEFAULT_GRACE_DELAY = 60


def execute(
    binary: Union[str, Path],
    args: Sequence[str],
    ignore_return_code: bool = False,
    grace_delay: float = DEFAULT_GRACE_DELAY,
    silent: bool = False,
    cwd: Optional[Path] = None,
) -> int:
    """
    Run a binary and wait for it to finish.

    Output is streamed to this process's stdout/stderr unless silent is set.

    Args:
        binary: Executable name or path
        args: Arguments passed to the binary
        ignore_return_code: Return non-zero exit codes instead of raising
        grace_delay: Seconds to wait after terminate() before kill()
        silent: Discard the child's output
        cwd: Working directory for the child

    Returns:
        Exit code of the process

    Raises:
        ToolExecutionError: If the binary cannot be started, or exits
            non-zero while ignore_return_code is False
    """
    cmd = [str(binary), *args]
    logger.debug(f"Executing: {' '.join(cmd)}")

    output = subprocess.DEVNULL if silent else None

    try:
        proc = subprocess.Popen(cmd, stdout=output, stderr=output, cwd=cwd)
    except OSError as e:
        raise ToolExecutionError(f"Failed to start {binary}: {e}") from e

    try:
        exit_code = proc.wait()
    except BaseException:
        _terminate(proc, grace_delay)
        raise

    logger.debug(f"{binary} exited with code {exit_code}")

    if exit_code != 0 and not ignore_return_code:
        raise ToolExecutionError(
            f"{binary} failed with exit code {exit_code}", exit_code=exit_code
        )

    return exit_code


def _terminate(proc: subprocess.Popen, grace_delay: float) -> None:
    """Stop a running child, escalating to kill after grace_delay."""
    if proc.poll() is not None:
        return

    logger.warning(f"Stopping process {proc.pid} (grace period {grace_delay}s)")
    proc.terminate()
    try:
        proc.wait(timeout=grace_delay)
    except subprocess.TimeoutExpired:
        logger.warning(f"Process {proc.pid} did not exit, killing it")
        proc.kill()
        proc.wait()
