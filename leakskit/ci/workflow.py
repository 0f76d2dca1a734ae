"""
GitHub Actions workflow commands.

Publishes step outputs, PATH additions, annotations and log groups the way
the Actions runner expects them. Outside of Actions the same calls only log.

Reference: https://docs.github.com/en/actions/using-workflows/workflow-commands-for-github-actions
"""

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)


def is_github_actions(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether we are running inside a GitHub Actions job."""
    environ = os.environ if environ is None else environ
    return environ.get("GITHUB_ACTIONS", "").lower() == "true"


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _issue_command(command: str, message: str = "") -> None:
    sys.stdout.write(f"::{command}::{_escape_data(message)}\n")
    sys.stdout.flush()


class WorkflowContext:
    """
    Sink for step outputs and PATH additions.

    Outputs are remembered in memory and appended to the files named by
    GITHUB_OUTPUT / GITHUB_PATH when those are set.

    Example:
        >>> ctx = WorkflowContext.from_environment()
        >>> ctx.set_output("sarif", "/tmp/gitleaks.sarif")
    """

    def __init__(
        self,
        output_file: Optional[Path] = None,
        path_file: Optional[Path] = None,
        annotations: bool = False,
    ):
        self.output_file = output_file
        self.path_file = path_file
        self.annotations = annotations
        self.outputs: Dict[str, str] = {}

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "WorkflowContext":
        """Create a context from the runner's environment variables."""
        environ = os.environ if environ is None else environ
        output_file = environ.get("GITHUB_OUTPUT")
        path_file = environ.get("GITHUB_PATH")
        return cls(
            output_file=Path(output_file) if output_file else None,
            path_file=Path(path_file) if path_file else None,
            annotations=is_github_actions(environ),
        )

    def set_output(self, name: str, value: Union[str, int, Path]) -> None:
        """Publish a step output."""
        value = str(value)
        self.outputs[name] = value
        logger.debug(f"Output {name}={value}")

        if self.output_file is not None:
            with open(self.output_file, "a", encoding="utf-8") as f:
                if "\n" in value:
                    delimiter = f"ghadelimiter_{os.urandom(8).hex()}"
                    f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
                else:
                    f.write(f"{name}={value}\n")

    def add_path(self, directory: Union[str, Path]) -> None:
        """Add a directory to PATH for subsequent workflow steps."""
        if self.path_file is not None:
            with open(self.path_file, "a", encoding="utf-8") as f:
                f.write(f"{directory}\n")

    def warning(self, message: str) -> None:
        """Log a warning, raising an annotation on Actions."""
        if self.annotations:
            _issue_command("warning", message)
        else:
            logger.warning(message)

    def notice(self, message: str) -> None:
        """Log an informational notice."""
        if self.annotations:
            _issue_command("notice", message)
        else:
            logger.info(message)

    @contextmanager
    def group(self, title: str):
        """Fold log lines emitted inside the block into a named group."""
        if self.annotations:
            _issue_command("group", title)
        else:
            logger.info(title)

        try:
            yield
        finally:
            if self.annotations:
                _issue_command("endgroup")


__all__ = ["WorkflowContext", "is_github_actions"]
