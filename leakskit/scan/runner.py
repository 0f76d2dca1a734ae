"""
gitleaks scan execution.

Builds the argument vector for the installed dialect, picks the configuration
file, runs the scan and reports its outcome. A non-zero exit from gitleaks is
a result (leaks found, or a tool error), never an exception.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from leakskit.core.process import DEFAULT_GRACE_DELAY, execute
from leakskit.install.installer import BINARY_NAME
from leakskit.release.version import Dialect, ResolvedVersion

logger = logging.getLogger(__name__)

# Read by gitleaks itself; never re-injected as an argument
GITLEAKS_CONFIG_ENV = "GITLEAKS_CONFIG"

# Checked in order relative to the scanned directory; first non-empty wins
CONFIG_CANDIDATES = (
    "gitleaks.toml",
    ".gitleaks.toml",
    ".github/gitleaks.toml",
    ".github/.gitleaks.toml",
)


@dataclass(frozen=True)
class ScanOutcome:
    """Exit status and report location of one scan."""

    exit_code: int
    report_path: Path

    @property
    def leaks_found(self) -> bool:
        return self.exit_code != 0


def discover_config(
    source: Path, candidates: Sequence[str] = CONFIG_CANDIDATES
) -> Optional[Path]:
    """
    Find a gitleaks configuration file in a repository.

    Args:
        source: Repository root to search
        candidates: Relative paths checked in order

    Returns:
        First candidate that exists and is non-empty, or None
    """
    for candidate in candidates:
        path = Path(source) / candidate
        if path.is_file() and path.stat().st_size > 0:
            logger.debug(f"Discovered gitleaks config: {path}")
            return path

    return None


def resolve_config_path(
    explicit: Optional[str],
    source: Path,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """
    Decide which configuration file to pass to gitleaks.

    Priority: explicit path, then GITLEAKS_CONFIG (left for gitleaks to read
    itself, so None is returned), then auto-discovery, then nothing.
    """
    environ = os.environ if environ is None else environ

    if explicit:
        return Path(explicit)

    if environ.get(GITLEAKS_CONFIG_ENV):
        logger.debug(f"{GITLEAKS_CONFIG_ENV} is set, gitleaks will read it")
        return None

    return discover_config(source)


def build_scan_args(
    dialect: Dialect,
    source: Path,
    report_path: Path,
    config_path: Optional[Path] = None,
) -> list[str]:
    """
    Build the gitleaks argument vector.

    Example:
        >>> build_scan_args(Dialect.CURRENT, Path("."), Path("/tmp/gitleaks.sarif"))
        ['--verbose', '--redact', '--report-format', 'sarif', '--report-path', '/tmp/gitleaks.sarif', '--source', '.', 'detect']
    """
    if dialect is Dialect.LEGACY:
        config_args = ["--config-path", str(config_path)] if config_path else []
        common_args = [
            "--redact",
            "--format",
            "sarif",
            "--report",
            str(report_path),
            "--path",
            str(source),
        ]
    else:
        config_args = ["--config", str(config_path)] if config_path else []
        common_args = [
            "--verbose",
            "--redact",
            "--report-format",
            "sarif",
            "--report-path",
            str(report_path),
            "--source",
            str(source),
            "detect",
        ]

    return [*config_args, *common_args]


class ScanRunner:
    """
    Runs gitleaks against a source tree.

    Example:
        >>> runner = ScanRunner(resolved, report_path=Path("/tmp/gitleaks.sarif"))
        >>> outcome = runner.run(Path("."))
        >>> outcome.exit_code
        0
    """

    def __init__(
        self,
        version: ResolvedVersion,
        report_path: Path,
        config_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        grace_delay: float = DEFAULT_GRACE_DELAY,
        runner: Callable[..., int] = execute,
    ):
        self.version = version
        self.report_path = Path(report_path)
        self.config_path = config_path
        self.environ = environ
        self.grace_delay = grace_delay
        self.runner = runner

    def build_args(self, source: Path) -> list[str]:
        """Argument vector for scanning source."""
        config = resolve_config_path(self.config_path, source, self.environ)
        return build_scan_args(self.version.dialect, source, self.report_path, config)

    def run(self, source: Path) -> ScanOutcome:
        """
        Scan a directory.

        Returns:
            ScanOutcome with the gitleaks exit code

        Raises:
            ToolExecutionError: If gitleaks cannot be started
        """
        args = self.build_args(Path(source))

        logger.info("Run gitleaks")
        exit_code = self.runner(
            BINARY_NAME,
            args,
            ignore_return_code=True,
            grace_delay=self.grace_delay,
        )

        return ScanOutcome(exit_code=exit_code, report_path=self.report_path)
