"""
Action pipeline: resolve, install, verify and optionally scan.

Stages run strictly in order; each starts only after the previous one's
effects (files on disk, PATH) are in place. Fatal errors propagate to the
caller. A scan that finds leaks is reported through outputs and the returned
exit code.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from leakskit.caching.install_cache import (
    InstallCache,
    LocalCacheBackend,
    NullCacheBackend,
)
from leakskit.ci.workflow import WorkflowContext
from leakskit.config.parser import ActionConfig
from leakskit.core.directory import report_path_for
from leakskit.core.platform import PlatformKey, detect_platform
from leakskit.install.installer import Installer, InstallResult
from leakskit.install.verifier import verify_installation
from leakskit.release.github import GitHubReleaseIndex
from leakskit.release.version import ResolvedVersion, resolve_version
from leakskit.scan.runner import ScanOutcome, ScanRunner

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Everything the pipeline produced."""

    version: ResolvedVersion
    install: InstallResult
    binary: Path
    report_path: Path
    scan: Optional[ScanOutcome] = None
    exit_code: int = 0


def make_install_cache(config: ActionConfig) -> InstallCache:
    """Build the install cache selected by the configuration."""
    if not config.cache:
        return InstallCache(NullCacheBackend())
    return InstallCache(LocalCacheBackend(config.cache_dir))


class GitleaksAction:
    """
    Runs the whole pipeline for one ActionConfig.

    Example:
        >>> action = GitleaksAction(load_action_config())
        >>> result = action.run()
        >>> sys.exit(result.exit_code)
    """

    def __init__(
        self,
        config: ActionConfig,
        workflow: Optional[WorkflowContext] = None,
        platform: Optional[PlatformKey] = None,
        release_index: Optional[GitHubReleaseIndex] = None,
        installer: Optional[Installer] = None,
        scan_runner_factory=ScanRunner,
    ):
        self.config = config
        self.workflow = workflow or WorkflowContext.from_environment()
        self.platform = platform or detect_platform(config.os, config.arch)
        self.release_index = release_index
        self.installer = installer or Installer(
            self.platform,
            cache=make_install_cache(config),
            install_root=config.install_dir,
            workflow=self.workflow,
        )
        self.scan_runner_factory = scan_runner_factory

    def resolve(self) -> ResolvedVersion:
        """Resolve the configured version specifier."""
        return resolve_version(
            self.config.version,
            token=self.config.github_token,
            index=self.release_index,
        )

    def install(self, version: ResolvedVersion) -> tuple[InstallResult, Path]:
        """Install and verify gitleaks."""
        with self.workflow.group("Install gitleaks"):
            install = self.installer.install(version)

        with self.workflow.group("Installation check"):
            binary = verify_installation(version, workflow=self.workflow)

        return install, binary

    def scan(self, version: ResolvedVersion, report_path: Path) -> ScanOutcome:
        """Run gitleaks and publish its exit code."""
        runner = self.scan_runner_factory(
            version,
            report_path=report_path,
            config_path=self.config.config_path,
        )
        outcome = runner.run(self.config.source_path)
        self.workflow.set_output("exit-code", outcome.exit_code)
        return outcome

    def run(self) -> ActionResult:
        """
        Execute the pipeline.

        Returns:
            ActionResult whose exit_code is the process exit code to use

        Raises:
            LeaksKitError: On any fatal error
        """
        version = self.resolve()
        install, binary = self.install(version)

        report_path = report_path_for(self.config.install_dir)
        self.workflow.set_output("sarif", report_path)

        result = ActionResult(
            version=version, install=install, binary=binary, report_path=report_path
        )

        if not self.config.run:
            logger.debug("Scanning not requested")
            return result

        result.scan = self.scan(version, report_path)

        if result.scan.exit_code != 0:
            self.workflow.warning("gitleaks encountered leaks")
            if self.config.fail_on_error:
                result.exit_code = result.scan.exit_code
        else:
            self.workflow.notice("Your code is good to go!")

        return result


def run_action(config: ActionConfig, workflow: Optional[WorkflowContext] = None) -> int:
    """Run the pipeline and return the process exit code."""
    return GitleaksAction(config, workflow=workflow).run().exit_code
