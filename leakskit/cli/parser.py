"""
leakskit CLI argument parser.

This module implements the command-line interface for leakskit using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from leakskit.core.exceptions import LeaksKitError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("leakskit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """leakskit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="leakskit",
            description="leakskit - install and run gitleaks in CI pipelines",
            epilog='Use "leakskit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"leakskit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config-file",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./leakskit.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_run_command(subparsers)
        self._add_install_command(subparsers)
        self._add_locate_command(subparsers)

        return parser

    def _add_install_options(self, parser: argparse.ArgumentParser):
        """Options shared by commands that install gitleaks."""
        parser.add_argument(
            "--version",
            dest="gitleaks_version",
            metavar="VERSION",
            help='gitleaks version to install (e.g. "8.18.0" or "latest")',
        )
        parser.add_argument(
            "--github-token",
            metavar="TOKEN",
            help="GitHub token used to look up the latest release",
        )
        parser.add_argument(
            "--no-cache",
            dest="cache",
            action="store_const",
            const="false",
            help="Do not restore or save the install cache",
        )
        parser.add_argument(
            "--cache-dir",
            metavar="PATH",
            help=(
                "Install cache directory (default: ~/.leakskit/cache). Hosted "
                "runners discard it after each job, so point this at a "
                "persisted directory to get cache hits"
            ),
        )
        parser.add_argument(
            "--install-dir",
            metavar="PATH",
            help="Parent directory for installs and reports (default: temp dir)",
        )
        self._add_platform_options(parser)

    def _add_platform_options(self, parser: argparse.ArgumentParser):
        parser.add_argument(
            "--os",
            choices=["linux", "darwin", "windows"],
            metavar="OS",
            help="Target OS (linux|darwin|windows) [default: host]",
        )
        parser.add_argument(
            "--arch",
            choices=["x32", "x64", "arm", "arm64"],
            metavar="ARCH",
            help="Target architecture (x32|x64|arm|arm64) [default: host]",
        )

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Install gitleaks and scan a repository",
            description="Install, verify and run gitleaks, publishing its outputs",
        )
        self._add_install_options(parser)
        parser.add_argument(
            "--config-path",
            metavar="PATH",
            help="gitleaks configuration file (default: auto-discovered)",
        )
        parser.add_argument(
            "--path",
            metavar="PATH",
            help="Directory to scan (default: current directory)",
        )
        run_group = parser.add_mutually_exclusive_group()
        run_group.add_argument(
            "--run",
            dest="run",
            action="store_const",
            const="true",
            help="Scan after installing (default)",
        )
        run_group.add_argument(
            "--no-run",
            dest="run",
            action="store_const",
            const="false",
            help="Install and verify only, skip the scan",
        )
        parser.add_argument(
            "--fail-on-error",
            dest="fail_on_error",
            action="store_const",
            const="true",
            help="Exit with gitleaks' exit code when leaks are found",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install and verify gitleaks",
            description="Install gitleaks, put it on PATH and verify it runs",
        )
        self._add_install_options(parser)

    def _add_locate_command(self, subparsers):
        """Add 'locate' subcommand."""
        parser = subparsers.add_parser(
            "locate",
            help="Print the download URL of a gitleaks release",
            description="Resolve the release artifact without downloading it",
        )
        parser.add_argument(
            "--version",
            dest="gitleaks_version",
            metavar="VERSION",
            help='gitleaks version (e.g. "8.18.0" or "latest")',
        )
        parser.add_argument(
            "--github-token",
            metavar="TOKEN",
            help="GitHub token used to look up the latest release",
        )
        self._add_platform_options(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except LeaksKitError as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "run": "leakskit.cli.commands.run",
            "install": "leakskit.cli.commands.install",
            "locate": "leakskit.cli.commands.locate",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
