"""CLI runner orchestration.

This module handles command dispatch and execution for the epexplorer CLI.
"""

from __future__ import annotations

from argparse import Namespace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Iterable, Optional

from epexplorer.cli.arguments import build_parser
from epexplorer.cli.commands.serve import ServeCommand
from epexplorer.cli.commands.status import StatusCommand
from epexplorer.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from epexplorer.config import ExplorerConfig, load_config
from epexplorer.config.loader import ConfigError
from epexplorer.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get epexplorer version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("epexplorer")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from epexplorer import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        """Initialize CLIRunner with parser and commands."""
        self.parser = build_parser()
        self._version = get_version()
        self.serve_cmd = ServeCommand(version=self._version)
        self.status_cmd = StatusCommand(version=self._version)

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        # Handle --help specially to return 0
        if argv is not None:
            argv_list = list(argv)
            if "--help" in argv_list or "-h" in argv_list:
                self.parser.print_help()
                return EXIT_SUCCESS
        else:
            argv_list = None

        args = self.parser.parse_args(argv_list)

        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)

        if command == "serve":
            return self._run_with_config(self.serve_cmd.execute, args)
        elif command == "status":
            return self._run_with_config(self.status_cmd.execute, args)
        else:
            # No command specified - show help
            self.parser.print_help()
            return EXIT_SUCCESS

    def _load_config(self, args: Namespace) -> Optional[ExplorerConfig]:
        """Load configuration for a command, logging config errors.

        Returns:
            Loaded configuration, or None if it could not be loaded.
        """
        project_root = Path(getattr(args, "path", ".")).resolve()
        try:
            return load_config(
                project_root=project_root,
                cli_config_path=getattr(args, "config", None),
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return None

    def _run_with_config(self, execute, args: Namespace) -> int:
        config = self._load_config(args)
        if config is None:
            return EXIT_INVALID_USAGE
        return execute(args, config)
