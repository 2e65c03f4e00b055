"""Status command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import Optional

from epexplorer.cli.commands import Command
from epexplorer.cli.exit_codes import EXIT_SUCCESS
from epexplorer.config.models import ExplorerConfig


class StatusCommand(Command):
    """Shows version and the effective configuration."""

    def __init__(self, version: str):
        """Initialize StatusCommand.

        Args:
            version: Current epexplorer version string.
        """
        self._version = version

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: Optional[ExplorerConfig] = None) -> int:
        """Execute the status command.

        Args:
            args: Parsed command-line arguments.
            config: Explorer configuration.

        Returns:
            Exit code (always 0 for status).
        """
        config = config or ExplorerConfig()
        marketplace = config.marketplace
        selection = config.selection

        print(f"epexplorer version: {self._version}")
        if config._config_sources:
            print(f"Config: {', '.join(config._config_sources)}")
        else:
            print("Config: built-in defaults")
        print()

        print("Marketplace:")
        print(f"  Extension point index: {marketplace.index_url}")
        print(f"  Plugin search: {marketplace.search_url}")
        print(f"  Family: {marketplace.family}")
        print(f"  Page size: {marketplace.page_size}")
        print(f"  Timeout: {marketplace.timeout:g}s")
        print()

        print("Selection:")
        print(f"  Most downloaded: {selection.popular}")
        print(f"  Recently updated: {selection.recent}")
        print(f"  Verified vendors: {selection.verified}")
        print(f"  Max results: {selection.max_results}")
        print()

        print(f"Code search: {config.links.search_base_url} ({', '.join(config.links.path_globs)})")

        return EXIT_SUCCESS
