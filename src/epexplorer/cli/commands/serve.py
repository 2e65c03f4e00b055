"""Serve command implementation."""

from __future__ import annotations

import asyncio
from argparse import Namespace
from typing import Optional

from epexplorer.cli.commands import Command
from epexplorer.cli.exit_codes import EXIT_SUCCESS
from epexplorer.config.models import ExplorerConfig
from epexplorer.core.logging import get_logger

LOGGER = get_logger(__name__)


class ServeCommand(Command):
    """Runs the MCP server over stdio until the client disconnects."""

    def __init__(self, version: str):
        """Initialize ServeCommand.

        Args:
            version: Current epexplorer version string.
        """
        self._version = version

    @property
    def name(self) -> str:
        """Command identifier."""
        return "serve"

    def execute(self, args: Namespace, config: Optional[ExplorerConfig] = None) -> int:
        """Execute the serve command.

        Args:
            args: Parsed command-line arguments.
            config: Explorer configuration.

        Returns:
            Exit code.
        """
        from epexplorer.mcp.server import ExplorerMCPServer

        server = ExplorerMCPServer(config or ExplorerConfig())
        LOGGER.info(f"Starting epexplorer {self._version} MCP server")

        try:
            asyncio.run(server.run())
        except KeyboardInterrupt:
            LOGGER.info("MCP server stopped")

        return EXIT_SUCCESS
