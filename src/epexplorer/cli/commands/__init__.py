"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from epexplorer.config.models import ExplorerConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, config: "ExplorerConfig | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Optional explorer configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# ruff: noqa: E402
from epexplorer.cli.commands.serve import ServeCommand
from epexplorer.cli.commands.status import StatusCommand

__all__ = [
    "Command",
    "ServeCommand",
    "StatusCommand",
]
