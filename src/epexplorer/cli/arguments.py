"""Argument parser construction for epexplorer CLI.

This module builds the argument parser with subcommands:
- epexplorer serve  - Run the MCP server over stdio
- epexplorer status - Show version and effective configuration
"""

from __future__ import annotations

import argparse
from pathlib import Path


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show epexplorer version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_config_options(parser: argparse.ArgumentParser) -> None:
    """Add configuration options shared by commands that load config."""
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="Path to a config file (default: .epexplorer.yml in the project directory).",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory searched for a config file (default: current directory).",
    )


def _build_serve_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'serve' subcommand parser."""
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run epexplorer as an MCP server.",
        description=(
            "Run epexplorer as an MCP server over stdio, exposing the "
            "extension point list, search and detail tools."
        ),
    )
    _add_config_options(serve_parser)


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    status_parser = subparsers.add_parser(
        "status",
        help="Show version and effective configuration.",
        description="Show the Marketplace endpoints and selection limits in use.",
    )
    _add_config_options(status_parser)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for epexplorer CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="epexplorer",
        description="epexplorer - IntelliJ Platform extension point explorer.",
        epilog=(
            "Examples:\n"
            "  epexplorer serve                  # Run the MCP server\n"
            "  epexplorer status                 # Show effective configuration\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )

    _build_serve_parser(subparsers)
    _build_status_parser(subparsers)

    return parser
