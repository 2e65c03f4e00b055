"""Command-line interface for epexplorer."""

from __future__ import annotations

from typing import Iterable, Optional

from epexplorer.cli.runner import CLIRunner


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entry point."""
    return CLIRunner().run(argv)

