from __future__ import annotations

import logging
from typing import Optional

LOGGER_NAME = "epexplorer"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging level based on CLI flags.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - verbose → INFO
    - default → WARNING

    Records go to stderr, which keeps stdout free for the MCP stdio transport.
    """

    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``epexplorer`` hierarchy.

    Module names already inside the package are used as-is; any other name
    is nested below ``epexplorer``. Without a name the package logger is
    returned.
    """

    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
