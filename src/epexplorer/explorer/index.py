"""Extension-point index retrieval and search.

The index is fetched fresh on every call; a failed or malformed fetch is
reported to callers as an empty index.
"""

from __future__ import annotations

from typing import Any, Set

from epexplorer.core.logging import get_logger
from epexplorer.marketplace.base import MarketplaceError, MarketplaceSource

LOGGER = get_logger(__name__)

# Field of each registry entry holding the extension-point name
NAME_FIELD = "implementationName"


def parse_index(payload: Any) -> Set[str]:
    """Extract extension-point names from a registry payload.

    Entries without a name, or with a null name, are skipped. Duplicates
    collapse.

    Raises:
        MarketplaceError: If the payload is not a list of objects or a name
            is not a string.
    """
    if not isinstance(payload, list):
        raise MarketplaceError(
            f"extension point index must be a JSON array, got {type(payload).__name__}"
        )

    names: Set[str] = set()
    for entry in payload:
        if not isinstance(entry, dict):
            raise MarketplaceError(
                f"extension point entry must be an object, got {type(entry).__name__}"
            )
        name = entry.get(NAME_FIELD)
        if name is None:
            continue
        if not isinstance(name, str):
            raise MarketplaceError(f"'{NAME_FIELD}' must be a string, got {name!r}")
        if name:
            names.add(name)
    return names


def fetch_all(source: MarketplaceSource) -> Set[str]:
    """Fetch every extension-point name known to the registry.

    Args:
        source: Marketplace fetch capability.

    Returns:
        Set of names, empty if the registry could not be read.
    """
    try:
        names = parse_index(source.fetch_index())
    except MarketplaceError as e:
        LOGGER.warning(f"Failed to fetch extension point index: {e}")
        return set()

    LOGGER.debug(f"Fetched {len(names)} extension points")
    return names


def search(source: MarketplaceSource, query: str) -> Set[str]:
    """Return index entries containing query, compared case-insensitively."""
    needle = query.casefold()
    return {name for name in fetch_all(source) if needle in name.casefold()}
