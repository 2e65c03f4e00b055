from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from epexplorer.core.models import SortKey


class MarketplaceError(Exception):
    """Error talking to the Marketplace or reading its responses."""

    pass


class MarketplaceSource(ABC):
    """Fetch capability for the two Marketplace endpoints.

    Implementations return decoded JSON payloads and raise MarketplaceError
    on transport, status or decoding failures. Interpretation of the
    payloads belongs to the explorer functions, so they can be driven by
    canned responses.
    """

    @abstractmethod
    def fetch_index(self) -> Any:
        """Return the decoded extension-point registry payload."""

    @abstractmethod
    def fetch_usages(self, extension_point: str, sort_key: SortKey) -> Any:
        """Return the decoded plugin search payload for an extension point.

        Args:
            extension_point: Fully qualified extension-point name.
            sort_key: Marketplace sort order for this query.
        """
