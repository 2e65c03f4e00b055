"""MCP tool executor for extension-point exploration.

Composes index retrieval, usage aggregation, diversified selection and
link building into the three text-returning tool operations.
"""

from __future__ import annotations

from typing import Optional

from epexplorer.config.models import ExplorerConfig
from epexplorer.core.logging import get_logger
from epexplorer.explorer import aggregator, index, selector
from epexplorer.explorer.links import build_search_url
from epexplorer.marketplace.base import MarketplaceSource
from epexplorer.marketplace.client import HttpMarketplaceSource
from epexplorer.mcp.formatter import (
    EMPTY_QUERY_MESSAGE,
    ImplementationLink,
    TextFormatter,
)

LOGGER = get_logger(__name__)


class ExplorerToolExecutor:
    """Executes explorer operations for MCP tools.

    Holds configuration and the fetch capability only; every call fetches
    fresh data and keeps nothing afterwards.
    """

    def __init__(
        self,
        config: Optional[ExplorerConfig] = None,
        source: Optional[MarketplaceSource] = None,
    ):
        """Initialize ExplorerToolExecutor.

        Args:
            config: Explorer configuration. Defaults are used when omitted.
            source: Marketplace fetch capability. Defaults to HTTP access
                configured from config.marketplace.
        """
        self.config = config or ExplorerConfig()
        self.source = source or HttpMarketplaceSource(self.config.marketplace)
        self.formatter = TextFormatter()

    def list_extensions(self) -> str:
        """Return every known extension point, one per line."""
        return self.formatter.format_names(index.fetch_all(self.source))

    def search_extensions(self, query: str) -> str:
        """Return extension points containing query, one per line.

        Args:
            query: Case-insensitive substring. Blank queries are rejected.
        """
        if not query or not query.strip():
            return EMPTY_QUERY_MESSAGE

        return self.formatter.format_search(index.search(self.source, query))

    def extension_detail(self, extension_point: str) -> str:
        """Return a diversified list of plugins implementing an extension point.

        Args:
            extension_point: Fully qualified name, matched case-insensitively
                against the index.
        """
        canonical = self._resolve(extension_point)
        if canonical is None:
            return self.formatter.format_not_found(extension_point)

        pool = aggregator.collect(self.source, canonical)
        selected = selector.diversify(pool, self.config.selection.to_limits())
        LOGGER.info(f"{canonical}: selected {len(selected)} of {len(pool)} plugins")

        links = [
            ImplementationLink(
                usage=usage,
                search_url=build_search_url(
                    usage.source_code_url,
                    canonical,
                    base_url=self.config.links.search_base_url,
                    path_globs=self.config.links.path_globs,
                ),
            )
            for usage in selected
        ]
        return self.formatter.format_detail(canonical, links)

    def _resolve(self, extension_point: str) -> Optional[str]:
        """Find the index spelling of an extension point, ignoring case."""
        if not extension_point:
            return None

        wanted = extension_point.casefold()
        for name in sorted(index.fetch_all(self.source)):
            if name.casefold() == wanted:
                return name
        return None
