"""Configuration data models for epexplorer.

Defines typed configuration classes for the Marketplace endpoints,
diversified selection limits and source search links.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from epexplorer.core.models import DEFAULT_LIMITS, SelectionLimits

DEFAULT_INDEX_URL = "https://plugins.jetbrains.com/api/extension-points"
DEFAULT_SEARCH_URL = "https://plugins.jetbrains.com/api/search/graphql"
DEFAULT_CODE_SEARCH_URL = "https://github.com/search"
DEFAULT_PATH_GLOBS = ["*.java", "*.kt", "*.xml"]


@dataclass
class MarketplaceConfig:
    """Remote endpoints and request parameters for the JetBrains Marketplace."""

    index_url: str = DEFAULT_INDEX_URL
    search_url: str = DEFAULT_SEARCH_URL
    timeout: float = 10.0
    page_size: int = 24
    family: str = "intellij"
    user_agent: str = "epexplorer"


@dataclass
class SelectionConfig:
    """Stage caps for diversified selection of plugin usages."""

    popular: int = DEFAULT_LIMITS.popular
    recent: int = DEFAULT_LIMITS.recent
    verified: int = DEFAULT_LIMITS.verified
    max_results: int = DEFAULT_LIMITS.max_results

    def to_limits(self) -> SelectionLimits:
        """Convert to the immutable limits consumed by the selector."""
        return SelectionLimits(
            popular=self.popular,
            recent=self.recent,
            verified=self.verified,
            max_results=self.max_results,
        )


@dataclass
class LinksConfig:
    """Settings for source code search links."""

    search_base_url: str = DEFAULT_CODE_SEARCH_URL
    path_globs: List[str] = field(default_factory=lambda: list(DEFAULT_PATH_GLOBS))


@dataclass
class ExplorerConfig:
    """Complete epexplorer configuration.

    Built from YAML by the loader; every section falls back to defaults
    that target the public JetBrains Marketplace.
    """

    marketplace: MarketplaceConfig = field(default_factory=MarketplaceConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    links: LinksConfig = field(default_factory=LinksConfig)

    # Metadata (not from YAML)
    _config_sources: List[str] = field(default_factory=list)
