"""JetBrains Marketplace access for epexplorer."""

from epexplorer.marketplace.base import MarketplaceError, MarketplaceSource
from epexplorer.marketplace.client import HttpMarketplaceSource

__all__ = [
    "HttpMarketplaceSource",
    "MarketplaceError",
    "MarketplaceSource",
]
