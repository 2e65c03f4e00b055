"""Configuration loading for epexplorer."""

from epexplorer.config.loader import ConfigError, load_config
from epexplorer.config.models import (
    ExplorerConfig,
    LinksConfig,
    MarketplaceConfig,
    SelectionConfig,
)

__all__ = [
    "ConfigError",
    "ExplorerConfig",
    "LinksConfig",
    "MarketplaceConfig",
    "SelectionConfig",
    "load_config",
]
