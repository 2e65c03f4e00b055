"""Shared fixtures for epexplorer tests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from epexplorer.core.models import PluginUsage, SortKey
from epexplorer.marketplace.base import MarketplaceError, MarketplaceSource


class FakeMarketplaceSource(MarketplaceSource):
    """MarketplaceSource serving canned payloads.

    A payload that is an exception instance is raised instead of returned.
    """

    def __init__(
        self,
        index: Any = None,
        usages: Optional[Dict[SortKey, Any]] = None,
    ):
        self.index = [] if index is None else index
        self.usages = usages or {}
        self.index_calls = 0
        self.usage_calls: List[Tuple[str, SortKey]] = []

    def fetch_index(self) -> Any:
        self.index_calls += 1
        if isinstance(self.index, Exception):
            raise self.index
        return self.index

    def fetch_usages(self, extension_point: str, sort_key: SortKey) -> Any:
        self.usage_calls.append((extension_point, sort_key))
        payload = self.usages.get(sort_key, plugins_payload([]))
        if isinstance(payload, Exception):
            raise payload
        return payload


def index_payload(*names: Optional[str]) -> List[Dict[str, Any]]:
    """Build a registry payload with one entry per name."""
    return [{"implementationName": name, "interfaceName": "x"} for name in names]


def plugin_record(
    plugin_id: Any,
    name: Optional[str] = "Plugin",
    downloads: Optional[int] = 0,
    source: Optional[str] = "https://github.com/acme/plugin",
    updated: Optional[int] = 0,
    verified: Optional[bool] = None,
) -> Dict[str, Any]:
    """Build one plugin search record."""
    record: Dict[str, Any] = {
        "id": plugin_id,
        "name": name,
        "downloads": downloads,
        "sourceCodeUrl": source,
        "lastUpdateDate": updated,
    }
    if verified is not None:
        record["organization"] = {"id": "org", "verified": verified}
    return record


def plugins_payload(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap plugin records in a plugin search response."""
    return {"data": {"plugins": {"total": len(records), "plugins": records}}}


def make_usage(
    plugin_id: str,
    downloads: int = 0,
    updated: int = 0,
    verified: bool = False,
    source: str = "https://github.com/acme/plugin",
) -> PluginUsage:
    return PluginUsage(
        id=plugin_id,
        name=f"Plugin {plugin_id}",
        downloads=downloads,
        source_code_url=source,
        verified=verified,
        last_update_date=updated,
    )


@pytest.fixture
def fake_source_class():
    """The canned-payload MarketplaceSource class."""
    return FakeMarketplaceSource


@pytest.fixture
def payloads():
    """Payload builders for registry and plugin search responses."""

    class Payloads:
        index = staticmethod(index_payload)
        record = staticmethod(plugin_record)
        plugins = staticmethod(plugins_payload)

    return Payloads


@pytest.fixture
def usage_factory():
    """Factory for PluginUsage instances."""
    return make_usage


@pytest.fixture
def failing_error() -> MarketplaceError:
    return MarketplaceError("connection refused")
