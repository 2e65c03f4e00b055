"""Plugin usage aggregation.

Two Marketplace queries for the same extension point, one ranked by
downloads and one by last update, are merged into a single deduplicated
pool. The second ordering surfaces actively maintained plugins that the
most-downloaded page would miss.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from epexplorer.core.logging import get_logger
from epexplorer.core.models import PluginUsage, SortKey
from epexplorer.marketplace.base import MarketplaceError, MarketplaceSource

LOGGER = get_logger(__name__)

# Query order matters: values of the first occurrence of a plugin are kept
QUERY_ORDER = (SortKey.DOWNLOADS, SortKey.UPDATE_DATE)

UNKNOWN_PLUGIN_NAME = "Unknown"


def _get(record: Dict[str, Any], key: str, default: Any) -> Any:
    value = record.get(key)
    return default if value is None else value


def parse_usage(record: Any) -> Optional[PluginUsage]:
    """Convert one plugin record to a PluginUsage.

    Returns None for records without an id.

    Raises:
        MarketplaceError: If the record is not an object or a field has an
            unusable type.
    """
    if not isinstance(record, dict):
        raise MarketplaceError(f"plugin record must be an object, got {type(record).__name__}")

    plugin_id = record.get("id")
    if plugin_id is None:
        return None

    organization = record.get("organization")
    verified = isinstance(organization, dict) and organization.get("verified") is True

    try:
        return PluginUsage(
            id=str(plugin_id),
            name=str(_get(record, "name", UNKNOWN_PLUGIN_NAME)),
            downloads=int(_get(record, "downloads", 0)),
            source_code_url=str(_get(record, "sourceCodeUrl", "")),
            verified=verified,
            last_update_date=int(_get(record, "lastUpdateDate", 0)),
        )
    except (TypeError, ValueError) as e:
        raise MarketplaceError(f"invalid plugin record {plugin_id!r}: {e}") from e


def parse_usages(payload: Any) -> List[PluginUsage]:
    """Extract plugin usages from a plugin search response.

    A response without data.plugins.plugins carries no usages. Records
    without an id are dropped.

    Raises:
        MarketplaceError: If the response or one of its records is malformed.
    """
    if not isinstance(payload, dict):
        raise MarketplaceError(f"plugin search response must be an object, got {type(payload).__name__}")

    data = payload.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("plugins"), dict):
        return []

    records = data["plugins"].get("plugins")
    if records is None:
        return []
    if not isinstance(records, list):
        raise MarketplaceError("'plugins' must be a JSON array")

    usages = []
    for record in records:
        usage = parse_usage(record)
        if usage is not None:
            usages.append(usage)
    return usages


def fetch_usages(
    source: MarketplaceSource, extension_point: str, sort_key: SortKey
) -> List[PluginUsage]:
    """Run one ranked plugin query; a failed query yields no usages."""
    try:
        usages = parse_usages(source.fetch_usages(extension_point, sort_key))
    except MarketplaceError as e:
        LOGGER.warning(f"Plugin search for {extension_point} ({sort_key.value}) failed: {e}")
        return []

    LOGGER.debug(f"Plugin search for {extension_point} ({sort_key.value}) returned {len(usages)} plugins")
    return usages


def merge_usages(*batches: Iterable[PluginUsage]) -> List[PluginUsage]:
    """Merge usage batches in order, keeping the first occurrence of each id.

    Usages without a source code URL are dropped.
    """
    pool: Dict[str, PluginUsage] = {}
    for batch in batches:
        for usage in batch:
            if usage.id in pool or not usage.source_code_url:
                continue
            pool[usage.id] = usage
    return list(pool.values())


def collect(source: MarketplaceSource, extension_point: str) -> List[PluginUsage]:
    """Collect the deduplicated pool of plugins implementing an extension point.

    Args:
        source: Marketplace fetch capability.
        extension_point: Fully qualified extension-point name.

    Returns:
        Usages from the downloads-ranked query followed by those only found
        by the update-ranked query, in response order.
    """
    batches = [fetch_usages(source, extension_point, sort_key) for sort_key in QUERY_ORDER]
    return merge_usages(*batches)
