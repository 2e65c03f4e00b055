"""Plugin search request construction for the Marketplace GraphQL API."""

from __future__ import annotations

import json

from epexplorer.core.models import SortKey

PLUGIN_FIELDS = (
    "id, name, downloads, sourceCodeUrl, lastUpdateDate, "
    "organization { id, verified }"
)


def build_plugins_query(
    extension_point: str,
    sort_key: SortKey,
    page_size: int = 24,
    family: str = "intellij",
) -> str:
    """Build the GraphQL query selecting plugins that implement an extension point.

    Only plugins with published source code are requested. String values are
    emitted through json.dumps, which produces valid GraphQL string literals.

    Args:
        extension_point: Fully qualified extension-point name.
        sort_key: Sort order of the result page.
        page_size: Number of plugins to request.
        family: Marketplace product family filter.

    Returns:
        Single-line GraphQL query.
    """
    filters = [
        ("fields.extensionPoints", extension_point),
        ("hasSource", "true"),
        ("family", family),
    ]
    filter_text = ", ".join(
        f"{{ field: {json.dumps(name)}, value: {json.dumps(value)} }}"
        for name, value in filters
    )

    return (
        f"{{ plugins(search: {{ max: {page_size}, offset: 0, filters: [ {filter_text} ], "
        f"sortBy: {sort_key.value} }}) {{ total, plugins {{ {PLUGIN_FIELDS} }} }} }}"
    )


def build_request_body(
    extension_point: str,
    sort_key: SortKey,
    page_size: int = 24,
    family: str = "intellij",
) -> bytes:
    """Encode the JSON POST body for the plugin search endpoint."""
    query = build_plugins_query(extension_point, sort_key, page_size=page_size, family=family)
    return json.dumps({"query": query}).encode("utf-8")
