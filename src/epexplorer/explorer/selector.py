"""Diversified selection of plugin usages.

Instead of a single top-N by downloads, the result mixes the most popular,
the most recently updated and verified-vendor plugins, then fills up with
the remaining most downloaded ones. Each stage only considers plugins not
picked by an earlier stage.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Set

from epexplorer.core.models import DEFAULT_LIMITS, PluginUsage, SelectionLimits


def _by_downloads(usage: PluginUsage) -> int:
    return usage.downloads


def _by_update_date(usage: PluginUsage) -> int:
    return usage.last_update_date


def _take(
    pool: Sequence[PluginUsage],
    selected_ids: Set[str],
    key: Callable[[PluginUsage], int],
    limit: int,
    predicate: Optional[Callable[[PluginUsage], bool]] = None,
) -> List[PluginUsage]:
    """Pick up to limit unselected usages, highest key first.

    sorted() is stable, so ties keep pool order.
    """
    if limit <= 0:
        return []

    candidates = [
        usage for usage in pool
        if usage.id not in selected_ids and (predicate is None or predicate(usage))
    ]
    picked = sorted(candidates, key=key, reverse=True)[:limit]
    selected_ids.update(usage.id for usage in picked)
    return picked


def diversify(
    pool: Sequence[PluginUsage],
    limits: SelectionLimits = DEFAULT_LIMITS,
) -> List[PluginUsage]:
    """Select a bounded, criteria-balanced subset of a usage pool.

    Stages, in output order:
    1. most downloaded (limits.popular)
    2. most recently updated (limits.recent)
    3. verified vendors by downloads (limits.verified)
    4. remaining slots up to limits.max_results by downloads

    Args:
        pool: Deduplicated usages in insertion order.
        limits: Per-stage caps.

    Returns:
        At most limits.max_results usages with distinct ids.
    """
    selected_ids: Set[str] = set()
    result: List[PluginUsage] = []

    stages = [
        (_by_downloads, limits.popular, None),
        (_by_update_date, limits.recent, None),
        (_by_downloads, limits.verified, lambda usage: usage.verified),
    ]
    for key, cap, predicate in stages:
        room = limits.max_results - len(result)
        result.extend(_take(pool, selected_ids, key, min(cap, room), predicate))

    remaining = limits.max_results - len(result)
    result.extend(_take(pool, selected_ids, _by_downloads, remaining))

    return result
