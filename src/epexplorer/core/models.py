from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SortKey(str, Enum):
    """Sort orders understood by the Marketplace plugin search."""

    DOWNLOADS = "DOWNLOADS"
    UPDATE_DATE = "UPDATE_DATE"


@dataclass(frozen=True)
class PluginUsage:
    """A Marketplace plugin that declares an implementation of an extension point."""

    id: str
    name: str
    downloads: int
    source_code_url: str
    verified: bool = False
    last_update_date: int = 0


@dataclass(frozen=True)
class SelectionLimits:
    """Per-stage caps for diversified selection.

    The defaults (3 popular, 3 recent, 3 verified, 13 overall) are hand-picked
    values kept for compatibility with existing consumers of the tool output.
    """

    popular: int = 3
    recent: int = 3
    verified: int = 3
    max_results: int = 13


DEFAULT_LIMITS = SelectionLimits()
