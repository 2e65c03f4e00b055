"""Extension-point discovery and diversified ranking."""

from epexplorer.explorer.aggregator import collect
from epexplorer.explorer.index import fetch_all, search
from epexplorer.explorer.links import build_search_url
from epexplorer.explorer.selector import diversify

__all__ = [
    "build_search_url",
    "collect",
    "diversify",
    "fetch_all",
    "search",
]
