"""Plain-text formatting of explorer results for AI agents.

Every tool answers with a single text block. Failures are expressed as
fixed messages rather than errors, so a tool call always yields readable
output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from epexplorer.core.models import PluginUsage

LIST_TOOL = "intellij_extension_list"
SEARCH_TOOL = "intellij_extension_search"
DETAIL_TOOL = "intellij_extension_detail"

EMPTY_QUERY_MESSAGE = "error: search keyword must not be empty."
NO_RESULTS_MESSAGE = "error: no extension found."
NO_IMPLEMENTATIONS_MESSAGE = "No public implementations found with source code available."


@dataclass
class ImplementationLink:
    """A selected plugin usage with its optional code search link."""

    usage: PluginUsage
    search_url: Optional[str] = None


class TextFormatter:
    """Renders explorer results as text."""

    def format_names(self, names: Iterable[str]) -> str:
        """Newline-join extension-point names in sorted order."""
        return "\n".join(sorted(names))

    def format_search(self, matches: Iterable[str]) -> str:
        """Format search matches, or the no-results message."""
        text = self.format_names(matches)
        return text if text else NO_RESULTS_MESSAGE

    def format_not_found(self, extension_point: str) -> str:
        return (
            f"Extension point '{extension_point}' not found. "
            f"Use '{SEARCH_TOOL}' to find available extension points."
        )

    def format_detail(self, extension_point: str, links: List[ImplementationLink]) -> str:
        """Render the implementations of an extension point.

        Args:
            extension_point: Extension-point name used as the heading.
            links: Selected usages in display order.

        Returns:
            Markdown-style text with one line per implementation.
        """
        lines = [f"# {extension_point}", "", "## Plugin Implementations:"]

        for link in links:
            line = f' - "{link.usage.name}" Source: {link.usage.source_code_url}'
            if link.search_url:
                line += f" Search: {link.search_url}"
            lines.append(line)

        if not links:
            lines.append(NO_IMPLEMENTATIONS_MESSAGE)

        return "\n".join(lines) + "\n"
