"""MCP server implementation for epexplorer.

Exposes extension-point exploration tools to AI agents via the Model
Context Protocol.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from epexplorer.config.models import ExplorerConfig
from epexplorer.core.logging import get_logger
from epexplorer.marketplace.base import MarketplaceSource
from epexplorer.mcp.formatter import DETAIL_TOOL, LIST_TOOL, SEARCH_TOOL
from epexplorer.mcp.tools import ExplorerToolExecutor

LOGGER = get_logger(__name__)


class ExplorerMCPServer:
    """MCP server exposing extension-point tools to AI agents."""

    def __init__(
        self,
        config: Optional[ExplorerConfig] = None,
        source: Optional[MarketplaceSource] = None,
    ):
        """Initialize ExplorerMCPServer.

        Args:
            config: Explorer configuration.
            source: Optional Marketplace fetch capability, mainly for tests.
        """
        self.config = config or ExplorerConfig()
        self.executor = ExplorerToolExecutor(self.config, source=source)
        self.server = Server("epexplorer")
        self._register_tools()

    def _register_tools(self):
        """Register MCP tools."""

        @self.server.list_tools()
        async def list_tools() -> List[Tool]:
            """List available tools."""
            return [
                Tool(
                    name=LIST_TOOL,
                    description=(
                        "Lists all available IntelliJ Platform extension points from the "
                        "JetBrains Marketplace.\n\n"
                        "USE THIS TOOL WHEN:\n"
                        "- You need to discover what extension points the IntelliJ Platform offers\n"
                        "- You are starting plugin development and need to explore extensibility options\n\n"
                        "RETURNS: One extension point name per line "
                        "(e.g. 'com.intellij.completion.contributor').\n\n"
                        f"NEXT STEPS: Use '{SEARCH_TOOL}' to filter by keyword or "
                        f"'{DETAIL_TOOL}' to get implementation examples."
                    ),
                    inputSchema={
                        "type": "object",
                        "properties": {},
                    },
                ),
                Tool(
                    name=SEARCH_TOOL,
                    description=(
                        "Searches IntelliJ Platform extension points by keyword "
                        "(case-insensitive substring match).\n\n"
                        "EXAMPLES:\n"
                        "- 'contributor' finds all contributor-based extension points\n"
                        "- 'completion' finds code completion related extension points\n\n"
                        f"NEXT STEPS: Use '{DETAIL_TOOL}' with a specific name to see "
                        "real-world implementations with source code links."
                    ),
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "search": {
                                "type": "string",
                                "description": (
                                    "Keyword to search for in extension point names. "
                                    "Examples: 'contributor', 'completion.contributor', "
                                    "'action', 'inspection'"
                                ),
                            },
                        },
                        "required": ["search"],
                    },
                ),
                Tool(
                    name=DETAIL_TOOL,
                    description=(
                        "Retrieves real-world implementations of an IntelliJ Platform "
                        "extension point from open source plugins.\n\n"
                        "PROVIDES:\n"
                        "- A mix of popular, recently updated and verified-vendor plugins\n"
                        "- Links to their source repositories\n"
                        "- GitHub code search links scoped to each repository\n\n"
                        "EXAMPLE: intellij_extension_detail('com.intellij.psi.referenceContributor')"
                    ),
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "extension": {
                                "type": "string",
                                "description": (
                                    "The fully qualified extension point name, "
                                    "e.g. 'com.intellij.completion.contributor'"
                                ),
                            },
                        },
                        "required": ["extension"],
                    },
                ),
            ]

        @self.server.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            """Handle tool calls."""
            arguments = arguments or {}
            loop = asyncio.get_running_loop()

            try:
                if name == LIST_TOOL:
                    text = await loop.run_in_executor(None, self.executor.list_extensions)
                elif name == SEARCH_TOOL:
                    text = await loop.run_in_executor(
                        None, self.executor.search_extensions, str(arguments.get("search") or "")
                    )
                elif name == DETAIL_TOOL:
                    text = await loop.run_in_executor(
                        None, self.executor.extension_detail, str(arguments.get("extension") or "")
                    )
                else:
                    text = f"error: Unknown tool: {name}"
            except Exception as e:
                LOGGER.error(f"Tool {name} failed: {e}")
                text = f"error: {e}"

            return [TextContent(type="text", text=text)]

    async def run(self):
        """Run the MCP server over stdio."""
        LOGGER.info("epexplorer MCP server starting")

        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
