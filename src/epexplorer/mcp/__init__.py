"""MCP integration for epexplorer."""
