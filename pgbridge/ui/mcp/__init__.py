"""MCP stdio server."""
