"""User-facing entry points (CLI, MCP)."""
