"""
pgbridge — MCP bridge between an IDE and a PostgreSQL code-generation service.

Exposes integration tools over stdio, asks the remote service for a plan and
its generated files, then applies those files to the local project tree.
"""

__version__ = "0.1.0"
