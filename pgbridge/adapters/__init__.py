"""Adapters — bindings for external services.

Public re-exports for convenient access.
"""

from pgbridge.adapters.generation_client import GenerationClient

__all__ = [
    "GenerationClient",
]
