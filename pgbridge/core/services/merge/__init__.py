"""
Merge — reconcile generated content with files that already exist.

    from pgbridge.core.services.merge import merge_content
"""

from pgbridge.core.services.merge.base import MergerRegistry, SourceMerger
from pgbridge.core.services.merge.content import (
    DEFAULT_REGISTRY,
    build_default_registry,
    merge_content,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "MergerRegistry",
    "SourceMerger",
    "build_default_registry",
    "merge_content",
]
