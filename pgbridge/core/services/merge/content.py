"""
Content merge dispatch.

    replace → new content verbatim
    append  → existing + blank line + new
    smart   → per-format merger from the registry

Pure: strings in, string out.
"""

from __future__ import annotations

import logging

from pgbridge.core.models.changes import MergeStrategy
from pgbridge.core.services.merge.base import APPEND_SEPARATOR, MergerRegistry
from pgbridge.core.services.merge.java import RegexJavaMerger
from pgbridge.core.services.merge.text import CONFIG_EXTENSIONS, ConfigAppendMerger
from pgbridge.core.services.merge.xml import PomMerger, XmlAppendMerger

logger = logging.getLogger(__name__)


def build_default_registry() -> MergerRegistry:
    """Registry with the built-in mergers."""
    registry = MergerRegistry()
    registry.register(RegexJavaMerger(), extensions=(".java",))
    registry.register(PomMerger(), filenames=("pom.xml",))
    registry.register(XmlAppendMerger(), extensions=(".xml",))
    registry.register(ConfigAppendMerger(), extensions=CONFIG_EXTENSIONS)
    return registry


DEFAULT_REGISTRY = build_default_registry()


def merge_content(
    existing: str,
    new: str,
    file_path: str,
    strategy: MergeStrategy | str = MergeStrategy.SMART,
    *,
    registry: MergerRegistry | None = None,
) -> str:
    """Produce the content to write for a ``modify`` of an existing file.

    Args:
        existing: Current file content.
        new: Generated content.
        file_path: Target path; only its name/extension is used.
        strategy: smart / append / replace.
        registry: Merger registry (default: built-in mergers).

    Raises:
        ValueError: Unknown strategy name.
    """
    strategy = MergeStrategy(strategy)

    if strategy is MergeStrategy.REPLACE:
        return new
    if strategy is MergeStrategy.APPEND:
        return existing + APPEND_SEPARATOR + new

    merger = (registry or DEFAULT_REGISTRY).for_path(file_path)
    logger.debug("Smart merge of %s via %s", file_path, merger.name)
    return merger.merge(existing, new, file_path)
