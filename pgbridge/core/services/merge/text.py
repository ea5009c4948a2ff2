"""
Config-text merges — properties, YAML and friends.

Plain append under a ``#`` marker.  Keys are not de-duplicated: a key
defined twice stays defined twice, and the later definition usually wins
in Spring's property loading.
"""

from __future__ import annotations

from pgbridge.core.services.merge.base import MARKER_TEXT, SourceMerger, append_with_marker

COMMENT_MARKER = f"# {MARKER_TEXT}"

CONFIG_EXTENSIONS: tuple[str, ...] = (
    ".properties", ".yml", ".yaml", ".conf", ".cfg", ".ini", ".env",
)


class ConfigAppendMerger(SourceMerger):
    name = "config-append"

    def merge(self, existing: str, new: str, file_path: str) -> str:
        return append_with_marker(existing, new, COMMENT_MARKER)
