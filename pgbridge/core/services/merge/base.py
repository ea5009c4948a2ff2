"""
Merger interface and registry.

A ``SourceMerger`` turns (existing, new) text into the text to write for
one file format.  The registry picks a merger by exact file name first,
then by extension, then falls back to plain append.  Swapping in a
parser-backed merger is a ``registry.register(...)`` call; the engine
never knows which implementation ran.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePosixPath

MARKER_TEXT = "Added by PostgreSQL integration"

# Separator used by the plain "append" strategy and the unknown-type fallback
APPEND_SEPARATOR = "\n\n"


def append_with_marker(existing: str, new: str, marker: str) -> str:
    """``existing`` + blank line + ``marker`` line + ``new``."""
    return f"{existing.rstrip()}\n\n{marker}\n{new}"


class SourceMerger(ABC):
    """Format-specific smart merge."""

    #: Short identifier, shown in debug logs.
    name = "merger"

    @abstractmethod
    def merge(self, existing: str, new: str, file_path: str) -> str:
        """Return the content to write. Must be pure (no I/O)."""


class PlainAppendMerger(SourceMerger):
    """Unknown file types: blank-line separated append."""

    name = "plain-append"

    def merge(self, existing: str, new: str, file_path: str) -> str:
        return existing + APPEND_SEPARATOR + new


class MergerRegistry:
    """Maps file names and extensions to mergers."""

    def __init__(self, fallback: SourceMerger | None = None) -> None:
        self._by_name: dict[str, SourceMerger] = {}
        self._by_ext: dict[str, SourceMerger] = {}
        self.fallback = fallback or PlainAppendMerger()

    def register(
        self,
        merger: SourceMerger,
        *,
        extensions: tuple[str, ...] = (),
        filenames: tuple[str, ...] = (),
    ) -> None:
        for ext in extensions:
            self._by_ext[ext.lower() if ext.startswith(".") else f".{ext.lower()}"] = merger
        for fname in filenames:
            self._by_name[fname.lower()] = merger

    def for_path(self, file_path: str) -> SourceMerger:
        p = PurePosixPath(file_path.replace("\\", "/"))
        name = p.name.lower()
        if name in self._by_name:
            return self._by_name[name]
        # ".env" has no suffix in pathlib terms
        suffix = p.suffix.lower() or (name if name.startswith(".") else "")
        return self._by_ext.get(suffix, self.fallback)
