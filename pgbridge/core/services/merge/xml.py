"""
XML merges — Maven POM dependency insertion and a generic append.

The POM merge works on text, not a DOM, so the user's formatting and
comments survive untouched.  Only the project-level ``<dependencies>``
section is a target; the ones inside ``<dependencyManagement>``,
``<plugin>`` and ``<profile>`` are skipped.
"""

from __future__ import annotations

import logging
import re
import textwrap

from pgbridge.core.services.merge.base import MARKER_TEXT, SourceMerger, append_with_marker

logger = logging.getLogger(__name__)

COMMENT_MARKER = f"<!-- {MARKER_TEXT} -->"

_DEPENDENCY_RE = re.compile(r"[ \t]*<dependency>.*?</dependency>", re.DOTALL)
_CLOSE_DEPENDENCIES_RE = re.compile(r"</dependencies>")
_NESTED_SECTION_RES = (
    re.compile(r"<dependencyManagement>.*?</dependencyManagement>", re.DOTALL),
    re.compile(r"<plugin>.*?</plugin>", re.DOTALL),
    re.compile(r"<profile>.*?</profile>", re.DOTALL),
)


def _nested_spans(content: str) -> list[tuple[int, int]]:
    return [m.span() for rx in _NESTED_SECTION_RES for m in rx.finditer(content)]


def _inside(pos: int, spans: list[tuple[int, int]]) -> bool:
    return any(start <= pos < end for start, end in spans)


def extract_dependencies(content: str) -> list[str]:
    """Project-level ``<dependency>`` blocks, dedented."""
    spans = _nested_spans(content)
    return [
        textwrap.dedent(m.group(0)).strip()
        for m in _DEPENDENCY_RE.finditer(content)
        if not _inside(m.start(), spans)
    ]


def find_dependencies_close(content: str) -> int | None:
    """Offset of the project-level ``</dependencies>`` tag, if any."""
    spans = _nested_spans(content)
    for m in _CLOSE_DEPENDENCIES_RE.finditer(content):
        if not _inside(m.start(), spans):
            return m.start()
    return None


class PomMerger(SourceMerger):
    """Insert new ``<dependency>`` blocks before ``</dependencies>``."""

    name = "pom"

    def merge(self, existing: str, new: str, file_path: str) -> str:
        deps = extract_dependencies(new) if "<dependency>" in new else []
        close = find_dependencies_close(existing)
        if not deps or close is None:
            logger.debug("No dependency merge possible for %s — appending", file_path)
            return append_with_marker(existing, new, COMMENT_MARKER)

        line_start = existing.rfind("\n", 0, close) + 1
        closing_indent = existing[line_start:close]
        if closing_indent.strip():
            # </dependencies> shares its line with other markup
            line_start, closing_indent = close, ""
            prefix = "\n"
        else:
            prefix = ""

        inner = closing_indent + "    "
        blocks = [f"{inner}{COMMENT_MARKER}"]
        blocks.extend(textwrap.indent(dep, inner) for dep in deps)
        insertion = prefix + "\n".join(blocks) + "\n"

        logger.debug("Inserted %d dependency block(s) into %s", len(deps), file_path)
        return existing[:line_start] + insertion + existing[line_start:]


class XmlAppendMerger(SourceMerger):
    """Any other XML: append under a comment marker."""

    name = "xml-append"

    def merge(self, existing: str, new: str, file_path: str) -> str:
        return append_with_marker(existing, new, COMMENT_MARKER)
