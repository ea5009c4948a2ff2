"""
Java source merge — regex heuristic.

Only controller/service classes get a member-level merge: the generator
re-emits those with extra endpoints or service methods that belong in the
user's existing class.  Everything else is appended under a marker.

Limitations: brace matching goes four levels deep and does not know
about string literals or comments.  When the extracted methods do not
account for every method signature in the new content (fields or
constructors only, deeper nesting, a ``{`` inside a string), the whole
new content is appended under the marker instead.
"""

from __future__ import annotations

import logging
import re
import textwrap

from pgbridge.core.services.merge.base import MARKER_TEXT, SourceMerger, append_with_marker

logger = logging.getLogger(__name__)

# Annotations that mark a class as a merge target
MERGEABLE_MARKERS: tuple[str, ...] = ("@RestController", "@Controller", "@Service")

COMMENT_MARKER = f"// {MARKER_TEXT}"

_INDENT = "    "

# One level of nested parentheses: @GetMapping("/{id}"), (@PathVariable("id") Long id)
_PARENS = r"\((?:[^()]|\([^()]*\))*\)"

# Brace-balanced body, up to four levels of nesting
_BODY = r"\{(?:[^{}]|\{(?:[^{}]|\{(?:[^{}]|\{(?:[^{}]|\{[^{}]*\})*\})*\})*\})*\}"

_METHOD_RE = re.compile(
    r"^[ \t]*"
    rf"(?:@[\w.]+(?:{_PARENS})?\s+)*"                 # annotations
    r"(?:public|private|protected)\s+"
    r"(?:(?:static|final|synchronized|abstract|native|default)\s+)*"
    r"(?:<[^>]+>\s+)?"                               # generic method type params
    r"[\w.<>\[\],? ]+?\s+"                           # return type
    rf"\w+\s*{_PARENS}\s*"                           # name(params)
    r"(?:throws\s+[\w.,\s]+?\s*)?"
    + _BODY,
    re.MULTILINE,
)

# Any method or constructor header that opens a body
_SIGNATURE_RE = re.compile(
    r"^[ \t]*(?:public|private|protected)\s+[^;=\n{}()]*?\w+\s*\([^;{}]*\)\s*"
    r"(?:throws\s+[\w.,\s]+?)?\s*\{",
    re.MULTILINE,
)

_IMPORT_LINE_RE = re.compile(
    r"^[ \t]*import\s+(?:static\s+)?[\w.]+(?:\.\*)?\s*;[ \t]*(?:\r?\n|$)",
    re.MULTILINE,
)

_PACKAGE_RE = re.compile(r"^[ \t]*package\s+[\w.]+\s*;[ \t]*$", re.MULTILINE)


def extract_imports(content: str) -> list[str]:
    """Import statements in file order, normalized to ``import x.y.Z;``."""
    return [" ".join(m.group(0).split()) for m in _IMPORT_LINE_RE.finditer(content)]


def extract_methods(content: str) -> list[str]:
    """Top-level-looking method blocks (annotations + signature + body)."""
    return [textwrap.dedent(m.group(0)).strip("\n") for m in _METHOD_RE.finditer(content)]


def count_signatures(content: str) -> int:
    return len(_SIGNATURE_RE.findall(content))


def merge_imports(existing: list[str], new: list[str]) -> list[str]:
    """Existing order first, then unseen new imports."""
    merged: list[str] = []
    seen: set[str] = set()
    for imp in [*existing, *new]:
        if imp not in seen:
            seen.add(imp)
            merged.append(imp)
    return merged


def rewrite_import_block(content: str, imports: list[str]) -> str:
    """Drop all import lines and re-emit ``imports`` after the package line."""
    if not imports:
        return content

    stripped = _IMPORT_LINE_RE.sub("", content)
    block = "\n".join(imports)

    pkg = _PACKAGE_RE.search(stripped)
    if pkg is None:
        return f"{block}\n\n{stripped.lstrip()}"

    head = stripped[: pkg.end()]
    tail = stripped[pkg.end():].lstrip("\r\n")
    return f"{head}\n\n{block}\n\n{tail}"


def is_mergeable_class(content: str) -> bool:
    return any(marker in content for marker in MERGEABLE_MARKERS)


class RegexJavaMerger(SourceMerger):
    """Insert generated methods into an existing controller/service class."""

    name = "java-regex"

    def merge(self, existing: str, new: str, file_path: str) -> str:
        if not is_mergeable_class(existing):
            logger.debug("%s is not a controller/service — appending", file_path)
            return append_with_marker(existing, new, COMMENT_MARKER)

        close = existing.rstrip().rfind("}")
        if close == -1:
            logger.debug("No class body found in %s — appending", file_path)
            return append_with_marker(existing, new, COMMENT_MARKER)

        methods = extract_methods(new)
        expected = count_signatures(new)
        if not methods or len(methods) != expected:
            logger.debug(
                "Extracted %d of %d method(s) from new %s — appending",
                len(methods), expected, file_path,
            )
            return append_with_marker(existing, new, COMMENT_MARKER)

        body = "\n\n".join(textwrap.indent(m, _INDENT) for m in methods)
        merged = (
            existing[:close].rstrip()
            + f"\n\n{_INDENT}{COMMENT_MARKER}\n"
            + body
            + "\n"
            + existing[close:]
        )

        imports = merge_imports(extract_imports(existing), extract_imports(new))
        merged = rewrite_import_block(merged, imports)

        logger.debug(
            "Merged %d method(s), %d import(s) into %s",
            len(methods), len(imports), file_path,
        )
        return merged
