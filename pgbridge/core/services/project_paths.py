"""
Project paths — find the project root and clean up generated paths.

Two concerns live here:

    resolve_project_root()   nominal path + process context → verified root
    correct_package_path()   strip a project-name segment the generator
                             sometimes inserts under the base package

Pure path logic plus a few ``stat`` calls.  No writes.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pgbridge.core.errors import InvalidProjectPath
from pgbridge.core.models.generation import DEFAULT_BASE_PACKAGE

logger = logging.getLogger(__name__)

# Files/directories whose presence marks a project root
PROJECT_MARKERS: tuple[str, ...] = (
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "package.json",
    "src/main/java",
    ".git",
)

# How many parent directories to climb looking for a marker
MAX_PARENT_LEVELS = 5


# ═══════════════════════════════════════════════════════════════════
#  Project root
# ═══════════════════════════════════════════════════════════════════


def has_project_marker(directory: Path) -> bool:
    """Whether any project marker exists directly inside ``directory``."""
    return any((directory / marker).exists() for marker in PROJECT_MARKERS)


def discover_project_root(start: Path, max_levels: int = MAX_PARENT_LEVELS) -> Path | None:
    """Walk from ``start`` up to ``max_levels`` parents looking for a marker.

    Returns:
        The first directory carrying a marker, or None.
    """
    current = start
    for _ in range(max_levels + 1):
        if has_project_marker(current):
            return current
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent
    return None


def resolve_project_root(
    nominal_path: str | None = ".",
    *,
    cwd: Path | None = None,
    ide_path: str | Path | None = None,
) -> Path:
    """Turn a nominal project path into an absolute, verified directory.

    Resolution order:
        1. ``nominal_path`` is absolute → used as-is.
        2. The IDE reported a working directory that differs from ours →
           that directory (joined with ``nominal_path`` unless it is ".").
        3. Marker discovery starting at ``cwd / nominal_path``, climbing at
           most MAX_PARENT_LEVELS parents; falls back to the start dir.

    Args:
        nominal_path: Path given by the caller ("." or empty means "here").
        cwd: Process working directory (default: ``Path.cwd()``).
        ide_path: Out-of-band working directory reported by the IDE.

    Raises:
        InvalidProjectPath: The result is missing or not a directory.
    """
    nominal = (nominal_path or ".").strip() or "."
    here = (cwd or Path.cwd()).resolve()

    if Path(nominal).expanduser().is_absolute():
        root = Path(nominal).expanduser()
        logger.debug("Using absolute project path: %s", root)
    elif ide_path and Path(ide_path).expanduser().resolve() != here:
        base = Path(ide_path).expanduser()
        root = base if nominal == "." else base / nominal
        logger.debug("Using IDE working directory: %s", root)
    else:
        start = here if nominal == "." else here / nominal
        found = discover_project_root(start) if start.is_dir() else None
        if found is None:
            logger.debug("No project marker above %s — using it as root", start)
            root = start
        else:
            if found != start:
                logger.info("Project root discovered at %s (from %s)", found, start)
            root = found

    root = root.resolve()
    if not root.exists():
        raise InvalidProjectPath(root)
    if not root.is_dir():
        raise InvalidProjectPath(root, "is not a directory")
    return root


# ═══════════════════════════════════════════════════════════════════
#  Package-path correction
# ═══════════════════════════════════════════════════════════════════


def is_project_name_segment(segment: str) -> bool:
    """Heuristic: does this directory look like an inserted project name?

    True when the segment contains an underscore or is entirely
    lower-case.  Lower-case real packages (``service/impl``) match too;
    this is best-effort.
    """
    return "_" in segment or segment.islower()


def _segment_pattern(base_package: str) -> re.Pattern[str]:
    base_dirs = base_package.strip(".").replace(".", "/")
    # head ends at the base package dirs; tail needs at least one more dir
    return re.compile(
        rf"^(?P<head>(?:.*/)?{re.escape(base_dirs)}/)"
        rf"(?P<segment>[^/]+)/"
        rf"(?P<tail>[^/]+/.+)$"
    )


def correct_package_path(
    path: str,
    content: str | None,
    *,
    base_package: str = DEFAULT_BASE_PACKAGE,
) -> tuple[str, str | None]:
    """Remove a project-name segment sitting right under the base package.

    ``src/main/java/com/example/test_service/entity/User.java`` becomes
    ``src/main/java/com/example/entity/User.java`` and every
    ``com.example.test_service`` reference in the content becomes
    ``com.example``.

    Returns:
        (corrected_path, corrected_content).  Unchanged when the pattern
        does not match or the segment fails the heuristic.
    """
    if not base_package:
        return path, content

    normalized = path.replace("\\", "/")
    match = _segment_pattern(base_package).match(normalized)
    if not match:
        return path, content

    segment = match.group("segment")
    if not is_project_name_segment(segment):
        return path, content

    corrected = match.group("head") + match.group("tail")
    logger.info("Corrected package path: %s → %s", path, corrected)

    if content:
        base = base_package.strip(".")
        qualified = re.compile(rf"\b{re.escape(base + '.' + segment)}(?=[.;\s])")
        content = qualified.sub(base, content)

    return corrected, content
