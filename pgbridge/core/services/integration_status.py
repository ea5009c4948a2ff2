"""
Integration status probe — has this project been wired to PostgreSQL?

Read-only.  Every missing or unreadable file simply contributes "not
present"; the probe never fails because part of the tree is absent.

Markers:
    dependencies   build manifest mentions spring-boot-starter-data-jpa
                   and postgresql
    configuration  an application config mentions datasource and postgresql
    entities       @Entity in a Java source
    repositories   "Repository" in a source under a /repository/ directory
    services       @Service
    controllers    @RestController
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pgbridge.core.models.status import IntegrationComponents, IntegrationStatus

logger = logging.getLogger(__name__)

BUILD_MANIFESTS: tuple[str, ...] = ("pom.xml", "build.gradle", "build.gradle.kts")

APP_CONFIGS: tuple[str, ...] = (
    "src/main/resources/application.yml",
    "src/main/resources/application.yaml",
    "src/main/resources/application.properties",
)

SOURCE_ROOT = "src/main/java"

# Annotations sit near the top of a file; no need to read the rest
SOURCE_PREFIX_CHARS = 1000


@dataclass
class SourceSample:
    """Leading slice of a Java source file."""

    path: Path
    content: str


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None


def _read_prefix(path: Path, limit: int = SOURCE_PREFIX_CHARS) -> str | None:
    try:
        with path.open("r", encoding="utf-8", errors="ignore") as fh:
            return fh.read(limit)
    except OSError:
        return None


def find_java_files(directory: Path, limit: int = SOURCE_PREFIX_CHARS) -> list[SourceSample]:
    """Collect every ``.java`` file below ``directory`` (any depth).

    Walks with an explicit stack, so tree depth is bounded only by the
    filesystem.  Unreadable directories and files are skipped and
    symlinked directories are not followed.
    """
    samples: list[SourceSample] = []
    pending: list[Path] = [directory]

    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug("Skipping unreadable %s: %s", current, e.strerror)
            continue

        subdirs: list[Path] = []
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError:
                continue
            if is_dir:
                subdirs.append(Path(entry.path))
            elif is_file and entry.name.endswith(".java"):
                content = _read_prefix(Path(entry.path), limit)
                if content is not None:
                    samples.append(SourceSample(path=Path(entry.path), content=content))

        # Reversed so the stack pops subdirectories in name order
        pending.extend(reversed(subdirs))
    return samples


def check_dependencies(project_path: Path) -> bool:
    for name in BUILD_MANIFESTS:
        content = _read_text(project_path / name)
        if content is None:
            continue
        if "spring-boot-starter-data-jpa" in content and "postgresql" in content:
            return True
    logger.debug("No JPA + PostgreSQL dependencies in %s", project_path)
    return False


def check_configuration(project_path: Path) -> bool:
    for rel in APP_CONFIGS:
        content = _read_text(project_path / rel)
        if content is None:
            continue
        if "datasource" in content and "postgresql" in content:
            return True
    logger.debug("No PostgreSQL datasource configuration in %s", project_path)
    return False


def check_integration_status(project_path: Path | str) -> IntegrationStatus:
    """Scan a project tree for PostgreSQL integration markers."""
    root = Path(project_path)

    dependencies = check_dependencies(root)
    configuration = check_configuration(root)

    sources = find_java_files(root / SOURCE_ROOT)
    logger.debug("Scanned %d Java source(s) under %s", len(sources), root / SOURCE_ROOT)

    components = IntegrationComponents(
        dependencies=dependencies,
        configuration=configuration,
        entities=any("@Entity" in s.content for s in sources),
        repositories=any(
            "Repository" in s.content and "/repository/" in s.path.as_posix()
            for s in sources
        ),
        services=any("@Service" in s.content for s in sources),
        controllers=any("@RestController" in s.content for s in sources),
    )
    return IntegrationStatus(
        configured=dependencies and configuration,
        components=components,
    )
