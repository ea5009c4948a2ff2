"""
File application — write generated files into a project tree.

Per file, strictly in order::

    package-path correction → containment check → skip if empty
    → mkdir parents → backup (once per target) → create / append / merge

Every file is isolated: a failure becomes an entry in ``ApplyResult.errors``
and the batch moves on.  Only precondition failures (no root, root not a
writable directory) raise.

The project root is always an explicit argument; nothing here keeps
state between calls.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pgbridge.core.errors import (
    FileSystemError,
    InvalidProjectPath,
    PreconditionError,
    SecurityViolation,
)
from pgbridge.core.models.changes import (
    ApplyResult,
    Category,
    FileAction,
    FileChangeDescriptor,
    MergeStrategy,
)
from pgbridge.core.models.config import DEFAULT_BACKUP_DIR
from pgbridge.core.models.generation import DEFAULT_BASE_PACKAGE
from pgbridge.core.services.backup_ops import BackupManager
from pgbridge.core.services.merge import MergerRegistry, merge_content
from pgbridge.core.services.project_paths import correct_package_path

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Preconditions & path safety
# ═══════════════════════════════════════════════════════════════════


def verify_project_root(project_root: Path | str | None) -> Path:
    """Check the root is set, exists, is a directory and is writable.

    Returns:
        The normalized absolute root.

    Raises:
        PreconditionError: (or its subclass InvalidProjectPath).
    """
    if project_root is None or str(project_root).strip() == "":
        raise PreconditionError("Project root is not set")

    root = Path(project_root).expanduser().resolve()
    if not root.exists():
        raise InvalidProjectPath(root)
    if not root.is_dir():
        raise InvalidProjectPath(root, "is not a directory")
    if not os.access(root, os.W_OK):
        raise PreconditionError(f"Project root {root} is not writable")
    return root


def resolve_target(project_root: Path, rel_path: str) -> Path:
    """Resolve ``rel_path`` under the root, refusing anything outside it.

    ``project_root`` must already be normalized (see verify_project_root).

    Raises:
        SecurityViolation: The normalized target escapes the root.
    """
    target = (project_root / rel_path).resolve()
    try:
        target.relative_to(project_root)
    except ValueError:
        raise SecurityViolation(rel_path, project_root) from None
    if target == project_root:
        raise SecurityViolation(rel_path, project_root)
    return target


def coerce_categories(
    categories: Iterable[Category | Mapping[str, Any]],
    result: ApplyResult,
) -> list[Category]:
    """Validate raw category dicts; invalid ones become errors.

    Individual file entries are checked later, one at a time.
    """
    valid: list[Category] = []
    for index, raw in enumerate(categories):
        if isinstance(raw, Category):
            valid.append(raw)
            continue
        try:
            valid.append(Category.model_validate(raw))
        except ValidationError as e:
            name = (raw.get("category") or raw.get("name")) if isinstance(raw, Mapping) else None
            label = name or f"category #{index + 1}"
            msg = f"{label}: invalid category ({e.error_count()} error(s))"
            logger.error("❌ %s", msg)
            result.errors.append(msg)
    return valid


# ═══════════════════════════════════════════════════════════════════
#  Engine
# ═══════════════════════════════════════════════════════════════════


def apply_generated_files(
    project_root: Path | str | None,
    categories: Iterable[Category | Mapping[str, Any]],
    *,
    auto_backup: bool = True,
    backup_dir: str = DEFAULT_BACKUP_DIR,
    default_strategy: MergeStrategy | str = MergeStrategy.SMART,
    base_package: str | None = DEFAULT_BASE_PACKAGE,
    remove_project_name: bool = True,
    registry: MergerRegistry | None = None,
) -> ApplyResult:
    """Apply generated files to a project.

    Args:
        project_root: Project root (required, must be a writable dir).
        categories: Ordered categories of file descriptors.
        auto_backup: Back up existing targets before mutating them.
        backup_dir: Backup directory relative to the root.
        default_strategy: Merge strategy for descriptors that set none.
        base_package: Base Java package for path correction.
        remove_project_name: Run package-path correction at all.
        registry: Merger registry override.

    Returns:
        ApplyResult with applied paths, skipped paths, backups and errors.

    Raises:
        PreconditionError: Root unset, missing, not a dir, or read-only.
    """
    root = verify_project_root(project_root)
    default_strategy = MergeStrategy(default_strategy)
    backups = BackupManager(root, backup_dir) if auto_backup else None
    backed_up: set[Path] = set()

    result = ApplyResult()

    for category in coerce_categories(categories, result):
        logger.info("Applying %d files for category: %s", len(category.files), category.name or "?")

        for index, raw in enumerate(category.files):
            label = _descriptor_label(raw, index)
            try:
                descriptor = _coerce_descriptor(raw)
                _apply_one(
                    root, descriptor, result,
                    backups=backups,
                    backed_up=backed_up,
                    default_strategy=default_strategy,
                    base_package=base_package if remove_project_name else None,
                    registry=registry,
                )
            except ValidationError as e:
                msg = f"{label}: invalid descriptor: {_first_error(e)}"
                logger.error("❌ %s", msg)
                result.errors.append(msg)
            except SecurityViolation as e:
                logger.error("❌ Refused %s: %s", label, e)
                result.errors.append(f"{label}: {e}")
            except (FileSystemError, OSError, UnicodeError) as e:
                logger.error("❌ Failed to apply %s: %s", label, e)
                result.errors.append(f"{label}: {e}")
            except Exception as e:
                logger.exception("❌ Unexpected failure applying %s", label)
                result.errors.append(f"{label}: {type(e).__name__}: {e}")

    logger.info(
        "Applied %d file(s), skipped %d, %d error(s)",
        result.applied_count, len(result.skipped_paths), len(result.errors),
    )
    return result


def _apply_one(
    root: Path,
    descriptor: FileChangeDescriptor,
    result: ApplyResult,
    *,
    backups: BackupManager | None,
    backed_up: set[Path],
    default_strategy: MergeStrategy,
    base_package: str | None,
    registry: MergerRegistry | None,
) -> None:
    """Run the pipeline for one descriptor. Raises on per-file failure."""
    rel_path, content = descriptor.path, descriptor.content
    if base_package:
        rel_path, content = correct_package_path(rel_path, content, base_package=base_package)

    target = resolve_target(root, rel_path)

    if not content:
        logger.warning("⚠️  Skipping %s: no content", rel_path)
        result.skipped_paths.append(rel_path)
        return

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"Cannot create directory {target.parent}: {e}") from e

    existed = target.exists()
    if existed and target.is_dir():
        raise FileSystemError(f"Target is a directory: {rel_path}")

    if backups is not None and existed and target not in backed_up:
        backup = backups.backup(target, rel_path)
        backed_up.add(target)
        if backup is not None:
            result.backups.append(_display_path(backup, root))

    action = descriptor.action
    if action is FileAction.MODIFY and not existed:
        logger.debug("%s does not exist yet — creating", rel_path)
        action = FileAction.CREATE

    if action is FileAction.CREATE:
        target.write_text(content, encoding="utf-8")
    elif action is FileAction.APPEND:
        with target.open("a", encoding="utf-8") as fh:
            fh.write(content)
    else:
        existing = target.read_text(encoding="utf-8")
        strategy = descriptor.merge_strategy or default_strategy
        target.write_text(
            merge_content(existing, content, rel_path, strategy, registry=registry),
            encoding="utf-8",
        )

    logger.info("✅ Applied: %s (%s)", rel_path, action.value)
    result.record_applied(rel_path)


def _display_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def _coerce_descriptor(raw: Any) -> FileChangeDescriptor:
    if isinstance(raw, FileChangeDescriptor):
        return raw
    return FileChangeDescriptor.model_validate(raw)


def _descriptor_label(raw: Any, index: int) -> str:
    """Path of the entry when it has one, else its 1-based position."""
    if isinstance(raw, FileChangeDescriptor):
        return raw.path
    if isinstance(raw, Mapping) and isinstance(raw.get("path"), str) and raw["path"]:
        return raw["path"]
    return f"#{index + 1}"


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ())) or "entry"
    return f"{loc}: {err.get('msg', 'invalid')}"
