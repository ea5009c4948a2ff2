"""
Backups — copy a file aside before the apply engine mutates it.

Layout::

    <project_root>/<backup_dir>/<basename>.backup.<timestamp>

The timestamp is an ISO-8601 UTC instant with ``:`` and ``.`` replaced by
``-`` (``2026-10-17T10-15-30-123Z``).  Backups are never read back by the
bridge; restoring is a manual operation.

Best-effort by contract: ``backup()`` logs and returns None on failure,
it never raises.
"""

from __future__ import annotations

import logging
import re
import shutil
from datetime import UTC, datetime
from pathlib import Path

from pgbridge.core.models.config import DEFAULT_BACKUP_DIR

logger = logging.getLogger(__name__)

_BACKUP_NAME_RE = re.compile(r"^(?P<name>.+)\.backup\.(?P<stamp>\d{4}-\d{2}-\d{2}T[\d-]+Z)(?:-\d+)?$")


def backup_timestamp(now: datetime | None = None) -> str:
    """Filesystem-safe ISO timestamp with millisecond precision."""
    now = now or datetime.now(UTC)
    iso = now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


class BackupManager:
    """Timestamped file backups scoped to one project root.

    Args:
        project_root: Absolute project root.
        backup_dir: Backup directory, relative to the root.
    """

    def __init__(self, project_root: Path, backup_dir: str = DEFAULT_BACKUP_DIR) -> None:
        self.project_root = project_root
        self.backup_dir = project_root / backup_dir

    def ensure_directory(self) -> bool:
        """Create the backup directory. Returns False (and logs) on failure."""
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            logger.warning("Failed to create backup directory %s: %s", self.backup_dir, e)
            return False

    def backup_path_for(self, relative_path: str, now: datetime | None = None) -> Path:
        """Next free backup path for ``relative_path``."""
        stem = f"{Path(relative_path).name}.backup.{backup_timestamp(now)}"
        candidate = self.backup_dir / stem
        counter = 1
        while candidate.exists():
            candidate = self.backup_dir / f"{stem}-{counter}"
            counter += 1
        return candidate

    def backup(self, full_path: Path, relative_path: str) -> Path | None:
        """Copy ``full_path`` into the backup store.

        Args:
            full_path: Absolute path of the file about to be mutated.
            relative_path: Path as given by the descriptor (for naming).

        Returns:
            Path of the backup, or None if nothing was backed up.
        """
        if not full_path.is_file():
            return None

        if not self.ensure_directory():
            return None

        target = self.backup_path_for(relative_path)
        try:
            shutil.copy2(full_path, target)
        except OSError as e:
            logger.warning("Backup of %s failed: %s", relative_path, e)
            return None

        logger.debug("📁 Created backup: %s", target)
        return target

    def list_backups(self) -> list[dict]:
        """Existing backups, newest first."""
        if not self.backup_dir.is_dir():
            return []

        entries: list[dict] = []
        for f in self.backup_dir.iterdir():
            match = _BACKUP_NAME_RE.match(f.name)
            if not match or not f.is_file():
                continue
            try:
                size = f.stat().st_size
            except OSError:
                continue
            entries.append({
                "filename": f.name,
                "original": match.group("name"),
                "timestamp": match.group("stamp"),
                "size_bytes": size,
                "full_path": str(f),
            })

        entries.sort(key=lambda e: (e["timestamp"], e["filename"]), reverse=True)
        return entries
