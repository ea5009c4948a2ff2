"""
Generated-file models — what the generation service hands us to apply.

The service groups files by category (``entities``, ``repositories``, ...).
Wire keys are camelCase; Python attributes are snake_case and both are
accepted on input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator


class FileAction(StrEnum):
    """What to do with a generated file."""

    CREATE = "create"
    MODIFY = "modify"
    APPEND = "append"


class MergeStrategy(StrEnum):
    """How a ``modify`` reconciles new content with an existing file."""

    SMART = "smart"
    APPEND = "append"
    REPLACE = "replace"


class FileChangeDescriptor(BaseModel):
    """A single generated file.

    Attributes:
        path:           Relative (or absolute) target path.
        action:         create / modify / append.
        content:        New content; empty or missing means "skip".
        merge_strategy: Strategy for ``modify``. ``None`` defers to the
                        caller's default.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    path: str
    action: FileAction = FileAction.CREATE
    content: str | None = None
    merge_strategy: MergeStrategy | None = Field(default=None, alias="mergeStrategy")


class Category(BaseModel):
    """A named, ordered group of generated files.

    ``files`` is lenient: entries that validate become
    FileChangeDescriptor, anything else is kept raw so the engine can
    report it as a per-file error without losing its siblings.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(default="", validation_alias=AliasChoices("category", "name"))
    files: list[Any] = Field(default_factory=list)

    @field_validator("files", mode="after")
    @classmethod
    def _coerce_files(cls, files: list[Any]) -> list[Any]:
        coerced: list[Any] = []
        for raw in files:
            if isinstance(raw, FileChangeDescriptor):
                coerced.append(raw)
                continue
            try:
                coerced.append(FileChangeDescriptor.model_validate(raw))
            except ValidationError:
                coerced.append(raw)
        return coerced

    @property
    def descriptors(self) -> list[FileChangeDescriptor]:
        """Only the entries that are valid descriptors."""
        return [f for f in self.files if isinstance(f, FileChangeDescriptor)]


@dataclass
class ApplyResult:
    """Outcome of one apply call. Built fresh per call, never persisted."""

    applied_count: int = 0
    applied_paths: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    skipped_paths: list[str] = field(default_factory=list)
    backups: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def record_applied(self, path: str) -> None:
        self.applied_paths.append(path)
        self.applied_count += 1

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary (wire names)."""
        return {
            "appliedCount": self.applied_count,
            "appliedPaths": list(self.applied_paths),
            "errors": list(self.errors),
            "skippedPaths": list(self.skipped_paths),
            "backups": list(self.backups),
        }
