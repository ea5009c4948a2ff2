"""
Generation service payloads and tool arguments.

Response models are lenient (unknown keys allowed) because the remote
service owns their shape; only the fields the bridge acts on are typed.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from pgbridge.core.models.changes import Category, MergeStrategy

DEFAULT_BASE_PACKAGE = "com.example"


class Preferences(BaseModel):
    """Generation preferences.

    ``use_lombok``, ``include_validation``, ``naming_strategy`` and
    ``generate_tests`` only matter to the remote service.  The last three
    are consumed locally by the file-application engine.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    use_lombok: bool = Field(default=True, alias="useLombok")
    include_validation: bool = Field(default=True, alias="includeValidation")
    naming_strategy: Literal["snake_case", "camelCase"] = Field(
        default="snake_case", alias="namingStrategy",
    )
    generate_tests: bool = Field(default=False, alias="generateTests")
    merge_strategy: MergeStrategy = Field(default=MergeStrategy.SMART, alias="mergeStrategy")
    remove_project_name_from_path: bool = Field(default=True, alias="removeProjectNameFromPath")
    base_package: str | None = Field(default=None, alias="basePackage")

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the generation service (camelCase, unknown keys kept)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PlanResponse(BaseModel):
    """Answer to ``POST /plan/create``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    plan_id: str = Field(alias="planId")
    status: str = ""
    expires_in: Any = Field(default=None, alias="expiresIn")
    project_analysis: dict[str, Any] = Field(default_factory=dict, alias="projectAnalysis")
    proposed_changes: dict[str, Any] = Field(default_factory=dict, alias="proposedChanges")
    impact: dict[str, Any] = Field(default_factory=dict)
    next_steps: dict[str, Any] = Field(default_factory=dict, alias="nextSteps")

    @property
    def base_package(self) -> str | None:
        value = self.project_analysis.get("basePackage")
        return str(value) if value else None


class ExecutionResponse(BaseModel):
    """Answer to ``POST /plan/execute``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    execution_id: str = Field(default="", alias="executionId")
    status: str = ""
    summary: dict[str, Any] = Field(default_factory=dict)
    generated_files: list[Category] = Field(default_factory=list, alias="generatedFiles")
    validation: dict[str, Any] = Field(default_factory=dict)
    post_execution_steps: list[dict[str, Any]] = Field(
        default_factory=list, alias="postExecutionSteps",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: dict[str, Any] | None = None

    @property
    def file_count(self) -> int:
        return sum(len(c.files) for c in self.generated_files)


# ── Tool arguments ──────────────────────────────────────────────────


class _ToolArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PlanArgs(_ToolArgs):
    description: str
    project_path: str = Field(default=".", alias="projectPath")
    preferences: Preferences = Field(default_factory=Preferences)


class GenerateArgs(PlanArgs):
    db_schema: dict[str, Any] = Field(alias="schema")
    apply_to_project: bool = Field(default=True, alias="applyToProject")


class ExecuteArgs(_ToolArgs):
    plan_id: str = Field(alias="planId")
    db_schema: dict[str, Any] = Field(alias="schema")
    project_path: str = Field(default=".", alias="projectPath")
    preferences: Preferences = Field(default_factory=Preferences)
    apply_to_project: bool = Field(default=True, alias="applyToProject")


class StatusArgs(_ToolArgs):
    project_path: str = Field(default=".", alias="projectPath")
