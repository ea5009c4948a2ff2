"""
Tests for the markdown tool reports.
"""

from pathlib import Path

from pgbridge.core.models.changes import ApplyResult
from pgbridge.core.models.generation import ExecutionResponse, PlanResponse
from pgbridge.core.models.status import IntegrationComponents, IntegrationStatus
from pgbridge.core.use_cases.generate import GenerationOutcome
from pgbridge.core.use_cases.reports import (
    format_generation_report,
    format_plan_report,
    format_status_report,
)


def _execution(**overrides) -> ExecutionResponse:
    data = {
        "executionId": "exec-9",
        "status": "completed",
        "summary": {"tablesProcessed": 2, "filesGenerated": 3},
        "generatedFiles": [
            {"category": "entities", "files": [{"path": "a/User.java", "content": "x", "size": 12}]},
        ],
    }
    data.update(overrides)
    return ExecutionResponse.model_validate(data)


class TestPlanReport:
    def test_contains_plan_id_and_analysis(self):
        plan = PlanResponse.model_validate({
            "planId": "plan-42",
            "status": "created",
            "expiresIn": "30 minutes",
            "projectAnalysis": {"basePackage": "com.acme", "existingStructure": {"hasJPA": True}},
            "impact": {"filesCreated": 4, "breakingChanges": False},
        })
        report = format_plan_report(plan)
        assert "**Plan ID:** `plan-42`" in report
        assert "`com.acme`" in report
        assert "- **JPA:** ✅" in report
        assert "Files to be created:** 4" in report
        assert report.rstrip().endswith("`plan-42`")

    def test_tolerates_non_object_payload_parts(self):
        plan = PlanResponse.model_validate({
            "planId": "plan-7",
            "projectAnalysis": {"existingStructure": "unknown"},
            "proposedChanges": {
                "summary": "Add persistence",
                "components": ["entities", {"type": "Repository", "items": ["UserRepository", {"name": "OrderRepository"}]}],
            },
            "nextSteps": {"requiredInput": "schema"},
        })
        report = format_plan_report(plan)
        assert "- entities" in report
        assert "- UserRepository" in report
        assert "- **OrderRepository**: " in report
        assert "**Required Input:** Database schema definition" in report

    def test_tolerates_non_object_quality_block(self):
        outcome = GenerationOutcome(
            project_root=Path("/work/shop"),
            execution=_execution(validation={"compilationCheck": "passed", "codeQuality": "good"}),
            applied=None,
            apply_requested=False,
        )
        report = format_generation_report(outcome)
        assert "Compilation Check:** ✅ passed" in report
        assert "Code Quality Score" not in report


class TestGenerationReport:
    def test_applied(self):
        applied = ApplyResult()
        applied.record_applied("a/User.java")
        outcome = GenerationOutcome(project_root=Path("/work/shop"), execution=_execution(), applied=applied)

        report = format_generation_report(outcome)

        assert "`exec-9`" in report
        assert "Files Applied to Project:** 1" in report
        assert "**User.java** (12 lines)" in report
        assert "## ✅ Applied Files" in report
        assert "All files have been applied" in report

    def test_not_applied(self):
        outcome = GenerationOutcome(
            project_root=Path("/work/shop"), execution=_execution(), apply_requested=False,
        )
        report = format_generation_report(outcome)
        assert "Skipped (applyToProject = false)" in report
        assert "Set applyToProject: true" in report

    def test_errors_listed(self):
        applied = ApplyResult(errors=["x.java: boom"])
        applied.record_applied("y.java")
        outcome = GenerationOutcome(project_root=Path("/p"), execution=_execution(), applied=applied)
        report = format_generation_report(outcome)
        assert "- x.java: boom" in report
        assert "1 failed" in report

    def test_post_execution_steps(self):
        execution = _execution(postExecutionSteps=[
            {"step": 1, "action": "Run migrations", "description": "flyway migrate", "required": True},
        ])
        report = format_generation_report(
            GenerationOutcome(project_root=Path("/p"), execution=execution, apply_requested=False)
        )
        assert "1. **Run migrations** 🔴 (Required)" in report
        assert "Update Database Configuration" not in report


class TestStatusReport:
    def test_not_configured_has_recommendations(self):
        report = format_status_report(IntegrationStatus(), "/work/shop")
        assert "❌ NOT CONFIGURED" in report
        assert "Add PostgreSQL dependencies" in report
        assert report.endswith("*Project Path: /work/shop*")

    def test_complete(self):
        status = IntegrationStatus(
            configured=True,
            components=IntegrationComponents(
                dependencies=True, configuration=True, entities=True,
                repositories=True, services=True, controllers=True,
            ),
        )
        report = format_status_report(status, "/work/shop")
        assert "✅ CONFIGURED" in report
        assert "No further action needed" in report
