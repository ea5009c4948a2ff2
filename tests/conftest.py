"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from pgbridge.core.config.loader import ENV_KEYS
from pgbridge.core.models.generation import ExecutionResponse, PlanResponse

USER_ENTITY = "package com.example.entity;\n\n@Entity\npublic class User {}\n"


class FakeGenerationClient:
    """Stands in for GenerationClient; records calls, returns canned payloads."""

    def __init__(self) -> None:
        self.plan: dict = {
            "planId": "plan-123",
            "status": "created",
            "expiresIn": "30 minutes",
            "projectAnalysis": {"basePackage": "com.example", "buildTool": "maven"},
        }
        self.execution: dict = {
            "executionId": "exec-1",
            "status": "completed",
            "summary": {"tablesProcessed": 1, "filesGenerated": 1},
            "generatedFiles": [
                {
                    "category": "entities",
                    "files": [
                        {
                            "path": "src/main/java/com/example/entity/User.java",
                            "action": "create",
                            "content": USER_ENTITY,
                        },
                    ],
                },
            ],
        }
        self.error: Exception | None = None
        self.calls: list[tuple] = []

    def create_plan(self, project_path, description, preferences=None):
        self.calls.append(("create_plan", project_path, description))
        if self.error:
            raise self.error
        return PlanResponse.model_validate(self.plan)

    def execute_plan(self, plan_id, schema, *, generate_tests=False):
        self.calls.append(("execute_plan", plan_id, generate_tests))
        if self.error:
            raise self.error
        return ExecutionResponse.model_validate(self.execution)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of config resolution."""
    for var, _ in ENV_KEYS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def java_project(tmp_path: Path) -> Path:
    """A minimal Maven project root."""
    root = tmp_path / "shop"
    root.mkdir()
    (root / "pom.xml").write_text("<project></project>\n")
    return root


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()
