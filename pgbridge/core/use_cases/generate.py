"""
Generate use case — plan, execute, and apply a PostgreSQL integration.

Three entry points, one per tool:

    create_plan()            phase 1 only
    execute_plan()           phase 2 + 3 for an existing plan id
    generate_integration()   phases 1 → 2 → 3 in one call

The project root is resolved and verified before any network call, so a
bad path fails fast without burning a plan on the remote side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pgbridge.adapters.generation_client import GenerationClient
from pgbridge.core.models.changes import ApplyResult
from pgbridge.core.models.config import BridgeConfig
from pgbridge.core.models.generation import (
    DEFAULT_BASE_PACKAGE,
    ExecuteArgs,
    ExecutionResponse,
    GenerateArgs,
    PlanArgs,
    PlanResponse,
    Preferences,
)
from pgbridge.core.services.apply_ops import apply_generated_files, verify_project_root
from pgbridge.core.services.project_paths import resolve_project_root
from pgbridge.core.use_cases.reports import format_generation_report, format_plan_report

logger = logging.getLogger(__name__)


@dataclass
class GenerationOutcome:
    """Everything the report needs after phases 2 and 3."""

    project_root: Path
    execution: ExecutionResponse
    plan: PlanResponse | None = None
    apply_requested: bool = True
    applied: ApplyResult | None = None


def resolve_writable_root(config: BridgeConfig, nominal_path: str) -> Path:
    """Resolve the project root and check it can be written to."""
    root = resolve_project_root(nominal_path, ide_path=config.ide_project_path)
    return verify_project_root(root)


def choose_base_package(preferences: Preferences, plan: PlanResponse | None) -> str:
    """Explicit preference, then the plan's analysis, then the default."""
    if preferences.base_package:
        return preferences.base_package
    if plan is not None and plan.base_package:
        return plan.base_package
    return DEFAULT_BASE_PACKAGE


def apply_execution(
    config: BridgeConfig,
    project_root: Path,
    execution: ExecutionResponse,
    preferences: Preferences,
    plan: PlanResponse | None = None,
) -> ApplyResult:
    """Phase 3: write the execution's generated files into the project."""
    logger.info("📁 Phase 3: Applying files to project %s", project_root)
    result = apply_generated_files(
        project_root,
        execution.generated_files,
        auto_backup=config.auto_backup,
        backup_dir=config.backup_dir,
        default_strategy=preferences.merge_strategy,
        base_package=choose_base_package(preferences, plan),
        remove_project_name=preferences.remove_project_name_from_path,
    )
    logger.info("✅ Applied %d files to project", result.applied_count)
    for error in result.errors:
        logger.warning("   %s", error)
    return result


def _log_generated_files(execution: ExecutionResponse) -> None:
    if not execution.generated_files:
        return
    logger.info("📁 Generated Files:")
    for category in execution.generated_files:
        logger.info("   %s:", category.name)
        for f in category.descriptors:
            logger.info("     - %s (%s)", f.path, f.action.value)


def _run_plan(client: GenerationClient, root: Path, args: PlanArgs) -> PlanResponse:
    logger.info("📋 Phase 1: Creating integration plan...")
    plan = client.create_plan(str(root), args.description, args.preferences)
    logger.info("✅ Plan created: %s (status=%s, expires in %s)", plan.plan_id, plan.status, plan.expires_in)
    return plan


def _run_execute(
    client: GenerationClient,
    plan_id: str,
    schema: dict,
    preferences: Preferences,
) -> ExecutionResponse:
    logger.info("🚀 Phase 2: Executing plan %s with %d table(s)...", plan_id, len(schema.get("tables") or []))
    execution = client.execute_plan(plan_id, schema, generate_tests=preferences.generate_tests)
    logger.info(
        "✅ Execution completed: %s (status=%s, files=%s)",
        execution.execution_id, execution.status, execution.summary.get("filesGenerated", execution.file_count),
    )
    _log_generated_files(execution)
    return execution


# ═══════════════════════════════════════════════════════════════════
#  Tool-level operations
# ═══════════════════════════════════════════════════════════════════


def create_plan(
    config: BridgeConfig,
    args: PlanArgs,
    client: GenerationClient | None = None,
) -> str:
    """Create a plan and describe it."""
    client = client or GenerationClient.from_config(config)
    root = resolve_project_root(args.project_path, ide_path=config.ide_project_path)
    logger.info("Creating integration plan for: %s", args.description)
    return format_plan_report(_run_plan(client, root, args))


def execute_plan(
    config: BridgeConfig,
    args: ExecuteArgs,
    client: GenerationClient | None = None,
) -> str:
    """Execute an existing plan and (optionally) apply the result."""
    client = client or GenerationClient.from_config(config)
    root = resolve_writable_root(config, args.project_path)

    execution = _run_execute(client, args.plan_id, args.db_schema, args.preferences)
    outcome = GenerationOutcome(
        project_root=root,
        execution=execution,
        apply_requested=args.apply_to_project,
    )
    if args.apply_to_project and execution.generated_files:
        outcome.applied = apply_execution(config, root, execution, args.preferences)
    return format_generation_report(outcome)


def generate_integration(
    config: BridgeConfig,
    args: GenerateArgs,
    client: GenerationClient | None = None,
) -> str:
    """Plan, execute and apply in one call."""
    client = client or GenerationClient.from_config(config)
    root = resolve_writable_root(config, args.project_path)

    tables = [t.get("name", "?") for t in args.db_schema.get("tables") or [] if isinstance(t, dict)]
    logger.info("=== PostgreSQL Integration ===")
    logger.info("Description: %s", args.description)
    logger.info("Tables: %s", ", ".join(tables) or "(none)")
    logger.info("Apply to project: %s (%s)", args.apply_to_project, root)

    plan = _run_plan(client, root, args)
    execution = _run_execute(client, plan.plan_id, args.db_schema, args.preferences)

    outcome = GenerationOutcome(
        project_root=root,
        execution=execution,
        plan=plan,
        apply_requested=args.apply_to_project,
    )
    if args.apply_to_project and execution.generated_files:
        outcome.applied = apply_execution(config, root, execution, args.preferences, plan)
    elif not args.apply_to_project:
        logger.info("📁 Phase 3: Skipping file application (applyToProject = false)")

    return format_generation_report(outcome)
