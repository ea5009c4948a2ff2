"""
Markdown reports returned as the text block of each tool call.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from pgbridge.core.models.generation import PlanResponse
from pgbridge.core.models.status import IntegrationStatus

if TYPE_CHECKING:
    from pgbridge.core.use_cases.generate import GenerationOutcome


def _mark(flag: Any) -> str:
    return "✅" if flag else "❌"


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _check_line(label: str, value: Any) -> str:
    icon = "✅" if value == "passed" else "❌"
    return f"- **{label}:** {icon} {value or 'Not checked'}"


DEFAULT_NEXT_STEPS = """\
1. **Update Database Configuration** 🔴 (Required)
   Configure your PostgreSQL connection in application.yml

2. **Run Database Migrations** 🔴 (Required)
   Create the database schema or let Hibernate auto-create it

3. **Restart Application** 🔴 (Required)
   Restart your Spring Boot application to load the new components"""


# ═══════════════════════════════════════════════════════════════════
#  Plan
# ═══════════════════════════════════════════════════════════════════


def format_plan_report(plan: PlanResponse) -> str:
    analysis = plan.project_analysis
    existing = _as_dict(analysis.get("existingStructure"))
    changes = plan.proposed_changes
    impact = plan.impact

    lines = [
        "# 🗂️ PostgreSQL Integration Plan Created",
        "",
        f"**Plan ID:** `{plan.plan_id}`",
        f"**Status:** {plan.status}",
        f"**Expires in:** {plan.expires_in}",
        "",
        "## 📊 Project Analysis",
        f"- **Framework:** {analysis.get('detectedFramework', 'Spring Boot')}",
        f"- **Language:** {analysis.get('language', 'Java')}",
        f"- **Build Tool:** {analysis.get('buildTool', '?')}",
        f"- **Base Package:** `{analysis.get('basePackage', 'com.example')}`",
        "",
        "### 🏗️ Existing Structure",
        f"- **JPA:** {_mark(existing.get('hasJPA'))}",
        f"- **Database:** {_mark(existing.get('hasDatabase'))}",
        f"- **Lombok:** {_mark(existing.get('hasLombok'))}",
        f"- **Validation:** {_mark(existing.get('hasValidation'))}",
    ]

    if changes:
        lines += ["", "## 🔄 Proposed Changes", str(changes.get("summary", ""))]
        for comp in _as_list(changes.get("components")):
            if not isinstance(comp, dict):
                lines += ["", f"- {comp}"]
                continue
            lines += ["", f"#### {comp.get('type', '?')}", str(comp.get("description", ""))]
            for item in _as_list(comp.get("items")):
                if not isinstance(item, dict):
                    lines.append(f"- {item}")
                    continue
                name = item.get("name") or item.get("component") or "?"
                purpose = item.get("purpose") or item.get("description") or ""
                lines.append(f"- **{name}**: {purpose}")

    if impact:
        lines += [
            "",
            "## 📈 Impact Assessment",
            f"- **Files to be created:** {impact.get('filesCreated', '?')}",
            f"- **Files to be modified:** {impact.get('filesModified', '?')}",
            f"- **Estimated lines of code:** {impact.get('estimatedLinesOfCode', '?')}",
            f"- **Breaking changes:** {'⚠️ Yes' if impact.get('breakingChanges') else '✅ No'}",
            f"- **Requires restart:** {'🔄 Yes' if impact.get('requiresRestart') else '✅ No'}",
        ]

    required = _as_dict(plan.next_steps.get("requiredInput")).get("description")
    lines += [
        "",
        "## 🎯 Next Steps",
        str(plan.next_steps.get("message", "Provide the database schema to execute the plan.")),
        "",
        f"**Required Input:** {required or 'Database schema definition'}",
        "",
        "---",
        f"⚡ **Ready to execute!** Use this Plan ID for code generation: `{plan.plan_id}`",
    ]
    return "\n".join(lines)


# ═══════════════════════════════════════════════════════════════════
#  Execution / apply
# ═══════════════════════════════════════════════════════════════════


def format_generation_report(outcome: GenerationOutcome) -> str:
    execution = outcome.execution
    summary = execution.summary
    applied = outcome.applied

    lines = ["# 🎉 PostgreSQL Integration Completed Successfully!", ""]

    if outcome.plan is not None:
        analysis = outcome.plan.project_analysis
        lines += [
            "## 📋 Plan Details",
            f"- **Plan ID:** `{outcome.plan.plan_id}`",
            f"- **Framework:** {analysis.get('detectedFramework', 'Spring Boot')}",
            f"- **Base Package:** `{analysis.get('basePackage', 'com.example')}`",
            "",
        ]

    lines += [
        "## 📊 Execution Summary",
        f"- **Execution ID:** `{execution.execution_id}`",
        f"- **Tables Processed:** {summary.get('tablesProcessed', '?')}",
        f"- **Files Generated:** {summary.get('filesGenerated', execution.file_count)}",
        f"- **Files Modified:** {summary.get('filesModified', '?')}",
        f"- **Dependencies Added:** {summary.get('dependenciesAdded', '?')}",
        f"- **Total Lines of Code:** {summary.get('totalLinesOfCode', '?')}",
    ]
    if not outcome.apply_requested:
        lines.append("- **Files Applied:** Skipped (applyToProject = false)")
    else:
        lines.append(f"- **Files Applied to Project:** {applied.applied_count if applied else 0}")
    lines.append(f"- **Project Root:** `{outcome.project_root}`")

    lines += ["", "## 📁 Generated Components", ""]
    if execution.generated_files:
        for category in execution.generated_files:
            lines.append(f"### {category.name}")
            for f in category.descriptors:
                extra = f.model_extra or {}
                lines += [
                    f"- **{PurePosixPath(f.path).name}** ({extra.get('size', 0)} lines)",
                    f"  - 📂 Path: `{f.path}`",
                    f"  - 🔧 Action: {f.action.value}",
                ]
            lines.append("")
    else:
        lines += ["No files information available", ""]

    if applied is not None:
        if applied.applied_paths:
            lines += ["## ✅ Applied Files", ""]
            lines += [f"- {p}" for p in applied.applied_paths]
            lines.append("")
        if applied.backups:
            lines += ["## 💾 Backups", ""]
            lines += [f"- {b}" for b in applied.backups]
            lines.append("")
        if applied.skipped_paths:
            lines += ["## ⏭️ Skipped (no content)", ""]
            lines += [f"- {p}" for p in applied.skipped_paths]
            lines.append("")
        if applied.errors:
            lines += ["## ⚠️ Errors", ""]
            lines += [f"- {e}" for e in applied.errors]
            lines.append("")

    validation = execution.validation
    if validation.get("compilationCheck") or validation.get("dependencyCheck"):
        lines += [
            "## ✅ Quality Validation",
            _check_line("Compilation Check", validation.get("compilationCheck")),
            _check_line("Dependency Check", validation.get("dependencyCheck")),
            _check_line("Naming Conventions", validation.get("namingConventions")),
        ]
        score = _as_dict(validation.get("codeQuality")).get("score")
        if score is not None:
            lines.append(f"- **Code Quality Score:** {score}/100")
        lines.append("")

    lines += ["## 🚀 Next Steps", ""]
    if execution.post_execution_steps:
        steps = []
        for step in execution.post_execution_steps:
            flag = " 🔴 (Required)" if step.get("required") else " 🟡 (Optional)"
            text = f"{step.get('step', '-')}. **{step.get('action', '')}**{flag}\n   {step.get('description', '')}"
            if step.get("resource"):
                text += f"\n   📖 **Resource:** {step['resource']}"
            steps.append(text)
        lines.append("\n\n".join(steps))
    else:
        lines.append(DEFAULT_NEXT_STEPS)

    lines += ["", "---", _footer(outcome)]
    return "\n".join(lines)


def _footer(outcome: GenerationOutcome) -> str:
    if not outcome.apply_requested:
        return "📋 **Files generated but not applied. Set applyToProject: true to auto-apply.**"
    applied = outcome.applied
    if applied is None or applied.applied_count == 0:
        return "⚠️ **Files were generated but could not be applied. Check the file paths and permissions.**"
    if applied.errors:
        return f"⚠️ **Applied {applied.applied_count} file(s); {len(applied.errors)} failed (see Errors).**"
    return "✅ **All files have been applied to your project!**"


# ═══════════════════════════════════════════════════════════════════
#  Status
# ═══════════════════════════════════════════════════════════════════


def recommendations(status: IntegrationStatus) -> list[str]:
    c = status.components
    recs: list[str] = []
    if not c.dependencies:
        recs.append("- 📦 Add PostgreSQL dependencies using the integration plan")
    if not c.configuration:
        recs.append("- ⚙️ Configure database connection in application.yml")
    if not c.entities:
        recs.append("- 🏗️ Generate entity classes for your database tables")
    if not status.configured:
        recs.append("- 🚀 Run PostgreSQL integration to set up missing components")
    return recs


def format_status_report(status: IntegrationStatus, project_path: str) -> str:
    c = status.components
    recs = recommendations(status)
    overall = "✅ CONFIGURED" if status.configured else "❌ NOT CONFIGURED"
    lines = [
        "# 🔍 PostgreSQL Integration Status",
        "",
        f"## Overall Status: {overall}",
        "",
        "## 🧩 Component Status",
        f"- **Dependencies:** {_mark(c.dependencies)} JPA and PostgreSQL dependencies",
        f"- **Configuration:** {_mark(c.configuration)} Database connection configuration",
        f"- **Entities:** {_mark(c.entities)} JPA entity classes",
        f"- **Repositories:** {_mark(c.repositories)} Spring Data repositories",
        f"- **Services:** {_mark(c.services)} Service layer",
        f"- **Controllers:** {_mark(c.controllers)} REST controllers",
        "",
        "## 💡 Recommendations",
        "\n".join(recs) if recs else "✅ PostgreSQL integration is complete! No further action needed.",
        "",
        "---",
        f"📂 *Project Path: {project_path}*",
    ]
    return "\n".join(lines)
