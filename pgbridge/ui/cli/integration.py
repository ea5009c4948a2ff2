"""
CLI commands for the local integration engine.

Thin wrappers over ``pgbridge.core.use_cases.status`` and
``pgbridge.core.services.apply_ops``; useful for replaying a saved
execution response without going through an IDE.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click

from pgbridge.core.errors import BridgeError


def _load_categories(file: Path) -> list[Any]:
    """Read categories from an execution response or a bare list."""
    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Cannot read {file}: {e}") from e

    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("generatedFiles"), list):
        return data["generatedFiles"]
    raise click.ClickException(
        f"{file}: expected a list of categories or an object with 'generatedFiles'"
    )


@click.command()
@click.argument("project_path", default=".")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, project_path: str, as_json: bool) -> None:
    """Show which PostgreSQL integration pieces a project already has."""
    from pgbridge.core.use_cases.reports import recommendations
    from pgbridge.core.use_cases.status import get_integration_status

    try:
        root, result = get_integration_status(ctx.obj["config"], project_path)
    except BridgeError as e:
        click.secho(f"❌ {e.label}: {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({"projectPath": root, **result.model_dump()}, indent=2))
        return

    if result.configured:
        click.secho(f"\n✅ PostgreSQL integration configured  ({root})", fg="green", bold=True)
    else:
        click.secho(f"\n❌ PostgreSQL integration not configured  ({root})", fg="red", bold=True)

    for name, present in result.components.model_dump().items():
        marker = click.style("✓", fg="green") if present else click.style("✗", fg="red")
        click.echo(f"   {marker} {name}")

    recs = recommendations(result)
    if recs and not ctx.obj.get("quiet"):
        click.echo()
        for rec in recs:
            click.echo(f"   {rec}")
    click.echo()


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--project", "-p", "project_path", default=".", help="Project root (default: auto-detect).")
@click.option(
    "--strategy",
    type=click.Choice(["smart", "append", "replace"]),
    default="smart",
    show_default=True,
    help="Merge strategy for files that set none.",
)
@click.option("--no-backup", is_flag=True, help="Do not back up files before changing them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def apply(
    ctx: click.Context,
    file: Path,
    project_path: str,
    strategy: str,
    no_backup: bool,
    as_json: bool,
) -> None:
    """Apply generated files from FILE (JSON) to a project.

    FILE is a saved execution response (with ``generatedFiles``) or a
    bare list of categories.

    Examples:

        pgbridge apply execution.json --project ./orders-service

        pgbridge apply files.json --strategy replace --no-backup
    """
    from pgbridge.core.services.apply_ops import apply_generated_files
    from pgbridge.core.services.project_paths import resolve_project_root

    config = ctx.obj["config"]
    categories = _load_categories(file)

    try:
        root = resolve_project_root(project_path, ide_path=config.ide_project_path)
        result = apply_generated_files(
            root,
            categories,
            auto_backup=config.auto_backup and not no_backup,
            backup_dir=config.backup_dir,
            default_strategy=strategy,
        )
    except BridgeError as e:
        click.secho(f"❌ {e.label}: {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    click.secho(f"\n📁 Applied {result.applied_count} file(s) to {root}", fg="cyan", bold=True)
    for path in result.applied_paths:
        click.echo(f"   ✓ {path}")
    if result.backups:
        click.secho(f"\n💾 Backups: {len(result.backups)}", fg="white", bold=True)
        for backup in result.backups:
            click.echo(f"   • {backup}")
    if result.skipped_paths:
        click.secho("\n⏭️  Skipped (no content):", fg="yellow")
        for path in result.skipped_paths:
            click.echo(f"   • {path}")
    if result.errors:
        click.secho("\n❌ Errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")
        click.echo()
        sys.exit(1)
    click.echo()


@click.command()
@click.argument("project_path", default=".")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def backups(ctx: click.Context, project_path: str, as_json: bool) -> None:
    """List files backed up before an apply, newest first."""
    from pgbridge.core.services.backup_ops import BackupManager
    from pgbridge.core.services.project_paths import resolve_project_root

    config = ctx.obj["config"]
    try:
        root = resolve_project_root(project_path, ide_path=config.ide_project_path)
    except BridgeError as e:
        click.secho(f"❌ {e.label}: {e}", fg="red")
        sys.exit(1)

    manager = BackupManager(root, config.backup_dir)
    entries = manager.list_backups()

    if as_json:
        click.echo(json.dumps({"backupDir": str(manager.backup_dir), "backups": entries}, indent=2))
        return

    if not entries:
        click.secho(f"\n💾 No backups in {manager.backup_dir}\n", fg="yellow")
        return

    click.secho(f"\n💾 {len(entries)} backup(s) in {manager.backup_dir}", fg="cyan", bold=True)
    for entry in entries:
        click.echo(f"   • {entry['filename']}  ({entry['size_bytes']} bytes)")
    click.echo()
