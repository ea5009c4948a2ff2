"""
pgbridge — CLI entrypoint.

Usage:
    pgbridge serve                 # MCP server on stdio (what the IDE runs)
    pgbridge health
    pgbridge status ./my-service
    pgbridge apply execution.json --project ./my-service
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pgbridge import __version__
from pgbridge.core.config.loader import ConfigError, load_config
from pgbridge.core.errors import BridgeError
from pgbridge.core.models.config import BridgeConfig
from pgbridge.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="pgbridge")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to pgbridge.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """pgbridge — local MCP bridge to the PostgreSQL code-generation service."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)
    ctx.obj["config"] = config

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = config.log_level

    setup_logging(
        level=level,
        log_file=config.log_file,
        quiet_third_party=not debug,
    )


def get_config(ctx: click.Context) -> BridgeConfig:
    """The configuration loaded by the top-level group."""
    return ctx.obj["config"]


@cli.command()
@click.option("--skip-health-check", is_flag=True, help="Start without probing the generation service.")
@click.pass_context
def serve(ctx: click.Context, skip_health_check: bool) -> None:
    """Run the MCP server on stdio.

    Verifies the generation service first; exits 1 if it is not UP.
    """
    from pgbridge.adapters.generation_client import GenerationClient
    from pgbridge.ui.mcp.server import run_server

    config = get_config(ctx)

    if not skip_health_check:
        try:
            GenerationClient.from_config(config).check_connection()
        except BridgeError as e:
            click.secho(f"❌ {e.label}: {e}", fg="red", err=True)
            sys.exit(1)

    run_server(config)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def health(ctx: click.Context, as_json: bool) -> None:
    """Check that the generation service is reachable and UP."""
    from pgbridge.adapters.generation_client import GenerationClient

    config = get_config(ctx)
    client = GenerationClient.from_config(config)

    try:
        data = client.health()
        error = None
    except BridgeError as e:
        data, error = {}, f"{e.label}: {e}"

    status = data.get("status")
    ok = error is None and status == "UP"

    if as_json:
        click.echo(json.dumps(
            {"url": client.base_url, "ok": ok, "status": status, "error": error},
            indent=2,
        ))
        sys.exit(0 if ok else 1)

    if ok:
        click.secho(f"✅ Generation service is UP ({client.base_url})", fg="green")
        return

    click.secho(f"❌ {error or f'Service reported status {status!r}'}", fg="red")
    click.echo(f"   URL: {client.base_url}")
    sys.exit(1)


# ── Register sub-commands ─────────────────────────────────────────

from pgbridge.ui.cli.integration import apply, backups, status  # noqa: E402

cli.add_command(status)
cli.add_command(apply)
cli.add_command(backups)


if __name__ == "__main__":
    cli()
