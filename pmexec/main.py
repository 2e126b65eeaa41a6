"""
pmexec — CLI entrypoint.

Usage:
    python -m pmexec.main --help
    python -m pmexec.main run --mode check-all echo --kw hi
    python -m pmexec.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from pmexec import __version__
from pmexec.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="pmexec")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to pmexec.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """pmexec — run package-manager commands under a chosen execution mode."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("PMEXEC_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("PMEXEC_LOG_FILE"),
        log_file_level=os.environ.get("PMEXEC_LOG_FILE_LEVEL"),
    )


@cli.group()
def config() -> None:
    """Run configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate pmexec.yml configuration."""
    from pmexec.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        source = result.config_path or "defaults"
        click.echo(f"   Source: {source}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the effective configuration (file + environment)."""
    from pmexec.core.config.loader import ConfigError, load_config

    try:
        cfg = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    data = cfg.model_dump(mode="json")
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.secho("⚙️  Effective configuration:", fg="cyan", bold=True)
    for key, value in data.items():
        click.echo(f"   {key:<18} {value}")
    click.echo()


# ── Register sub-commands from pmexec/ui/cli/ ─────────────────────

from pmexec.ui.cli.run import grep, run, which

cli.add_command(run)
cli.add_command(grep)
cli.add_command(which)


if __name__ == "__main__":
    cli()
