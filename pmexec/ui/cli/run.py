"""
CLI commands for running commands through the engine.

Thin wrappers over ``pmexec.core.engine`` and ``pmexec.core.services``.
"""

from __future__ import annotations

import json
import shutil
import sys

import click

from pmexec.core.models.config import Config
from pmexec.core.models.mode import Mode


def _load_config(ctx: click.Context) -> Config:
    """Load config for this invocation and register it in the run context."""
    from pmexec.core import context
    from pmexec.core.config.loader import ConfigError, load_config

    try:
        cfg = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    context.set_config(cfg)
    return cfg


# ── Run ─────────────────────────────────────────────────────────


@click.command()
@click.argument("program", nargs=-1, required=True)
@click.option(
    "--mode",
    "-m",
    type=click.Choice([m.value for m in Mode]),
    default=Mode.CHECK_ERR.value,
    show_default=True,
    help="Execution mode.",
)
@click.option("--sudo", "elevate", is_flag=True, help="Run through sudo -S unless already root.")
@click.option("--kw", "keywords", multiple=True, help="Keyword argument (repeatable).")
@click.option("--flag", "flags", multiple=True, help="Option flag, e.g. --flag=-y (repeatable).")
@click.option("--dry-run", is_flag=True, help="Only print the command.")
@click.option("--yes", "-y", "no_confirm", is_flag=True, help="Never ask for confirmation.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the outcome as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    program: tuple[str, ...],
    mode: str,
    elevate: bool,
    keywords: tuple[str, ...],
    flags: tuple[str, ...],
    dry_run: bool,
    no_confirm: bool,
    as_json: bool,
) -> None:
    """Run PROGRAM [SUBCOMMAND...] in the chosen mode.

    Examples:

        pmexec run --mode check-all echo --kw hi

        pmexec run --sudo --mode prompt apt install --kw curl --flag=-y

        pmexec run --dry-run brew upgrade
    """
    from pmexec.core.engine.strategy import (
        DEFAULT_STRATEGY,
        PromptStrategy,
        Strategy,
    )
    from pmexec.core.console import PROMPT_ERROR, print_msg
    from pmexec.core.engine.strategy import run as run_with_strategy
    from pmexec.core.errors import ExecError
    from pmexec.core.models.command import Cmd

    cfg = _load_config(ctx)
    overrides = {}
    if dry_run:
        overrides["dry_run"] = True
    if no_confirm:
        overrides["no_confirm"] = True
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    cmd = Cmd(
        elevate=elevate,
        program_tokens=program,
        keywords=keywords,
        option_flags=flags,
    )

    # PROMPT goes through the custom-prompt strategy so that
    # no_confirm downgrades it to CHECK_ERR.
    selected = Mode(mode)
    strat = DEFAULT_STRATEGY
    if selected is Mode.PROMPT:
        selected = Mode.CHECK_ERR
        strat = Strategy(prompt=PromptStrategy.custom_prompt())

    try:
        output = run_with_strategy(cmd, selected, strat, config=cfg)
    except ExecError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(output.to_dict(), indent=2))

    if output.exit_code is None:
        print_msg("Command was terminated by a signal", PROMPT_ERROR, err=True)
        sys.exit(1)
    if output.exit_code != 0:
        print_msg(f"Command exited with code {output.exit_code}", PROMPT_ERROR, err=True)
        sys.exit(output.exit_code)


# ── Filter ──────────────────────────────────────────────────────


@click.command()
@click.argument("patterns", nargs=-1, required=True)
@click.option(
    "--file",
    "-f",
    "source",
    type=click.File("r"),
    default="-",
    help="Read from a file instead of stdin.",
)
def grep(patterns: tuple[str, ...], source) -> None:
    """Print lines matching ALL of PATTERNS (regular expressions)."""
    from pmexec.core.errors import InvalidPattern
    from pmexec.core.services.text_ops import grep_print

    text = source.read()
    try:
        lines = grep_print(text, patterns)
    except InvalidPattern as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    if not lines:
        sys.exit(1)


# ── Probe ───────────────────────────────────────────────────────


@click.command()
@click.argument("name")
@click.option("--path", default="", help="Also accept this exact path.")
def which(name: str, path: str) -> None:
    """Check whether an executable exists on $PATH (or at --path)."""
    from pmexec.core.services.text_ops import is_exe

    if not is_exe(name, path):
        click.secho(f"❌ {name} not found", fg="red")
        sys.exit(1)

    click.echo(shutil.which(name) or path)
