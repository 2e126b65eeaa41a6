"""
Console surface — status-labelled command lines and questions.

Everything the engine prints about a command (as opposed to the
command's own output) goes through here, on stdout:

       Running `brew install curl`
       Pending `sudo -S apt install curl`
    Proceed [Yes/all/no]:
"""

from __future__ import annotations

import click

from pmexec.core.models.command import Cmd

# ── Labels ──────────────────────────────────────────────────────

PROMPT_CANCELED = "Canceled"
PROMPT_PENDING = "Pending"
PROMPT_RUN = "Running"
PROMPT_INFO = "Info"
PROMPT_ERROR = "Error"

_LABEL_COLORS = {
    PROMPT_CANCELED: "yellow",
    PROMPT_PENDING: "yellow",
    PROMPT_RUN: "green",
    PROMPT_INFO: "cyan",
    PROMPT_ERROR: "red",
}

_LABEL_WIDTH = 9


def _label(label: str) -> str:
    return click.style(
        f"{label:>{_LABEL_WIDTH}}",
        fg=_LABEL_COLORS.get(label, "white"),
        bold=True,
    )


def print_cmd(cmd: Cmd, label: str, helper: str | None = None) -> None:
    """Print a command line with a status label."""
    rendered = cmd.build_display(helper) if helper else cmd.build_display()
    click.echo(f"{_label(label)} `{rendered}`")


def print_msg(msg: str, label: str = PROMPT_INFO, *, err: bool = False) -> None:
    """Print a free-form message with a status label."""
    click.echo(f"{_label(label)} {msg}", err=err)


def print_question(question: str, options: str) -> None:
    """Print ``<question> <options>: `` without a newline."""
    click.echo(f"{click.style(question, bold=True)} {options}: ", nl=False)
