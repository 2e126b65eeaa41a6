"""
Execution mode dispatcher — the single entry point of the engine.

    execute(cmd, mode) → Output

| Mode       | Prompts | Spawns       | Captured      | Live echo      |
|------------|---------|--------------|---------------|----------------|
| print-only | no      | no           | —             | command only   |
| mute       | no      | yes          | stdout+stderr | none           |
| check-all  | no      | yes          | stdout+stderr | stdout         |
| check-err  | no      | yes          | stderr        | stderr         |
| prompt     | yes     | if confirmed | stderr        | stderr         |

The dispatcher is stateless and never retries: errors from the
session propagate unchanged. A declined prompt is not an error — it
returns the default ``Output``.
"""

from __future__ import annotations

import logging

from pmexec.core import context
from pmexec.core.console import PROMPT_CANCELED, PROMPT_RUN, print_cmd
from pmexec.core.engine.confirm import ConfirmationGate
from pmexec.core.engine.privilege import ELEVATION_HELPER
from pmexec.core.engine.session import run_session
from pmexec.core.models.command import Cmd
from pmexec.core.models.mode import Mode
from pmexec.core.models.output import Output

logger = logging.getLogger(__name__)


def execute(
    cmd: Cmd,
    mode: Mode | str,
    *,
    gate: ConfirmationGate | None = None,
    helper: str = ELEVATION_HELPER,
) -> Output:
    """Execute ``cmd`` according to ``mode``.

    Args:
        cmd: The command to run.
        mode: One of the five execution modes.
        gate: Confirmation state for PROMPT mode (default: the
            run-wide gate from ``pmexec.core.context``).
        helper: Elevation helper program.

    Raises:
        InvalidCommand, SpawnFailed, IoFailure, WaitFailed
    """
    mode = Mode(mode)
    logger.debug("execute mode=%s cmd=%s", mode, cmd.build_display(helper))

    if mode is Mode.PRINT_ONLY:
        print_cmd(cmd, PROMPT_CANCELED, helper)
        return Output()

    if mode is Mode.MUTE:
        return _checkall(cmd, helper, mute=True)

    if mode is Mode.CHECK_ALL:
        print_cmd(cmd, PROMPT_RUN, helper)
        return _checkall(cmd, helper, mute=False)

    if mode is Mode.CHECK_ERR:
        print_cmd(cmd, PROMPT_RUN, helper)
        return _checkerr(cmd, helper, mute=False)

    return _prompt(cmd, helper, gate or context.get_confirmation_gate())


def _checkall(cmd: Cmd, helper: str, *, mute: bool) -> Output:
    """Run ``cmd`` collecting stdout and stderr combined."""
    return run_session(cmd.build_spawn_spec(helper), mute=mute)


def _checkerr(cmd: Cmd, helper: str, *, mute: bool) -> Output:
    """Run ``cmd`` collecting stderr only."""
    return run_session(cmd.build_spawn_spec(helper), collect_stderr_only=True, mute=mute)


def _prompt(cmd: Cmd, helper: str, gate: ConfirmationGate) -> Output:
    """Ask for confirmation, then behave like CHECK_ERR."""
    if not gate.confirm(cmd, helper):
        logger.debug("Declined: %s", cmd.build_display(helper))
        return Output()
    print_cmd(cmd, PROMPT_RUN, helper)
    return _checkerr(cmd, helper, mute=False)
