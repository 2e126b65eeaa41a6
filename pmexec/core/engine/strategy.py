"""
Run strategies — how an operation reacts to dry-run, no-confirm and
no-cache settings.

Package-manager templates hand a ``Cmd`` plus a ``Strategy`` to
``run`` / ``just_run``; the strategy decides which mode the
dispatcher gets and which native flags are appended:

    dry_run    PRINT_CMD      → print the command, don't run it
               WITH_FLAGS     → run with e.g. ``--dry-run``
    prompt     NONE           → run in the requested mode
               CUSTOM_PROMPT  → use the confirmation gate unless no_confirm
               NATIVE_NO_CONFIRM(flags) → append e.g. ``-y`` when no_confirm
               NATIVE_CONFIRM(flags)    → append e.g. ``--confirm`` unless no_confirm
    no_cache   NONE / WITH_FLAGS → append e.g. ``--no-cache`` when no_cache
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from pmexec.core import context
from pmexec.core.engine.confirm import ConfirmationGate
from pmexec.core.engine.dispatcher import execute
from pmexec.core.errors import CommandStatusError, NoExitCodeError
from pmexec.core.models.command import Cmd
from pmexec.core.models.config import Config
from pmexec.core.models.mode import Mode
from pmexec.core.models.output import Output

logger = logging.getLogger(__name__)


# ── Strategy kinds ──────────────────────────────────────────────


class DryRunKind(StrEnum):
    PRINT_CMD = "print_cmd"
    WITH_FLAGS = "with_flags"


class PromptKind(StrEnum):
    NONE = "none"
    CUSTOM_PROMPT = "custom_prompt"
    NATIVE_NO_CONFIRM = "native_no_confirm"
    NATIVE_CONFIRM = "native_confirm"


class NoCacheKind(StrEnum):
    NONE = "none"
    WITH_FLAGS = "with_flags"


@dataclass(frozen=True)
class DryRunStrategy:
    kind: DryRunKind = DryRunKind.PRINT_CMD
    flags: tuple[str, ...] = ()

    @classmethod
    def with_flags(cls, *flags: str) -> DryRunStrategy:
        return cls(DryRunKind.WITH_FLAGS, flags)


@dataclass(frozen=True)
class PromptStrategy:
    kind: PromptKind = PromptKind.NONE
    flags: tuple[str, ...] = ()

    @classmethod
    def custom_prompt(cls) -> PromptStrategy:
        return cls(PromptKind.CUSTOM_PROMPT)

    @classmethod
    def native_no_confirm(cls, *flags: str) -> PromptStrategy:
        return cls(PromptKind.NATIVE_NO_CONFIRM, flags)

    @classmethod
    def native_confirm(cls, *flags: str) -> PromptStrategy:
        return cls(PromptKind.NATIVE_CONFIRM, flags)


@dataclass(frozen=True)
class NoCacheStrategy:
    kind: NoCacheKind = NoCacheKind.NONE
    flags: tuple[str, ...] = ()

    @classmethod
    def with_flags(cls, *flags: str) -> NoCacheStrategy:
        return cls(NoCacheKind.WITH_FLAGS, flags)


@dataclass(frozen=True)
class Strategy:
    """Bundle of the three per-operation strategies."""

    dry_run: DryRunStrategy = field(default_factory=DryRunStrategy)
    prompt: PromptStrategy = field(default_factory=PromptStrategy)
    no_cache: NoCacheStrategy = field(default_factory=NoCacheStrategy)


DEFAULT_STRATEGY = Strategy()


# ── Running ─────────────────────────────────────────────────────


def run(
    cmd: Cmd,
    mode: Mode | str = Mode.CHECK_ERR,
    strategy: Strategy = DEFAULT_STRATEGY,
    *,
    config: Config | None = None,
    gate: ConfirmationGate | None = None,
) -> Output:
    """Apply ``strategy`` under ``config`` and execute ``cmd``."""
    config = config if config is not None else context.get_config()
    mode = Mode(mode)
    helper = config.elevation_helper

    if config.dry_run:
        if strategy.dry_run.kind is DryRunKind.PRINT_CMD:
            return execute(cmd, Mode.PRINT_ONLY, helper=helper)
        cmd = cmd.add_flags(*strategy.dry_run.flags)

    if config.no_cache and strategy.no_cache.kind is NoCacheKind.WITH_FLAGS:
        cmd = cmd.add_flags(*strategy.no_cache.flags)

    prompt = strategy.prompt
    if prompt.kind is PromptKind.CUSTOM_PROMPT and not config.no_confirm:
        mode = Mode.PROMPT
    elif prompt.kind is PromptKind.NATIVE_NO_CONFIRM and config.no_confirm:
        cmd = cmd.add_flags(*prompt.flags)
    elif prompt.kind is PromptKind.NATIVE_CONFIRM and not config.no_confirm:
        cmd = cmd.add_flags(*prompt.flags)

    logger.debug("Strategy resolved mode=%s for %s", mode, cmd.build_display(helper))
    return execute(cmd, mode, gate=gate, helper=helper)


def just_run(
    cmd: Cmd,
    mode: Mode | str = Mode.CHECK_ERR,
    strategy: Strategy = DEFAULT_STRATEGY,
    *,
    config: Config | None = None,
    gate: ConfirmationGate | None = None,
) -> Output:
    """Like ``run``, but a non-zero exit is an error.

    Raises:
        CommandStatusError: The child exited with a non-zero code.
        NoExitCodeError: The child was terminated by a signal.
    """
    output = run(cmd, mode, strategy, config=config, gate=gate)
    if output.exit_code is None:
        raise NoExitCodeError(output)
    if output.exit_code != 0:
        raise CommandStatusError(output.exit_code, output)
    return output


def just_run_default(
    cmd: Cmd,
    *,
    config: Config | None = None,
) -> Output:
    """``just_run`` in CHECK_ERR mode with the default strategy."""
    return just_run(cmd, Mode.CHECK_ERR, DEFAULT_STRATEGY, config=config)
