"""
Tests for run strategies — dry-run, prompt and no-cache handling.
"""

import pytest

from pmexec.core import context
from pmexec.core.engine import strategy as strategy_mod
from pmexec.core.engine.strategy import (
    DryRunStrategy,
    NoCacheStrategy,
    PromptStrategy,
    Strategy,
    just_run,
    just_run_default,
    run,
)
from pmexec.core.errors import CommandStatusError, NoExitCodeError
from pmexec.core.models import Cmd, Config, Mode, Output

CMD = Cmd.new("pkg", "install").with_keywords("curl")


@pytest.fixture
def executed(monkeypatch: pytest.MonkeyPatch) -> list:
    """Record (cmd, mode, helper) handed to the dispatcher."""
    calls: list = []

    def fake_execute(cmd, mode, *, gate=None, helper="sudo"):
        calls.append((cmd, Mode(mode), helper))
        return Output()

    monkeypatch.setattr(strategy_mod, "execute", fake_execute)
    return calls


class TestDryRun:
    def test_print_cmd_switches_to_print_only(self, executed):
        run(CMD, Mode.CHECK_ERR, config=Config(dry_run=True))
        assert executed[0][1] is Mode.PRINT_ONLY
        assert executed[0][0] == CMD

    def test_with_flags_appends_native_flag(self, executed):
        strat = Strategy(dry_run=DryRunStrategy.with_flags("--dry-run"))
        run(CMD, Mode.CHECK_ERR, strat, config=Config(dry_run=True))
        cmd, mode, _ = executed[0]
        assert mode is Mode.CHECK_ERR
        assert cmd.option_flags == ("--dry-run",)

    def test_not_dry_run_leaves_command_alone(self, executed):
        strat = Strategy(dry_run=DryRunStrategy.with_flags("--dry-run"))
        run(CMD, Mode.CHECK_ALL, strat, config=Config())
        assert executed[0] == (CMD, Mode.CHECK_ALL, "sudo")

    def test_print_cmd_skips_other_flags(self, executed):
        strat = Strategy(
            prompt=PromptStrategy.native_confirm("--confirm"),
            no_cache=NoCacheStrategy.with_flags("--no-cache"),
        )
        run(CMD, Mode.CHECK_ERR, strat, config=Config(dry_run=True, no_cache=True))
        assert executed[0][0].option_flags == ()


class TestPrompt:
    def test_custom_prompt_uses_prompt_mode(self, executed):
        strat = Strategy(prompt=PromptStrategy.custom_prompt())
        run(CMD, Mode.CHECK_ERR, strat, config=Config())
        assert executed[0][1] is Mode.PROMPT

    def test_custom_prompt_skipped_with_no_confirm(self, executed):
        strat = Strategy(prompt=PromptStrategy.custom_prompt())
        run(CMD, Mode.CHECK_ERR, strat, config=Config(no_confirm=True))
        assert executed[0][1] is Mode.CHECK_ERR

    @pytest.mark.parametrize("no_confirm, expected", [(True, ("-y",)), (False, ())])
    def test_native_no_confirm(self, executed, no_confirm, expected):
        strat = Strategy(prompt=PromptStrategy.native_no_confirm("-y"))
        run(CMD, Mode.CHECK_ERR, strat, config=Config(no_confirm=no_confirm))
        assert executed[0][0].option_flags == expected

    @pytest.mark.parametrize("no_confirm, expected", [(True, ()), (False, ("--confirm",))])
    def test_native_confirm(self, executed, no_confirm, expected):
        strat = Strategy(prompt=PromptStrategy.native_confirm("--confirm"))
        run(CMD, Mode.CHECK_ERR, strat, config=Config(no_confirm=no_confirm))
        assert executed[0][0].option_flags == expected


class TestNoCache:
    def test_flags_added_when_enabled(self, executed):
        strat = Strategy(no_cache=NoCacheStrategy.with_flags("--no-cache"))
        run(CMD, config=Config(no_cache=True), strategy=strat)
        assert executed[0][0].option_flags == ("--no-cache",)

    def test_default_strategy_ignores_no_cache(self, executed):
        run(CMD, config=Config(no_cache=True))
        assert executed[0][0].option_flags == ()

    def test_flags_accumulate_in_order(self, executed):
        strat = Strategy(
            dry_run=DryRunStrategy.with_flags("--dry-run"),
            prompt=PromptStrategy.native_no_confirm("-y"),
            no_cache=NoCacheStrategy.with_flags("--no-cache"),
        )
        cfg = Config(dry_run=True, no_confirm=True, no_cache=True)
        run(CMD.with_flags("-q"), strategy=strat, config=cfg)
        assert executed[0][0].option_flags == ("-q", "--dry-run", "--no-cache", "-y")


class TestConfigSource:
    def test_helper_comes_from_config(self, executed):
        run(CMD, config=Config(elevation_helper="doas"))
        assert executed[0][2] == "doas"

    def test_falls_back_to_context_config(self, executed):
        context.set_config(Config(dry_run=True))
        run(CMD)
        assert executed[0][1] is Mode.PRINT_ONLY


class TestJustRun:
    def test_success(self, py_cmd):
        out = just_run(py_cmd("print('fine')"), Mode.MUTE, config=Config())
        assert out.exit_code == 0
        assert out.captured_bytes.strip() == b"fine"

    def test_nonzero_exit_raises(self, py_cmd):
        with pytest.raises(CommandStatusError) as exc_info:
            just_run(py_cmd("import sys; sys.stderr.write('bad'); sys.exit(3)"), Mode.MUTE, config=Config())
        assert exc_info.value.code == 3
        assert exc_info.value.output.captured_bytes == b"bad"

    def test_signal_raises(self, monkeypatch):
        monkeypatch.setattr(
            strategy_mod, "execute", lambda *a, **kw: Output(exit_code=None)
        )
        with pytest.raises(NoExitCodeError):
            just_run(CMD, config=Config())

    def test_dry_run_never_fails(self, executed):
        assert just_run(CMD, config=Config(dry_run=True)) == Output()

    def test_just_run_default_is_check_err(self, executed):
        just_run_default(CMD, config=Config())
        assert executed[0][1] is Mode.CHECK_ERR
