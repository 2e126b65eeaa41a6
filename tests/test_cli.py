"""
Tests for CLI commands — run, grep, which, config and global options.
"""

import json
import sys
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from pmexec.main import cli


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every CLI test from an empty directory (no pmexec.yml)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "package-manager commands" in result.output
        for name in ("run", "grep", "which", "config"):
            assert name in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestRunCommand:
    def test_dry_run_prints_only(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "--dry-run", "brew", "upgrade"])
        assert result.exit_code == 0
        assert "Canceled" in result.output
        assert "`brew upgrade`" in result.output

    def test_print_only_mode(self):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["run", "--mode", "print-only", "--kw", "curl", "--flag=-y", "apt", "install"],
        )
        assert result.exit_code == 0
        assert "`apt install curl -y`" in result.output

    def test_dry_run_from_config_file(self, isolated_cwd: Path):
        (isolated_cwd / "pmexec.yml").write_text("dry_run: true\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "--", "pacman", "-Syu"])
        assert result.exit_code == 0
        assert "Canceled" in result.output

    def test_check_all_echoes_child_output(self):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["run", "--mode", "check-all", "--", sys.executable, "-c", "print('hello from child')"],
        )
        assert result.exit_code == 0
        assert "Running" in result.output
        assert "hello from child" in result.output

    def test_mute_json(self):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["run", "--mode", "mute", "--json", "--", sys.executable, "-c", "print('quiet')"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["exit_code"] == 0
        assert data["ok"] is True
        assert data["output"].strip() == "quiet"

    def test_exit_code_propagates(self):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["run", "--mode", "mute", "--", sys.executable, "-c", "import sys; sys.exit(5)"],
        )
        assert result.exit_code == 5
        assert "exited with code 5" in result.output

    def test_spawn_failure(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "definitely-not-a-real-binary-xyz"])
        assert result.exit_code == 1
        assert "❌" in result.output

    def test_prompt_declined(self):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["run", "--mode", "prompt", "definitely-not-a-real-binary-xyz"],
            input="n\n",
        )
        assert result.exit_code == 0
        assert "Pending" in result.output
        assert "Proceed [Yes/all/no]" in result.output

    def test_prompt_skipped_with_yes(self):
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["run", "--mode", "prompt", "--yes", "--", sys.executable, "-c", "pass"],
        )
        assert result.exit_code == 0
        assert "Proceed" not in result.output
        assert "Running" in result.output

    def test_prompt_eof_is_an_error(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "--mode", "prompt", "brew", "upgrade"], input="")
        assert result.exit_code == 1
        assert "❌" in result.output

    def test_bad_config_file(self, isolated_cwd: Path):
        (isolated_cwd / "pmexec.yml").write_text("dry_run: [oops\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["run", "brew"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output


class TestGrepCommand:
    LISTING = "core/curl 8.5.0-1\nextra/fish 3.7.0-1\ncommunity/fish-lsp 1.0.0-1\n"

    def test_matches(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["grep", "fish", "lsp"], input=self.LISTING)
        assert result.exit_code == 0
        assert result.output == "community/fish-lsp 1.0.0-1\n"

    def test_no_match(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["grep", "vim"], input=self.LISTING)
        assert result.exit_code == 1
        assert result.output == ""

    def test_invalid_pattern(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["grep", "[oops"], input=self.LISTING)
        assert result.exit_code == 2
        assert "Invalid pattern" in result.output

    def test_from_file(self, isolated_cwd: Path):
        listing = isolated_cwd / "listing.txt"
        listing.write_text(self.LISTING)
        runner = CliRunner()
        result = runner.invoke(cli, ["grep", "-f", str(listing), "curl"])
        assert result.exit_code == 0
        assert "core/curl" in result.output


class TestWhichCommand:
    def test_not_found(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["which", "definitely-not-a-real-binary-xyz"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_by_path(self, isolated_cwd: Path):
        tool = isolated_cwd / "tool"
        tool.write_text("")
        runner = CliRunner()
        result = runner.invoke(cli, ["which", "definitely-not-a-real-binary-xyz", "--path", str(tool)])
        assert result.exit_code == 0
        assert str(tool) in result.output


class TestConfigCommands:
    def _write(self, directory: Path) -> Path:
        content = textwrap.dedent("""\
            no_confirm: true
            default_pm: apt
        """)
        path = directory / "pmexec.yml"
        path.write_text(content)
        return path

    def test_check_defaults(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "defaults" in result.output

    def test_check_explicit_file(self, isolated_cwd: Path):
        path = self._write(isolated_cwd)
        runner = CliRunner()
        result = runner.invoke(cli, ["--config", str(path), "config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["config"]["default_pm"] == "apt"

    def test_check_invalid(self, isolated_cwd: Path):
        (isolated_cwd / "pmexec.yml").write_text("- not\n- a mapping\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "check"])
        assert result.exit_code == 1
        assert "Configuration errors" in result.output

    def test_show(self, isolated_cwd: Path):
        self._write(isolated_cwd)
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "Effective configuration" in result.output
        assert "no_confirm" in result.output

    def test_show_json_with_env_override(self, isolated_cwd: Path, monkeypatch: pytest.MonkeyPatch):
        self._write(isolated_cwd)
        monkeypatch.setenv("PMEXEC_DRY_RUN", "1")
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["dry_run"] is True
        assert data["no_confirm"] is True
