"""
Shared test fixtures and configuration.
"""

import io
import sys
from pathlib import Path

import pytest

from pmexec.core import context
from pmexec.core.engine import privilege
from pmexec.core.engine.confirm import ConfirmationGate
from pmexec.core.models.command import Cmd


@pytest.fixture(autouse=True)
def fresh_context():
    """Every test starts with a new confirmation gate and default config."""
    context.reset()
    yield
    context.reset()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PMEXEC_* variables from the developer's shell out of tests."""
    for var in (
        "PMEXEC_DRY_RUN",
        "PMEXEC_NEEDED",
        "PMEXEC_NO_CONFIRM",
        "PMEXEC_NO_CACHE",
        "PMEXEC_DEFAULT_PM",
        "PMEXEC_LOG_LEVEL",
        "PMEXEC_LOG_FILE",
        "PMEXEC_LOG_FILE_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def unprivileged(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend the test process is not root."""
    monkeypatch.setattr(privilege, "is_privileged", lambda: False)


@pytest.fixture
def privileged(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pretend the test process is root."""
    monkeypatch.setattr(privilege, "is_privileged", lambda: True)


@pytest.fixture
def py_cmd():
    """Build a Cmd that runs a Python snippet with the current interpreter."""

    def _make(script: str) -> Cmd:
        return Cmd.new(sys.executable, "-c").with_keywords(script)

    return _make


@pytest.fixture
def gate_with_input():
    """Build a ConfirmationGate that reads answers from a string."""

    def _make(answers: str) -> ConfirmationGate:
        return ConfirmationGate(input_stream=io.StringIO(answers))

    return _make
