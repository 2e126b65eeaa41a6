"""
Execution outcome — captured bytes plus termination status.

``ExitStatus`` keeps "exited with a code" and "killed by a signal"
apart so that a missing code can never be mistaken for success.
``Output`` is what the dispatcher hands back to callers; its
``exit_code`` is the projection of the status (``None`` on signal).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class ExitStatus:
    """How a child process terminated."""

    code: int | None = None
    signal: int | None = None

    @classmethod
    def exited(cls, code: int) -> ExitStatus:
        return cls(code=code)

    @classmethod
    def signaled(cls, signum: int) -> ExitStatus:
        return cls(signal=signum)

    @classmethod
    def from_returncode(cls, returncode: int) -> ExitStatus:
        """Translate a ``Popen.returncode``.

        On POSIX a negative return code ``-N`` means the child was
        terminated by signal ``N``.
        """
        if returncode < 0:
            return cls.signaled(-returncode)
        return cls.exited(returncode)

    @property
    def killed(self) -> bool:
        return self.code is None

    @property
    def success(self) -> bool:
        return self.code == 0


class Output(BaseModel):
    """Result of one command execution.

    The default value (empty bytes, exit code 0) is the outcome of
    skipped executions: print-only mode and a declined confirmation.
    """

    model_config = ConfigDict(frozen=True)

    captured_bytes: bytes = b""
    exit_code: int | None = 0

    @classmethod
    def from_status(cls, captured_bytes: bytes, status: ExitStatus) -> Output:
        return cls(captured_bytes=captured_bytes, exit_code=status.code)

    @property
    def text(self) -> str:
        """Captured bytes decoded as UTF-8 (undecodable bytes replaced)."""
        return self.captured_bytes.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "exit_code": self.exit_code,
            "ok": self.ok,
            "output": self.text,
        }
