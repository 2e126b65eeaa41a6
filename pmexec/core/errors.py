"""
Error taxonomy — every failure the engine can surface.

The engine never swallows errors and never retries. Callers get one
of these typed exceptions and decide what to tell the user.

    ExecError
    ├── InvalidCommand       malformed command value (empty program)
    ├── SpawnFailed          executable not found / not launchable
    ├── IoFailure            stream read/write failure mid-execution
    ├── WaitFailed           OS-level failure querying the exit status
    ├── InvalidPattern       malformed regular expression for grep
    ├── CommandStatusError   child exited with a non-zero code
    └── NoExitCodeError      child was terminated by a signal

``ConfigError`` lives in ``pmexec.core.config.loader`` next to the
code that raises it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pmexec.core.models.output import Output


class ExecError(Exception):
    """Base class for all engine errors."""


class InvalidCommand(ExecError):
    """Raised when a command value cannot be turned into a process."""


class SpawnFailed(ExecError):
    """Raised when the child process could not be launched."""


class IoFailure(ExecError):
    """Raised when reading or writing a stream fails mid-execution.

    Any partially captured output is discarded.
    """


class WaitFailed(ExecError):
    """Raised when the exit status of the child could not be obtained."""


class InvalidPattern(ExecError):
    """Raised when a user-supplied search pattern is not a valid regex."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern `{pattern}`: {reason}")


class CommandStatusError(ExecError):
    """Raised by ``just_run`` when the child exits with a non-zero code."""

    def __init__(self, code: int, output: Output) -> None:
        self.code = code
        self.output = output
        super().__init__(f"Command failed with exit code {code}")


class NoExitCodeError(ExecError):
    """Raised by ``just_run`` when the child was killed by a signal."""

    def __init__(self, output: Output) -> None:
        self.output = output
        super().__init__("Command was terminated by a signal")
