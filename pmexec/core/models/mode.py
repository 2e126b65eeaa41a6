"""
Execution modes — the five fixed recipes of the dispatcher.
"""

from __future__ import annotations

from enum import StrEnum


class Mode(StrEnum):
    """Different ways in which a command shall be dealt with."""

    # Print the command that would be executed, and stop.
    PRINT_ONLY = "print-only"

    # Silently collect stdout and stderr combined. Print nothing.
    MUTE = "mute"

    # Print the command, run it, tee stdout and stderr combined.
    # Destroys colored stdout — use only when the output is needed.
    CHECK_ALL = "check-all"

    # Print the command, run it, tee stderr only. Keeps colored stdout.
    CHECK_ERR = "check-err"

    # Like CHECK_ERR, but ask for confirmation first.
    PROMPT = "prompt"
