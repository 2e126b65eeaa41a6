"""
Confirmation gate — the interactive "Proceed [Yes/all/no]" protocol.

State machine (monotonic within a run):

    UNDECIDED ──"a"/"all"──► ALWAYS_YES

- UNDECIDED: every gated command shows its pending command line and
  asks. ``""``/``y``/``yes`` proceeds, ``n``/``no`` skips, anything
  else asks again.
- ALWAYS_YES: every gated command proceeds without any I/O.

A lock is held across the whole prompt-and-answer cycle, so concurrent
callers see one prompt at a time and never race on the state.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import TextIO

import click

from pmexec.core.console import PROMPT_PENDING, print_cmd, print_question
from pmexec.core.errors import IoFailure
from pmexec.core.models.command import Cmd

logger = logging.getLogger(__name__)

ANSWERS_YES = ("", "y", "yes")
ANSWERS_ALL = ("a", "all")
ANSWERS_NO = ("n", "no")


def prompt(
    question: str,
    options: str,
    expected: tuple[str, ...] | list[str],
    *,
    case_sensitive: bool = False,
    input_stream: TextIO | None = None,
) -> str:
    """Ask ``question`` until one of ``expected`` is answered.

    Without ``case_sensitive``, ``expected`` must be lower case.

    Raises:
        IoFailure: The input stream ended before a valid answer.
    """
    while True:
        print_question(question, options)
        stream = input_stream if input_stream is not None else sys.stdin
        try:
            line = stream.readline()
        except (OSError, ValueError) as e:
            raise IoFailure(f"Error while reading user input: {e}") from e
        if not line:
            click.echo()
            raise IoFailure("Input closed while waiting for an answer")

        answer = line.rstrip("\r\n")
        if not case_sensitive:
            answer = answer.lower()
        if answer in expected:
            return answer


class ConfirmationGate:
    """Shared consent state for one run.

    Pass the same gate to every ``execute`` call of a batch; answering
    "all" once covers the rest of the batch. Tests create their own
    gates with a fake ``input_stream``.
    """

    def __init__(
        self,
        *,
        always_yes: bool = False,
        input_stream: TextIO | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._always_yes = always_yes
        self._input = input_stream

    @property
    def always_yes(self) -> bool:
        with self._lock:
            return self._always_yes

    def confirm(self, cmd: Cmd, helper: str | None = None) -> bool:
        """Ask whether ``cmd`` should run. True means proceed."""
        with self._lock:
            if self._always_yes:
                return True

            print_cmd(cmd, PROMPT_PENDING, helper)
            answer = prompt(
                "Proceed",
                "[Yes/all/no]",
                ANSWERS_YES + ANSWERS_ALL + ANSWERS_NO,
                input_stream=self._input,
            )

            if answer in ANSWERS_ALL:
                self._always_yes = True
                logger.debug("Confirmation gate: answering yes to all from now on")
                return True
            return answer in ANSWERS_YES
