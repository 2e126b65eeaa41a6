"""
Text operations — filter captured output and probe executables.

Used by package-manager templates that run a listing command in MUTE
mode and then keep only the lines matching the user's search terms
(pacman semantics: a line must match ALL terms).
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

import click

from pmexec.core.errors import InvalidPattern

logger = logging.getLogger(__name__)


def _compile(patterns: list[str] | tuple[str, ...]) -> list[re.Pattern[str]]:
    compiled = []
    for pat in patterns:
        try:
            compiled.append(re.compile(pat))
        except re.error as e:
            raise InvalidPattern(pat, str(e)) from e
    return compiled


def grep(text: str, patterns: list[str] | tuple[str, ...]) -> list[str]:
    """Return the lines of ``text`` that match every pattern.

    Raises:
        InvalidPattern: One of the patterns is not a valid regex.
    """
    regexes = _compile(patterns)
    return [
        line
        for line in text.splitlines()
        if all(rx.search(line) for rx in regexes)
    ]


def grep_print(text: str, patterns: list[str] | tuple[str, ...]) -> list[str]:
    """``grep`` and print the matching lines to stdout."""
    lines = grep(text, patterns)
    logger.debug("grep: %d/%d lines matched", len(lines), len(text.splitlines()))
    for line in lines:
        click.echo(line)
    return lines


def is_exe(name: str, path: str = "") -> bool:
    """Check if an executable exists by ``path`` or by ``name`` on $PATH.

    Pass ``""`` for the one you don't want to check.
    """
    if path and Path(path).exists():
        return True
    return bool(name) and shutil.which(name) is not None
