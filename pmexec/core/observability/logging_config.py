"""
Logging configuration — one call from the CLI entrypoint.

    pmexec --debug run ...            → DEBUG on stderr
    PMEXEC_LOG_LEVEL=INFO pmexec ...  → INFO on stderr
    PMEXEC_LOG_FILE=run.log           → plus a full-detail file log

The console handler writes to stderr: child stdout is teed to stdout
and must stay clean for callers that parse it. At DEBUG the thread
name is shown, which tells session readers and the waiter apart.
"""

from __future__ import annotations

import logging
import sys

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d [%(threadName)s] — %(message)s"

# Console format per level threshold, most verbose first
_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT = ("%(message)s", None)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with pmexec's.

    Args:
        level: Console level name.
        log_file: Optional log file path.
        log_file_level: File level name (default: same as ``level``).
    """
    console_level = _parse_level(level)
    fmt, datefmt = next(
        ((f, d) for threshold, f, d in _CONSOLE_FORMATS if console_level <= threshold),
        _CONSOLE_DEFAULT,
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(_parse_level(log_file_level) if log_file_level else console_level)
        file_handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    # A closed stderr (e.g. piped into `head`) must not crash a run
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
