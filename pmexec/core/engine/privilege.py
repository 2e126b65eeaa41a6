"""
Privilege escalation policy.

Decides whether a command must be wrapped with the elevation helper.
The decision is a pure function of two booleans: whether the caller
asked for elevation, and whether this process is already privileged.
Running as root therefore never double-escalates.

The helper itself (``sudo -S``) reads the password from the child's
own stdin, which is inherited from the terminal — this process never
sees it.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

# Elevation helper and its "read password from stdin" switch
ELEVATION_HELPER = "sudo"
ELEVATION_FLAG = "-S"


def is_privileged() -> bool:
    """Whether the current process runs as root / administrator."""
    if os.name == "nt":
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError):
            logger.debug("IsUserAnAdmin unavailable, assuming unprivileged")
            return False
    return os.geteuid() == 0


def needs_elevation(requested: bool, privileged: bool) -> bool:
    """Elevate only when asked to and not already privileged."""
    return requested and not privileged


def elevation_prefix(helper: str = ELEVATION_HELPER) -> list[str]:
    """Tokens placed in front of an elevated command."""
    return [helper, ELEVATION_FLAG]
