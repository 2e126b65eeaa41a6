"""
Config model — run-wide settings loaded from pmexec.yml.

The run strategies read ``dry_run``, ``no_confirm`` and ``no_cache``;
the dispatcher itself only knows about modes. ``needed`` and
``default_pm`` are carried for package-manager templates built on this
engine (e.g. appending ``--needed`` to an install, picking the manager
when several are installed) and are not interpreted here.
"""

from __future__ import annotations

from pydantic import BaseModel

from pmexec.core.engine.privilege import ELEVATION_HELPER


class Config(BaseModel):
    """Run configuration."""

    dry_run: bool = False           # print commands instead of running them
    needed: bool = False            # templates: skip up-to-date packages
    no_confirm: bool = False        # never ask for confirmation
    no_cache: bool = False          # drop package caches after the operation
    default_pm: str | None = None   # templates: preferred package manager

    elevation_helper: str = ELEVATION_HELPER
