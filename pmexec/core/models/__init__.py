"""
Domain models — Pydantic types for the execution engine.

All models are re-exported here for convenient access:

    from pmexec.core.models import Cmd, Mode, Output, ExitStatus, Config
"""

from pmexec.core.models.command import Cmd, SpawnSpec
from pmexec.core.models.config import Config
from pmexec.core.models.mode import Mode
from pmexec.core.models.output import ExitStatus, Output

__all__ = [
    # command.py
    "Cmd",
    "SpawnSpec",
    # config.py
    "Config",
    # mode.py
    "Mode",
    # output.py
    "ExitStatus",
    "Output",
]
