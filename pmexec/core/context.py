"""
Run context — process-wide state shared by every command of a run.

Two things live here:

    - the default ``ConfirmationGate`` (the "answer all" memory)
    - the loaded ``Config``

Both are set ONCE at startup by the entry point; callers that need
isolation (tests, embedding applications) pass their own gate/config
to ``execute`` / ``run`` explicitly instead.

    - CLI:    main.py  → context.set_config(load_config(...))
    - Tests:  conftest → context.reset()
"""

from __future__ import annotations

import threading
from typing import Optional

from pmexec.core.engine.confirm import ConfirmationGate
from pmexec.core.models.config import Config

_lock = threading.Lock()
_confirmation_gate: Optional[ConfirmationGate] = None
_config: Optional[Config] = None


def set_confirmation_gate(gate: ConfirmationGate) -> None:
    """Register the run-wide confirmation gate."""
    global _confirmation_gate
    with _lock:
        _confirmation_gate = gate


def get_confirmation_gate() -> ConfirmationGate:
    """Return the run-wide confirmation gate, creating it on first use."""
    global _confirmation_gate
    with _lock:
        if _confirmation_gate is None:
            _confirmation_gate = ConfirmationGate()
        return _confirmation_gate


def set_config(config: Config) -> None:
    """Register the configuration for the current process."""
    global _config
    with _lock:
        _config = config


def get_config() -> Config:
    """Return the current configuration, or defaults if none was set."""
    with _lock:
        return _config if _config is not None else Config()


def reset() -> None:
    """Forget all run state (new gate, default config)."""
    global _confirmation_gate, _config
    with _lock:
        _confirmation_gate = None
        _config = None
