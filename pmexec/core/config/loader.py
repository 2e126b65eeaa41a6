"""
Configuration loader — reads pmexec.yml into a Config model.

Precedence (highest first):
    PMEXEC_* environment variables  >  pmexec.yml  >  built-in defaults

A missing pmexec.yml is not an error: the defaults apply. A present
but unreadable or invalid one is.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from pmexec.core.models.config import Config

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "pmexec.yml"

# Environment overrides: variable → Config field
_ENV_OVERRIDES = {
    "PMEXEC_DRY_RUN": "dry_run",
    "PMEXEC_NEEDED": "needed",
    "PMEXEC_NO_CONFIRM": "no_confirm",
    "PMEXEC_NO_CACHE": "no_cache",
    "PMEXEC_DEFAULT_PM": "default_pm",
}

_TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigError(Exception):
    """Raised when pmexec configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for pmexec.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to pmexec.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_config_data(path: Path) -> dict[str, Any]:
    """Read and parse a config file into a raw mapping.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "pmexec" key or be flat
    section = data.get("pmexec", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a mapping under 'pmexec' in {path}")
    return dict(section)


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, key in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value is None:
            continue
        if Config.model_fields[key].annotation is bool:
            overrides[key] = value.strip().lower() in _TRUE_VALUES
        else:
            overrides[key] = value.strip() or None
    return overrides


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> Config:
    """Load and validate the run configuration.

    Args:
        path: Explicit path to pmexec.yml. If None, searches upward
            and falls back to defaults when nothing is found.
        env: Environment mapping for overrides (default: os.environ).

    Returns:
        Validated Config model.

    Raises:
        ConfigError: If the file is invalid.
    """
    if path is None:
        path = find_config_file()

    data = read_config_data(path) if path is not None else {}
    data.update(_env_overrides(os.environ if env is None else env))

    try:
        config = Config.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid pmexec configuration: {e}") from e

    logger.info(
        "Config loaded from %s (dry_run=%s, no_confirm=%s)",
        path or "defaults",
        config.dry_run,
        config.no_confirm,
    )
    return config
