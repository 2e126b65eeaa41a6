"""
Config check use case — validate pmexec.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pmexec.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    read_config_data,
)
from pmexec.core.models.config import Config
from pmexec.core.services.text_ops import is_exe


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: Config | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "config": self.config.model_dump(mode="json") if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate the run configuration and report issues.

    Args:
        config_path: Optional explicit path to pmexec.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.warnings.append("No pmexec.yml found, using defaults.")
    result.config_path = config_path

    # Load and validate
    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if config_path is not None:
        unknown = sorted(set(read_config_data(config_path)) - set(Config.model_fields))
        if unknown:
            result.warnings.append(f"Unknown keys ignored: {', '.join(unknown)}")

    if not is_exe(config.elevation_helper, config.elevation_helper):
        result.warnings.append(
            f"Elevation helper '{config.elevation_helper}' not found on PATH."
        )

    if config.dry_run and config.no_confirm:
        result.warnings.append("no_confirm has no effect while dry_run is enabled.")

    result.valid = len(result.errors) == 0
    return result
