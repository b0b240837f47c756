"""Settings loading and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .types import DuplicatePolicy

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GRADLE_DECL_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/gradle-decl/config.yaml")
DEFAULT_LOG_LEVEL = "info"
LOG_LEVELS = ("debug", "info", "warning", "warn", "error", "critical")


class ConfigError(ValueError):
    """Raised when the settings file is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    file: Path | None = None


@dataclass(frozen=True)
class Settings:
    """Fully parsed settings."""

    duplicates: DuplicatePolicy = DuplicatePolicy.REJECT
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings from YAML, falling back to defaults when none exist."""

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No settings file at %s; using defaults.", config_path)
        return Settings()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_settings(raw)


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_settings(raw: dict[str, Any]) -> Settings:
    unknown = sorted(set(raw) - {"duplicates", "logging"})
    if unknown:
        LOGGER.warning("Ignoring unknown settings: %s", ", ".join(map(str, unknown)))
    return Settings(
        duplicates=parse_duplicate_policy(raw.get("duplicates")),
        logging=_parse_logging(raw.get("logging")),
    )


def parse_duplicate_policy(value: Any) -> DuplicatePolicy:
    """Coerce a settings or CLI value into a ``DuplicatePolicy``."""

    if value is None:
        return DuplicatePolicy.REJECT
    if isinstance(value, DuplicatePolicy):
        return value
    if not isinstance(value, str):
        raise ConfigError("duplicates must be a string.")
    try:
        return DuplicatePolicy(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in DuplicatePolicy)
        raise ConfigError(f"duplicates must be one of: {choices} (got '{value}')") from exc


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).strip().lower()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {level}")
    raw_file = value.get("file")
    if raw_file is not None and not isinstance(raw_file, str):
        raise ConfigError("logging.file must be a string path.")
    log_file = Path(raw_file).expanduser() if raw_file else None
    return LoggingConfig(level=level, file=log_file)


__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "LoggingConfig",
    "Settings",
    "load_settings",
    "parse_duplicate_policy",
]
