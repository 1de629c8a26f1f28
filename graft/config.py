"""Centralized configuration for graft.

This module provides typed, validated configuration loaded from
environment variables and .env files.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

from graft.core.errors import ConfigError

# Load .env file if it exists
load_dotenv()

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_flag(key: str, default: bool) -> bool:
    return os.getenv(key, str(default)).lower() == "true"


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}", config_key=key, cause=e) from e


@dataclass
class RegistryConfig:
    """Extension registry behaviour."""
    lock_reads: bool = False
    max_listed_names: int = 20

    def __post_init__(self):
        self.lock_reads = _env_flag("GRAFT_LOCK_READS", self.lock_reads)
        self.max_listed_names = _env_int("GRAFT_MAX_LISTED_NAMES", self.max_listed_names)
        if self.max_listed_names < 1:
            raise ConfigError(
                f"max_listed_names must be at least 1, got {self.max_listed_names}",
                config_key="GRAFT_MAX_LISTED_NAMES"
            )


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "json"  # "json" or "text"
    file_enabled: bool = False
    console_enabled: bool = True
    log_dir: Optional[Path] = None

    def __post_init__(self):
        self.level = os.getenv("GRAFT_LOG_LEVEL", self.level).upper()
        self.format = os.getenv("GRAFT_LOG_FORMAT", self.format).lower()
        self.file_enabled = _env_flag("GRAFT_LOG_FILE", self.file_enabled)
        self.console_enabled = _env_flag("GRAFT_LOG_CONSOLE", self.console_enabled)

        log_dir = os.getenv("GRAFT_LOG_DIR")
        if log_dir:
            self.log_dir = Path(log_dir)


@dataclass
class Config:
    """Main configuration container."""
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> list[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if self.registry.max_listed_names < 1:
            issues.append("max_listed_names must be at least 1")

        if self.log.level not in _LOG_LEVELS:
            issues.append(f"log level must be one of {', '.join(_LOG_LEVELS)}")

        if self.log.format not in ("json", "text"):
            issues.append("log format must be 'json' or 'text'")

        if self.log.file_enabled and self.log.log_dir is None:
            issues.append("GRAFT_LOG_DIR is required when file logging is enabled")

        return issues

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return len(self.validate()) == 0


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the default configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the default configuration (useful for testing)."""
    global _config
    _config = None
