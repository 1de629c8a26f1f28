"""Core package - errors and logging."""

from .errors import (
    AmbiguousExtensionError,
    ConfigError,
    ConstructionError,
    DuplicateExtensionError,
    GraftError,
    InvalidArgumentError,
    UnknownExtensionError,
)
from .logging import get_logger, setup_logging

__all__ = [
    "AmbiguousExtensionError",
    "ConfigError",
    "ConstructionError",
    "DuplicateExtensionError",
    "GraftError",
    "InvalidArgumentError",
    "UnknownExtensionError",
    "get_logger",
    "setup_logging",
]
