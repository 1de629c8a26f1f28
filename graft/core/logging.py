"""Structured logging for graft.

Provides JSON-formatted logs with file and console output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from logging.handlers import RotatingFileHandler

from colorama import Fore, Style, just_fix_windows_console


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        if hasattr(record, "component"):
            log_data["component"] = record.component
        if hasattr(record, "extension"):
            log_data["extension"] = record.extension
        if hasattr(record, "extension_type"):
            log_data["extension_type"] = record.extension_type

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for human-readable output."""

    COLORS = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.MAGENTA,
    }
    RESET = Style.RESET_ALL

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.now().strftime("%H:%M:%S")

        prefix = f"{color}[{timestamp}] {record.levelname:8}{self.RESET}"

        if hasattr(record, "component"):
            prefix += f" [{record.component}]"

        message = record.getMessage()

        # Add extra context on same line if brief
        extras = []
        if hasattr(record, "extension"):
            extras.append(f"ext={record.extension}")
        if hasattr(record, "extension_type"):
            extras.append(f"type={record.extension_type}")

        if extras:
            message += f" ({', '.join(extras)})"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return f"{prefix} {message}"


class GraftLogger:
    """Logger wrapper with convenience methods for registry logging."""

    def __init__(self, name: str, logger: logging.Logger):
        self._name = name
        self._logger = logger

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def _log(self, level: int, message: str, **kwargs):
        """Log with extra context fields."""
        if not self._logger.isEnabledFor(level):
            return

        extra = {}
        exc_info = kwargs.pop("exc_info", None)

        # Known fields become record attributes
        for key in ["component", "extension", "extension_type"]:
            if key in kwargs:
                extra[key] = kwargs.pop(key)

        # Remaining fields go into extra_data
        if kwargs:
            extra["extra_data"] = kwargs

        self._logger.log(level, message, extra=extra, exc_info=exc_info)

    # Convenience methods for common registry operations

    def extension_added(self, name: str, declared_type: type):
        self.debug(
            f"Extension added: {name}",
            component="registry",
            extension=name,
            extension_type=declared_type.__qualname__
        )

    def extension_decorated(self, name: str, declared_type: type, generated: bool):
        self.debug(
            f"Extension constructed: {name}",
            component="instantiator",
            extension=name,
            extension_type=declared_type.__qualname__,
            generated_subclass=generated
        )

    def lookup_failed(self, key: str, known_names: list[str]):
        self.debug(
            f"Extension lookup failed: {key}",
            component="registry",
            known=len(known_names)
        )


_loggers: dict[str, GraftLogger] = {}
_initialized = False


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    log_dir: Optional[Path] = None,
    file_enabled: bool = False,
    console_enabled: bool = True
) -> None:
    """Initialize the logging system.

    The library never calls this on its own; applications embedding the
    registry opt in.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: "json" or "text"
        log_dir: Directory for log files
        file_enabled: Write logs to file
        console_enabled: Write logs to console
    """
    global _initialized

    if _initialized:
        return

    root = logging.getLogger("graft")
    root.setLevel(getattr(logging, level.upper()))
    root.handlers.clear()

    if console_enabled:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(logging.DEBUG)

        if format_type == "json":
            console.setFormatter(JSONFormatter())
        else:
            just_fix_windows_console()
            console.setFormatter(ColoredFormatter())

        root.addHandler(console)

    if file_enabled and log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / "graft.log"

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)

    _initialized = True


def setup_logging_from_config(log_config) -> None:
    """Initialize logging from a LogConfig."""
    setup_logging(
        level=log_config.level,
        format_type=log_config.format,
        log_dir=log_config.log_dir,
        file_enabled=log_config.file_enabled,
        console_enabled=log_config.console_enabled,
    )


def reset_logging() -> None:
    """Drop handlers installed by setup_logging (useful for testing)."""
    global _initialized
    root = logging.getLogger("graft")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    _initialized = False


def get_logger(name: str = "graft") -> GraftLogger:
    """Get a graft logger instance."""
    if name not in _loggers:
        logger = logging.getLogger(f"graft.{name}")
        _loggers[name] = GraftLogger(name, logger)
    return _loggers[name]
