"""Logging setup for the job-costing engine.

Modules only ever call ``logging.getLogger(__name__)``; handlers, levels and
formats are installed once, on the root logger, by ``configure_logging``
(the CLI does this from the application settings). Records pass through
``ContextFilter`` so fields set with ``LogContext`` (job_id, invoice_id,
dispatcher_id, ...) appear on every line logged inside the context.
"""

import json
import logging
import logging.handlers
import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from job_costing.utils.logging_utils import ContextFilter

if TYPE_CHECKING:
    from job_costing.config.settings import CostingConfig

STANDARD_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else came from extra= or LogContext
_BUILTIN_RECORD_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Decimal amounts are written as strings so cents survive the round trip.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _BUILTIN_RECORD_FIELDS and not key.startswith("_")
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=_encode_value)


def _encode_value(value):
    if isinstance(value, Decimal):
        return str(value)
    return repr(value)


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").strip().lower() == "true"


@dataclass
class LoggingConfig:
    """Where log records go and how they look.

    Attributes:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (any case)
        log_format: 'standard' (human readable) or 'json' (one object per line)
        log_file: Path of the rotating log file
        enable_console: Write to stderr
        enable_file: Write to ``log_file``
        max_file_size: Rotate the file after this many bytes
        backup_count: Rotated files to keep

    Raises:
        ValueError: On an unknown level or format, or file logging
            without a file path
    """

    VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    VALID_FORMATS = ("standard", "json")

    log_level: str = "INFO"
    log_format: str = "standard"
    log_file: Optional[str] = None
    enable_console: bool = True
    enable_file: bool = False
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 5

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in self.VALID_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level}. "
                f"Must be one of {', '.join(self.VALID_LEVELS)}"
            )
        if self.log_format not in self.VALID_FORMATS:
            raise ValueError(
                f"Invalid log format: {self.log_format}. "
                f"Must be one of {', '.join(self.VALID_FORMATS)}"
            )
        if self.enable_file and not self.log_file:
            raise ValueError("log_file must be specified when enable_file is True")

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Read LOG_LEVEL, LOG_FORMAT, LOG_FILE, LOG_CONSOLE, LOG_FILE_ENABLED,
        LOG_MAX_FILE_SIZE and LOG_BACKUP_COUNT."""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            log_file=os.getenv("LOG_FILE"),
            enable_console=_env_flag("LOG_CONSOLE", True),
            enable_file=_env_flag("LOG_FILE_ENABLED", False),
            max_file_size=int(os.getenv("LOG_MAX_FILE_SIZE", str(10 * 1024 * 1024))),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        )

    @classmethod
    def from_settings(
        cls, settings: "CostingConfig", log_format: str = "standard"
    ) -> "LoggingConfig":
        """Console logging at the level chosen in the application settings.

        Debug mode forces DEBUG regardless of LOG_LEVEL.
        """
        level = "DEBUG" if settings.debug else settings.log_level
        return cls(log_level=level, log_format=log_format)

    def build_formatter(self) -> logging.Formatter:
        if self.log_format == "json":
            return JSONFormatter()
        return logging.Formatter(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT)

    def build_handlers(self) -> List[logging.Handler]:
        handlers: List[logging.Handler] = []
        if self.enable_console:
            handlers.append(logging.StreamHandler())
        if self.enable_file and self.log_file:
            Path(self.log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                logging.handlers.RotatingFileHandler(
                    filename=self.log_file,
                    maxBytes=self.max_file_size,
                    backupCount=self.backup_count,
                )
            )
        return handlers


def _clear_root_handlers(root_logger: logging.Logger) -> None:
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()


def configure_logging(config: LoggingConfig) -> None:
    """Install ``config`` on the root logger, replacing earlier handlers."""
    root_logger = logging.getLogger()
    _clear_root_handlers(root_logger)

    level = getattr(logging, config.log_level)
    root_logger.setLevel(level)

    formatter = config.build_formatter()
    context_filter = ContextFilter()
    for handler in config.build_handlers():
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def reset_logging() -> None:
    """Drop all root handlers and restore the default WARNING level."""
    root_logger = logging.getLogger()
    _clear_root_handlers(root_logger)
    root_logger.setLevel(logging.WARNING)
