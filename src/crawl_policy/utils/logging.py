"""
Logging configuration for the crawl policy engine.

All module loggers hang off the "crawl_policy" root logger, which
setup_logging configures with console and optional rotating file output.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crawl_policy.config.settings import LoggingSettings


ROOT_LOGGER_NAME = "crawl_policy"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_configured = False


def setup_logging(settings: "LoggingSettings | None" = None) -> logging.Logger:
    """
    Configure the application logging system.

    Calling it again is a no-op until reset_logging() is called.

    Args:
        settings: Logging configuration. If None, INFO to stdout.

    Returns:
        The configured root logger for the application.
    """
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)

    if _logging_configured:
        return logger

    logger.handlers.clear()

    if settings is None:
        level = logging.INFO
        formatter = logging.Formatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
        log_to_console = True
        file_path = None
    else:
        level = getattr(logging, settings.level)
        formatter = logging.Formatter(fmt=settings.format, datefmt=settings.date_format)
        log_to_console = settings.log_to_console
        file_path = settings.file_path

    logger.setLevel(level)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if file_path is not None:
        logger.addHandler(_create_file_handler(
            file_path=file_path,
            max_bytes=settings.max_file_size_mb * 1024 * 1024,
            backup_count=settings.backup_count,
            level=level,
            formatter=formatter,
        ))

    # Avoid duplicate lines through the Python root logger
    logger.propagate = False

    _logging_configured = True

    return logger


def _create_file_handler(
    file_path: Path,
    max_bytes: int,
    backup_count: int,
    level: int,
    formatter: logging.Formatter,
) -> RotatingFileHandler:
    file_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(file_path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)

    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger under the application root.

    Args:
        name: Typically __name__. None returns the root logger.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Queue drained")
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Remove all handlers and allow setup_logging to run again."""
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    logger.propagate = True
    _logging_configured = False


class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that appends [key=value] context to every message.

    Example:
        >>> logger = LoggerAdapter(get_logger(__name__), {"policy": "oMrS"})
        >>> logger.info("Queued")  # "Queued [policy=oMrS]"
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        if self.extra:
            context_str = " ".join(f"[{k}={v}]" for k, v in self.extra.items())
            msg = f"{msg} {context_str}"
        return msg, kwargs


def get_logger_with_context(name: str | None = None, **context: str) -> LoggerAdapter:
    """Get a logger whose messages carry the given context."""
    return LoggerAdapter(get_logger(name), context)
