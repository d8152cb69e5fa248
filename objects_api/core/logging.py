"""
Centralized Logging.

structlog on top of the standard library logging module. Settings come
from config/settings/logging.yaml; explicit arguments to setup_logging
take precedence.

Usage:
    from objects_api.core.logging import get_logger, setup_logging

    setup_logging(level="DEBUG")
    logger = get_logger(__name__)
    logger.info("Object created", object_id="ff80818...")
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Any

import structlog

from objects_api.core.config import find_project_root, load_yaml_settings

LOG_FILE_NAME = "objects_api.log"

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """
    Load logging.yaml from the project root and cache it.

    Raises:
        FileNotFoundError: If logging.yaml does not exist
    """
    global _logging_config
    _logging_config = load_yaml_settings("logging.yaml", find_project_root())
    return _logging_config


def _get_logging_config() -> dict[str, Any]:
    """Get the cached logging configuration, loading it on first use."""
    if _logging_config is None:
        return _load_logging_config()
    return _logging_config


def _get_logs_dir() -> Path:
    """Directory for log files, created on demand."""
    logs_dir = find_project_root() / "data" / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Args:
        level: Log level name. Defaults to logging.yaml "level".
        format_type: "console" or "json". Defaults to logging.yaml "format".
        enable_file_logging: Write to data/logs/objects_api.log.
            Defaults to logging.yaml handlers.file.enabled.
    """
    config = _get_logging_config()
    handlers_config = config.get("handlers", {})
    file_config = handlers_config.get("file", {})

    level = (level or config.get("level", "INFO")).upper()
    format_type = format_type or config.get("format", "console")
    if enable_file_logging is None:
        enable_file_logging = bool(file_config.get("enabled", False))

    shared = _shared_processors()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    if format_type == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    if handlers_config.get("console", {}).get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        # Files are always JSON so they can be parsed later
        file_formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
        )
        file_handler = logging.handlers.RotatingFileHandler(
            _get_logs_dir() / LOG_FILE_NAME,
            maxBytes=file_config.get("max_bytes", 10485760),
            backupCount=file_config.get("backup_count", 5),
            encoding="utf-8",
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO; the client already does
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """
    Get a structlog logger.

    Args:
        name: Logger name, usually __name__
    """
    return structlog.get_logger(name)
