"""Logging setup for the container lifecycle API.

structlog events and plain stdlib records (uvicorn, the Docker SDK) go
through the same processor chain and renderer. The optional log file is
always written as JSON lines.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List

import structlog

from .._version import __version__
from ..config import settings

# Loggers of libraries under us that are chatty at INFO/DEBUG
NOISY_LOGGERS = (
    "docker.auth",
    "docker.utils.config",
    "urllib3.connectionpool",
    # Requests are logged by RequestLoggingMiddleware
    "uvicorn.access",
)


def add_service_context(logger, method_name, event_dict):
    """Stamp every entry with the service name and version."""
    event_dict["service"] = "dockctl-api"
    event_dict["version"] = __version__
    return event_dict


def _shared_processors() -> List:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_service_context,
    ]


def _formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    if json_output:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # ConsoleRenderer formats exceptions itself
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )


def setup_logging() -> None:
    """Configure structlog and the root logger from settings.

    Safe to call more than once; the root handlers are replaced each time.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_formatter(settings.log_format == "json"))
    handlers: List[logging.Handler] = [console_handler]

    if settings.log_file:
        handlers.append(_file_handler(settings.log_file))

    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root.handlers = handlers
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def _file_handler(path: str) -> logging.Handler:
    log_file_path = Path(path)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=settings.log_max_size_mb * 1024 * 1024,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(json_output=True))
    return handler
