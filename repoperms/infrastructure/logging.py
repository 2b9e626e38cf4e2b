"""Logging setup and context helpers"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from repoperms.core.config import Settings, get_settings
from repoperms.infrastructure.logging_processors import (
    add_request_context,
    add_service_context,
    sanitize_sensitive_data,
)


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors: list[Processor] = [
        add_service_context,
        add_request_context,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        timestamper,
        # Should be last before rendering
        sanitize_sensitive_data,
    ]

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # stdout carries command output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)



def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
