"""
Logging configuration for the Image Store Sync service.

This module provides utilities for configuring logging with structlog.
"""

import logging
import sys
import time
from typing import Any, Dict, TextIO

import structlog
from structlog.stdlib import LoggerFactory
from structlog.types import Processor

from imagesync.core.config import Environment, LogLevel, settings


def configure_logging(log_level: LogLevel = LogLevel.INFO, stream: TextIO = sys.stdout) -> None:
    """
    Configure structured logging for the application.

    This function sets up structlog with appropriate processors
    for the current environment.

    Args:
        log_level: Logging level to use
        stream: Stream the log lines are written to
    """
    level = log_level.value if isinstance(log_level, LogLevel) else str(log_level)

    # Set up standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=level.upper(),
    )

    def timestamper(logger: Any, name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Add ISO-8601 formatted timestamp to the event dict."""
        event_dict["timestamp"] = time.strftime(
            "%Y-%m-%dT%H:%M:%S", time.gmtime()
        )
        return event_dict

    def add_service_info(logger: Any, name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Add service information to the event dict."""
        event_dict["service"] = settings.PROJECT_NAME
        event_dict["version"] = settings.VERSION
        event_dict["environment"] = settings.ENVIRONMENT
        return event_dict

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        timestamper,
        add_service_info,
        structlog.processors.format_exc_info,
    ]

    if settings.ENVIRONMENT == Environment.DEVELOPMENT:
        # Pretty output for development
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        # JSON output for everything else
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
