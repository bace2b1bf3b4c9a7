"""
Logging utilities for gnss-sitemeta.

Uses structlog for structured logging with optional JSON output. Log
records go to stderr so that command output on stdout stays parseable.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from gnss_sitemeta.stations.models import Site

LOG_FILE_NAME = "gnss_sitemeta.log"


def _handlers(
    level: int,
    log_dir: Path | str | None,
    log_to_file: bool,
    log_to_console: bool,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if log_to_console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_to_file and log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path / LOG_FILE_NAME))
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def _processors(json_format: bool) -> list[Any]:
    renderer = structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def setup_logging(
    level: str = "INFO",
    log_dir: Path | str | None = None,
    log_to_file: bool = False,
    log_to_console: bool = True,
    json_format: bool = False,
) -> None:
    """Configure logging for the application.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files
        log_to_file: Whether to log to file
        log_to_console: Whether to log to stderr
        json_format: Use JSON format for logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        handlers=_handlers(log_level, log_dir, log_to_file, log_to_console),
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=_processors(json_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger for a module (pass ``__name__``)."""
    return structlog.get_logger(name)


def log_warnings(logger: Any, site: Site, source: str = "") -> int:
    """Emit the non-fatal issues collected on a site.

    Args:
        logger: structlog logger
        site: Decoded (and possibly cleaned) site
        source: Input name for context

    Returns:
        Number of warnings logged
    """
    for warning in site.warnings:
        logger.warning(
            warning.message,
            station=site.station_id,
            source=source or None,
            line=warning.line,
            block=warning.block,
        )
    return len(site.warnings)
