"""structlog configuration for Foundation Estimator."""

import logging
import sys
from typing import Optional

import structlog

from foundation_estimator.config.settings import settings


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """Configure structlog for console or JSON output on stderr.

    Args:
        level: Minimum log level name; defaults to ``settings.log_level``.
        json_output: Render JSON lines instead of the dev console renderer;
            defaults to ``settings.log_json``.
    """
    level_name = (level or settings.log_level).upper()
    min_level = getattr(logging, level_name, logging.INFO)
    use_json = settings.log_json if json_output is None else json_output

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
