"""
Logging Configuration

structlog events and standard library records (uvicorn, SQLAlchemy) go
through one handler and one renderer, JSON in deployments and a console
renderer when ``LOG_FORMAT=text``.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level

from catalog_admin.config.settings import Settings, get_settings

ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def shared_processors() -> List[structlog.types.Processor]:
    """Processors applied to structlog events and foreign records alike"""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def build_formatter(log_format: str) -> ProcessorFormatter:
    if log_format == "json":
        renderer = JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    return ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors())


def configure_logging(log_level: Optional[str] = None, settings: Optional[Settings] = None) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        settings: Settings to read level and format from, defaults to the cached ones
    """
    settings = settings or get_settings()
    level = (log_level or settings.monitoring.log_level).upper()
    numeric_level = getattr(logging, level, logging.INFO)

    structlog.configure(
        processors=shared_processors() + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(build_formatter(settings.monitoring.log_format))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(numeric_level)

    for name in ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers = [handler]
        routed.propagate = False
        routed.setLevel(numeric_level)

    # SQL statements are only logged when POSTGRES_ECHO is set
    if not settings.database.echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level,
        format=settings.monitoring.log_format,
        environment=settings.app_env,
    )
