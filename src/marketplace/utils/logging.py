"""Logging configuration for the marketplace.

Standard library handlers (console plus rotating files under ``logs/``) feed
structlog. Production renders JSON; every other environment gets the console
renderer with rich tracebacks.

Amounts travel through the domain as integer minor units. Log events that
carry one of ``MONEY_FIELDS`` also get a ``<field>_display`` twin such as
``"150.00"`` so log readers do not have to divide by a hundred.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

from marketplace.shared.money import format_minor_units

LOG_FILE_PREFIX = "marketplace"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

MONEY_FIELDS = ("price", "total_amount", "commission", "curator_amount", "amount")

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_QUIET_LOGGERS = ("urllib3", "asyncio", "uvicorn.access", "sqlalchemy.engine")


def environment() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS.get(environment(), "INFO"))


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _stdlib_handlers(log_dir: str | None, level: str) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers = [console]

    if log_dir:
        path = Path(log_dir)
        path.mkdir(exist_ok=True)
        handlers.append(_rotating_handler(path / f"{LOG_FILE_PREFIX}.log", level))
        handlers.append(_rotating_handler(path / f"{LOG_FILE_PREFIX}_error.log", logging.ERROR))
    return handlers


def add_money_display(_logger, _method_name, event_dict: dict) -> dict:
    """structlog processor: render minor-unit amounts next to the raw value."""
    for field in MONEY_FIELDS:
        value = event_dict.get(field)
        if isinstance(value, int) and not isinstance(value, bool):
            event_dict[f"{field}_display"] = format_minor_units(value)
    return event_dict


def _renderer(env: str):
    if env in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def configure_logging(log_dir: str | None = "logs") -> None:
    """Wire stdlib handlers and structlog. ``log_dir=None`` logs to stdout only."""
    level = log_level()
    env = environment()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _stdlib_handlers(log_dir, level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_money_display,
            _renderer(env),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(**kwargs) -> None:
    """Start a fresh log context for one request (correlation id, method, path)."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**kwargs)
