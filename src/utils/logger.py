"""structlog setup for MedAssist: pretty or JSON console lines, JSONL file, per-request context."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

from src.config import LOG_CONSOLE_FORMAT, LOG_FILE, LOG_FILE_ENABLED, LOG_LEVEL, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Chatty third-party loggers pinned at WARNING; uvicorn.access duplicates the request_id lines
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access", "httpx", "httpcore", "urllib3")

_configured = False


def _level_from_env() -> int:
    if VERBOSE_LOGGING:
        return logging.DEBUG
    if LOG_LEVEL.isdigit():
        return int(LOG_LEVEL)
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO


def _handler(handler: logging.Handler, renderer: Any, level: int, pre_chain: list) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = _level_from_env()
    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    console_renderer = (
        structlog.processors.JSONRenderer()
        if LOG_CONSOLE_FORMAT == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    handlers = [_handler(logging.StreamHandler(), console_renderer, level, shared)]
    if LOG_FILE_ENABLED:
        handlers.append(
            _handler(logging.FileHandler(LOG_FILE, encoding="utf-8"), structlog.processors.JSONRenderer(), level, shared)
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for h in handlers:
        root.addHandler(h)
    logging.captureWarnings(True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "medassist", **bindings: Any) -> BoundLogger:
    """Structured logger for `name`, configuring logging on first call."""
    _configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


def bind_context(**context: Any) -> None:
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def request_log_context(request_id: str, **context: Any) -> Iterator[None]:
    """Every log line inside the block carries request_id (and the extra context); cleared on exit."""
    clear_context()
    bind_context(request_id=request_id, **context)
    try:
        yield
    finally:
        clear_context()


def log_search_stage(stage: str, **counts: Any) -> None:
    """Debug line `search.stage.<stage>` with the stage's row counts."""
    get_logger("medassist.search.pipeline").debug(f"search.stage.{stage}", **counts)
