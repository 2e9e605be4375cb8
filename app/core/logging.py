"""Loguru setup: console + rotating file sinks, stdlib interception, Slack alerts on errors.

Loggers are bound with a component ``name`` and, on the read/refresh paths,
the normalized ``city`` being served, so every line can be traced back to a
destination.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from app.core.config import settings

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[name]}:{function}:{line} | city={extra[city]} | {message}"
)
LOG_FILE = "destinations.log"
SLACK_TIMEOUT_SECONDS = 5.0

_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}
_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

# stdlib loggers routed through loguru, with the minimum level each may emit at
_ROUTED_LOGGERS = {
    "uvicorn": None,
    "uvicorn.error": None,
    "uvicorn.access": None,
    "alembic": "INFO",
    "sqlalchemy.engine": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
}

_configured = False


class InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the caller's frame."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_name == "emit":
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _notify_slack(message: Any) -> None:
    record = message.record
    extra = record["extra"]
    text = (
        f"[{record['level'].name}] {extra.get('name', 'app')} "
        f"(city={extra.get('city', '-')})\n{record['message']}"
    )
    try:
        httpx.post(settings.SLACK_WEBHOOK_URL, json={"text": text}, timeout=SLACK_TIMEOUT_SECONDS)
    except httpx.HTTPError:
        # Logging here would feed back into this sink.
        pass


def resolve_level(raw: str | None) -> str:
    """Normalize ``LOG_LEVEL``; unknown names fall back to INFO and prod never goes below INFO."""
    level = (raw or "INFO").strip().upper()
    level = _LEVEL_ALIASES.get(level, level)
    if level not in _LEVELS:
        return "INFO"
    if settings.is_production and _LEVELS.index(level) < _LEVELS.index("INFO"):
        return "INFO"
    return level


def configure_logging() -> None:
    global _configured

    if _configured:
        return
    _configured = True

    level = resolve_level(settings.LOG_LEVEL)
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(extra={"name": "app", "city": "-"})
    logger.add(
        sys.stdout,
        level=level,
        format=LOG_FORMAT,
        serialize=settings.LOG_JSON,
        backtrace=False,
        diagnose=False,
    )
    logger.add(
        log_dir / LOG_FILE,
        level=level,
        format=LOG_FORMAT,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        backtrace=False,
        diagnose=not settings.is_production,
    )
    if settings.SLACK_WEBHOOK_URL:
        logger.add(_notify_slack, level="ERROR", enqueue=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name, min_level in _ROUTED_LOGGERS.items():
        routed = logging.getLogger(name)
        routed.handlers = [InterceptHandler()]
        routed.propagate = False
        if min_level is not None:
            routed.setLevel(min_level)


def get_logger(name: str, **context: Any) -> logger.__class__:
    """Logger bound to a component name plus any extra context (e.g. ``city``)."""
    return logger.bind(name=name, **context)


configure_logging()
