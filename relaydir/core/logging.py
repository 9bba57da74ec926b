"""Relay sync logging with Loguru + optional Slack alerts on failed runs."""

import logging
import sys
from typing import Any, Dict

import httpx
from loguru import logger

from relaydir.core.config import settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[name]}:{function}:{line} | {message}"

# Fatal conditions (no viable source, empty dataset) go to stderr for the scheduler.
ERROR_LEVEL_NO = logger.level("ERROR").no

_logging_configured = False


class InterceptHandler(logging.Handler):
    """Route httpx/httpcore stdlib records into the relay sync sinks."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the caller that logged, not this handler or the logging module.
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_name == "emit":
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def is_console_record(record: Dict[str, Any]) -> bool:
    return record["level"].no < ERROR_LEVEL_NO


def is_failure_record(record: Dict[str, Any]) -> bool:
    return record["level"].no >= ERROR_LEVEL_NO


def _slack_sink(message: Any) -> None:
    if not settings.SLACK_WEBHOOK_URL:
        return

    record = message.record
    text = (
        f":warning: relay-sync {record['level'].name} ({settings.RELAY_SOURCE_NAME})\n"
        f"{record['extra'].get('name', 'relaydir')}: {record['message']}\n"
        f"output: {settings.OUTPUT_PATH}"
    )
    try:
        httpx.post(settings.SLACK_WEBHOOK_URL, json={"text": text}, timeout=5.0)
    except httpx.HTTPError:
        # Logging here would feed back into this sink
        pass


def configure_logging() -> None:
    global _logging_configured

    if _logging_configured:
        return
    _logging_configured = True

    level = settings.effective_log_level

    logger.remove()
    logger.configure(extra={"name": "relaydir"})
    logger.add(
        sys.stdout,
        level=level,
        format=LOG_FORMAT,
        filter=is_console_record,
        backtrace=False,
        diagnose=False,
    )
    logger.add(
        sys.stderr,
        level="ERROR",
        format=LOG_FORMAT,
        filter=is_failure_record,
        backtrace=False,
        diagnose=False,
    )
    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            level=level,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention="14 days",
            backtrace=False,
            diagnose=False,
        )

    if settings.SLACK_WEBHOOK_URL:
        logger.add(_slack_sink, level="ERROR", enqueue=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=logging.WARNING, force=True)


def get_logger(name: str) -> logger.__class__:
    return logger.bind(name=name)


configure_logging()
