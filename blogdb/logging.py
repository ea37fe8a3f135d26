"""Loguru configuration for BlogDB.

Log lines are either human-readable text or one JSON object per line. The
signed-in user and the current operation live in context variables and are
stamped onto every JSON line, next to whatever was attached with
``logger.bind()``.

Example:
    >>> from blogdb.logging import bind_actor, logger
    >>> bind_actor("6f1c...", operation="create_post")
    >>> logger.info("Creating post")
"""

import json
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger as loguru_logger

from blogdb.config import settings

user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
operation_var: ContextVar[str | None] = ContextVar("operation", default=None)

TEXT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)
FILE_TEXT_FORMAT = "{time} | {level} | {message}"


def serialize(record: dict[str, Any]) -> str:
    """Render a record as a single JSON object.

    Args:
        record: Loguru log record dictionary

    Returns:
        JSON text holding the level, message, call site, actor context and
        bound extras
    """
    payload: dict[str, Any] = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "where": f"{record['module']}.{record['function']}:{record['line']}",
    }
    for key, var in (("user_id", user_id_var), ("operation", operation_var)):
        value = var.get()
        if value is not None:
            payload[key] = value
    payload.update(record["extra"])

    exc = record["exception"]
    if exc is not None:
        payload["error"] = {
            "type": exc.type.__name__ if exc.type else None,
            "detail": str(exc.value),
            "traceback": "".join(traceback.format_exception(exc.type, exc.value, exc.traceback)),
        }
    return json.dumps(payload, default=str)


def _attach_json(record: dict[str, Any]) -> None:
    record["extra"]["json"] = serialize(record)


def _json_line(record: dict[str, Any]) -> str:
    return "{extra[json]}\n"


def setup_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: Path | None = None,
) -> Any:
    """Replace Loguru's default handler with BlogDB's sinks.

    Args:
        level: Minimum log level
        json_logs: Emit JSON lines instead of colored text
        log_file: Also write to this file, rotated at 10 MB and kept a week

    Returns:
        The patched logger every module logs through
    """
    loguru_logger.remove()
    patched = loguru_logger.patch(_attach_json)

    line_format: Any = _json_line if json_logs else TEXT_FORMAT
    patched.add(sys.stderr, level=level, format=line_format, colorize=not json_logs)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        patched.add(
            log_file,
            level=level,
            format=_json_line if json_logs else FILE_TEXT_FORMAT,
            rotation="10 MB",
            retention="7 days",
            enqueue=True,
        )
    return patched


logger = setup_logging(
    level=settings.log_level,
    json_logs=settings.log_json,
    log_file=settings.log_file,
)


def bind_actor(user_id: str | None, operation: str | None = None) -> None:
    """Record who is acting, and optionally on what, for later log lines."""
    user_id_var.set(user_id)
    if operation is not None:
        operation_var.set(operation)


def clear_actor() -> None:
    """Forget the acting user and operation."""
    user_id_var.set(None)
    operation_var.set(None)


__all__ = [
    "logger",
    "user_id_var",
    "operation_var",
    "bind_actor",
    "clear_actor",
    "serialize",
    "setup_logging",
]
