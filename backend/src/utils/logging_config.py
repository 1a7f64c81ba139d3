"""
Logging setup for the event-management service.

Four named loggers live under the ``ewm`` namespace:

- ``ewm.api``: request handling and exception handlers
- ``ewm.services``: events, participation requests, moderation
- ``ewm.stats``: statistics hits and view reconciliation
- ``ewm.db``: database operations

With ``EWM_ENV=production`` each logger writes JSON lines to its own rotating
file in ``EWM_LOG_DIR``; otherwise records go to stdout in a readable form.
``EWM_LOG_LEVEL`` sets the threshold for all of them.
"""

import json
import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional


LOGGER_NAMESPACE = "ewm"
LOGGER_NAMES = ["api", "services", "stats", "db"]

MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Attributes present on every LogRecord; anything else came from extra={...}
_RESERVED_RECORD_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


@dataclass(frozen=True)
class LogOptions:
    level: int
    production: bool
    log_dir: Path

    @classmethod
    def from_env(cls) -> "LogOptions":
        level_name = os.environ.get("EWM_LOG_LEVEL", "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            level = logging.INFO
        return cls(
            level=level,
            production=os.environ.get("EWM_ENV", "development").lower() == "production",
            log_dir=Path(os.environ.get("EWM_LOG_DIR", "logs")),
        )


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Carries the record time (UTC), level, logger, message and source location,
    the formatted exception if any, and every field passed through ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "timestamp": created.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """``[2026-03-01 10:30:45] INFO ewm.services: Published event 12``"""

    def __init__(self):
        super().__init__(
            fmt="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def _build_handler(short_name: str, options: LogOptions) -> logging.Handler:
    if options.production:
        options.log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            options.log_dir / f"{short_name}.log",
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setFormatter(JSONFormatter())
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ConsoleFormatter())
    handler.setLevel(options.level)
    return handler


def configure_logging(options: Optional[LogOptions] = None) -> Dict[str, logging.Logger]:
    """
    (Re)configure every service logger.

    Existing handlers are closed and replaced, so calling this twice does not
    duplicate output.

    Args:
        options: Explicit options; read from the environment when omitted

    Returns:
        Mapping of short name (``"api"``, ...) to its Logger
    """
    options = options or LogOptions.from_env()
    configured = {}

    for short_name in LOGGER_NAMES:
        logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{short_name}")
        for old in list(logger.handlers):
            logger.removeHandler(old)
            old.close()

        logger.setLevel(options.level)
        logger.propagate = False
        logger.addHandler(_build_handler(short_name, options))
        configured[short_name] = logger

    return configured


_loggers: Optional[Dict[str, logging.Logger]] = None


def get_logger(name: str) -> logging.Logger:
    """
    Configured logger by short name, configuring on first use.

    Raises:
        ValueError: If ``name`` is not one of LOGGER_NAMES

    Example:
        >>> get_logger("services").info("Request confirmed", extra={"request_id": 7})
    """
    global _loggers

    if name not in LOGGER_NAMES:
        raise ValueError(
            f"Unknown logger name: {name}. Valid names: {', '.join(LOGGER_NAMES)}"
        )
    if _loggers is None:
        _loggers = configure_logging()
    return _loggers[name]


def init_logging() -> Dict[str, logging.Logger]:
    """Configure logging at application startup."""
    global _loggers
    _loggers = configure_logging()
    return _loggers
