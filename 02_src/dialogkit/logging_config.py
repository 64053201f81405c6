"""JSON logging for the bot process."""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone

from .config import DEFAULT_LOG_PATH

# httpx logs every request URL at INFO, and Bot API URLs carry the token
QUIET_LOGGERS = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, dialog identity under "context"."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str | None = None) -> None:
    """Log JSON to stdout and to the rotating file under 04_logs.

    The level defaults to the LOG_LEVEL environment variable, else INFO.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    DEFAULT_LOG_PATH.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": JSONFormatter}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                },
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": str(DEFAULT_LOG_PATH),
                    "maxBytes": 5 * 1024 * 1024,
                    "backupCount": 3,
                    "formatter": "json",
                    "encoding": "utf-8",
                },
            },
            "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
            "root": {"level": level, "handlers": ["console", "file"]},
        }
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def dialog_context(session) -> dict:
    """Log context describing a dialog session."""
    return {
        "dialog": session.dialog_name,
        "user_id": session.user_id,
        "chat_id": session.chat_id,
        "pending_query": session.pending_query_name,
    }
