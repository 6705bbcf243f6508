"""Structured JSON logging configuration."""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Any

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

# Chatty third-party loggers kept at WARNING
_QUIET_LOGGERS = ('pymongo', 'jieba')


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    # LogRecord attributes that are not extra fields
    _STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname',
        'process', 'processName', 'relativeCreated', 'thread', 'threadName',
        'exc_info', 'exc_text', 'stack_info', 'taskName'
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # logger.info("msg", extra={"learnerId": "..."}) lands in record.__dict__
        for key, value in record.__dict__.items():
            if key not in self._STANDARD_ATTRS and not callable(value):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_structured_logging(level: str | int | None = None):
    """Install JSONFormatter on the root logger.

    level defaults to the LOG_LEVEL environment variable (INFO if unset).
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root_logger = logging.getLogger()
    root_logger.setLevel(level or LOG_LEVEL)
    root_logger.handlers = [handler]

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
