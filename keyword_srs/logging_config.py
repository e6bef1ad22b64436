"""
Logging configuration for the keyword SRS engine.

Engine modules log through logging.getLogger(__name__) under the
"keyword_srs" namespace and never configure handlers themselves.
Applications call setup_logging() once to attach a console handler.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from keyword_srs.config import get_log_level

LOGGER_NAME = "keyword_srs"

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; message text is escaped by json.dumps."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    log_level: Optional[str] = None,
    json_format: bool = False
) -> logging.Logger:
    """
    Configure the engine logger.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (default: KEYWORD_SRS_LOG_LEVEL or INFO)
        json_format: Emit one JSON object per line

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = get_log_level()
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    if json_format:
        formatter = JsonLineFormatter(datefmt=DATE_FORMAT)
    else:
        formatter = logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.debug("Logging initialized: level=%s", log_level)
    return logger
