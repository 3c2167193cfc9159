"""
Centralized logging configuration for the resume optimizer.

Every request gets a short request id; pipeline stages log through a
RequestLogger bound to that id so one optimization can be followed from the
AI call through extraction, normalization and rendering.
"""

import json
import logging
import sys
from typing import Optional


class JsonLineFormatter(logging.Formatter):
    """Formats each record as a single JSON object (for log aggregators)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class RequestLogger:
    """
    Logger wrapper that tags messages with request id and pipeline stage.

    Output looks like ``[req:1a2b3c4d] [render] Rendering HTML (5120 chars)``.
    """

    def __init__(
        self,
        name: str,
        request_id: Optional[str] = None,
        stage: Optional[str] = None,
    ):
        self.logger = logging.getLogger(name)
        self.request_id = request_id
        self.stage = stage

    def bind(self, stage: str) -> "RequestLogger":
        """Return a logger for another stage of the same request."""
        return RequestLogger(self.logger.name, self.request_id, stage)

    def _format_message(self, message: str) -> str:
        prefix_parts = []
        if self.request_id:
            prefix_parts.append(f"[req:{self.request_id[:8]}]")
        if self.stage:
            prefix_parts.append(f"[{self.stage}]")

        if prefix_parts:
            return f"{' '.join(prefix_parts)} {message}"
        return message

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message), **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message), **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(self._format_message(message), **kwargs)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure the root logger once at process start.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        format: "simple" for development, "json" for production
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(
    name: str,
    request_id: Optional[str] = None,
    stage: Optional[str] = None,
) -> RequestLogger:
    """Get a request-scoped logger (name is usually __name__)."""
    return RequestLogger(name, request_id, stage)
