from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict
from urllib.parse import urlsplit, urlunsplit


_RESERVED = {
    "args", "msg", "levelname", "levelno", "pathname", "filename", "module", "exc_info", "exc_text",
    "stack_info", "lineno", "funcName", "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "name", "taskName",
}


def redact_url(url: Any) -> str:
    """Drop query and fragment. Signed upload and transcript links carry their credentials there."""
    text = str(url)
    parts = urlsplit(text)
    if not parts.query and not parts.fragment:
        return text
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line; every record gets ``file_id`` and ``component``.

    Extras whose name ends in ``url`` are redacted with :func:`redact_url`.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "file_id": getattr(record, "file_id", None) or "unknown",
            "component": getattr(record, "component", None) or record.name,
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED or key in payload:
                continue
            if key.endswith("url") and value is not None:
                payload[key] = redact_url(value)
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = str(value)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str = "INFO") -> None:
    """Route the root logger to stdout as JSON lines. Applications opt in; the SDK never calls this."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(JsonLogFormatter())
    root.handlers = [stream_handler]


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
