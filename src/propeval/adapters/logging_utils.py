# src/propeval/adapters/logging_utils.py
import json
import logging
import sys
from datetime import datetime, timezone

from .config import config

# keys every line carries; context from extra= never overwrites them
_CORE_KEYS = ("ts", "level", "logger", "env", "message")


class JsonLogFormatter(logging.Formatter):
    """
    One JSON object per line:

        {"ts": "2024-05-01T12:00:00+00:00", "level": "INFO",
         "logger": "propeval.services.evaluator", "env": "dev",
         "message": "property created", "property_id": "...", "mode": "ltr"}

    Fields passed as extra={"context": {...}} are flattened into the line.
    """

    def __init__(self, env: str | None = None):
        super().__init__()
        self.env = env if env is not None else config.ENV

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "env": self.env,
            "message": record.getMessage(),
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict):
            for k, v in ctx.items():
                if k not in _CORE_KEYS:
                    payload[k] = v
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        # Decimal / datetime values from storage
        return json.dumps(payload, default=str)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.setLevel((level or config.LOG_LEVEL).upper())
        logger.propagate = False
    return logger
