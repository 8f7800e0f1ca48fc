"""JSON logs for reconstruction runs.

Every record becomes one JSON object per line. Structured ``extra=``
payloads from the services (match ids, diagnostic dicts, per-stage
counts) are merged into the object at the top level. Domain values that
``json`` cannot encode are converted: enums by value, diagnostics through
``to_dict``, other dataclasses field by field.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
from datetime import datetime
from enum import Enum
from typing import Any, TextIO

from .config import Settings, get_settings
from .utils.datetime_utils import now_utc

# Attributes every LogRecord carries; anything else on a record came from extra=
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


class JSONFormatter(logging.Formatter):
    def __init__(self, service: str, environment: str) -> None:
        super().__init__()
        self._service = service
        self._environment = environment

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": now_utc().isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "service": self._service,
            "environment": self._environment,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=_encode)


def resolve_log_level(settings: Settings) -> int:
    """Numeric level from LOG_LEVEL, else INFO in production and DEBUG elsewhere."""
    if settings.log_level:
        name = settings.log_level
    else:
        name = "INFO" if settings.environment == "production" else "DEBUG"
    return logging.getLevelName(name)


def configure_logging(
    service: str,
    settings: Settings | None = None,
    stream: TextIO | None = None,
) -> None:
    """Send all records through one JSON handler on ``stream`` (stdout by default).

    The CLI passes stderr so statistics on stdout stay machine-readable.
    """
    settings = settings or get_settings()
    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(JSONFormatter(service=service, environment=settings.environment))
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(resolve_log_level(settings))
