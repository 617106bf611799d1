# logging_utils.py
# JSON-line logging for the crew schedule service (one object per line, Loki-friendly)

import json
import logging
import os
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

# Correlation id of the HTTP request being served; set by the api middleware
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

SERVICE_NAME = os.getenv("SERVICE_NAME", "crewsched")
ENV = os.getenv("APP_ENV", "dev")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Empty string disables the file handler
LOG_FILE = os.getenv("LOG_FILE", "/var/log/crewsched/app.log")

# Attributes every LogRecord carries; structured fields may not shadow them
_RESERVED_LOG_FIELDS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class LokiJSONFormatter(logging.Formatter):
    """
    Render a record as one JSON object:

        {"ts": "...", "level": "INFO", "logger": "crewsched.extractor",
         "service": "crewsched", "env": "dev", "message": "schedule_extracted",
         "request_id": "...", "event": "schedule_extracted", "events": 12, ...}

    Anything passed through ``extra`` becomes a top-level key.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "env": ENV,
            "message": record.getMessage(),
        }

        rid = _request_id.get()
        if rid:
            payload["request_id"] = rid

        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if not key.startswith("_") and key not in payload and key not in _RESERVED_LOG_FIELDS
        )

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging() -> None:
    """Install the JSON handlers on the root logger. Later calls are no-ops."""
    root = logging.getLogger()
    if getattr(root, "_crewsched_configured", False):
        return

    root.setLevel(LOG_LEVEL)
    formatter = LokiJSONFormatter()

    handlers = [logging.StreamHandler(sys.stdout)]
    if LOG_FILE:
        try:
            os.makedirs(os.path.dirname(LOG_FILE) or ".", exist_ok=True)
            handlers.append(logging.FileHandler(LOG_FILE))
        except OSError as e:
            root.error(f"File logging disabled ({LOG_FILE}): {e}")

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root._crewsched_configured = True  # type: ignore[attr-defined]


def new_request_id() -> str:
    rid = uuid.uuid4().hex
    _request_id.set(rid)
    return rid


def log_event(
    logger: logging.Logger,
    event: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Emit ``event`` with structured ``fields``. A field named like a LogRecord
    attribute (``filename``, ``module``, ...) is logged as ``field_<name>``.
    """
    extra = {
        (f"field_{key}" if key in _RESERVED_LOG_FIELDS else key): value
        for key, value in fields.items()
    }
    logger.log(level, event, extra={"event": event, **extra})


class ScheduleLogger:
    """Logger wrapper with per-request stage timers for the OCR pipeline."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.timers: Dict[str, float] = {}

    def info(self, msg, *args, **kwargs):
        self.logger.info(msg, *args, **kwargs)

    def _timer_key(self, name: str) -> str:
        return f"{_request_id.get() or 'global'}:{name}"

    def start_timer(self, name: str):
        self.timers[self._timer_key(name)] = time.time()

    def end_timer(self, name: str) -> float:
        start = self.timers.pop(self._timer_key(name), None)
        return time.time() - start if start else 0.0

    @contextmanager
    def timed(self, name: str, sink: Optional[Dict[str, float]] = None) -> Iterator[None]:
        """Time a block, storing the seconds under ``sink[name]``. The timer is cleared if the block raises."""
        self.start_timer(name)
        try:
            yield
        finally:
            elapsed = self.end_timer(name)
            if sink is not None:
                sink[name] = elapsed

    def log_extraction(self, count, variant, method):
        self.logger.info(f"Extraction: {count} schedule days, variant {variant}, method {method}")


def get_logger(name: str) -> ScheduleLogger:
    return ScheduleLogger(f"{SERVICE_NAME}.{name}")
