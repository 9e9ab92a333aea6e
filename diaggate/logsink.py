from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, Protocol

from diaggate import config

if TYPE_CHECKING:
    from diaggate.engine_core.types import Severity


_LEVELS = {
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

# LogRecord attribute -> JSON key
_DIAGNOSTIC_FIELDS = (
    ("diagnostic_id", "diagnostic_id"),
    ("diagnostic_severity", "severity"),
)


class DiagnosticLogger(Protocol):
    def log_at(self, severity: "Severity", text: str) -> None:
        ...


class StdlibDiagnosticLogger:
    """Forwards non-fatal diagnostics to a `logging.Logger`."""

    def __init__(self, target: Optional[logging.Logger] = None):
        self.target = target or logging.getLogger("diaggate.diagnostics")

    def log_at(self, severity: "Severity", text: str) -> None:
        name = str(getattr(severity, "value", severity))
        level = _LEVELS.get(name)
        if level is None:
            raise ValueError(f"severity cannot be logged: {severity}")
        self.target.log(level, text, extra={"diagnostic_severity": name})


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line; diagnostic id and severity are added when passed via `extra=`."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for attr, key in _DIAGNOSTIC_FIELDS:
            value = getattr(record, attr, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    log_level = (level or config.LOG_LEVEL or "INFO").upper()
    level_value = getattr(logging, log_level, logging.INFO)
    fmt = (log_format or config.LOG_FORMAT or "json").strip().lower()

    root = logging.getLogger()
    root.setLevel(level_value)
    formatter: logging.Formatter
    if fmt == "json":
        formatter = JsonLogFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root.addHandler(handler)
        return

    for handler in root.handlers:
        handler.setFormatter(formatter)
