"""Logging setup — one stream handler on the root logger, JSON or plain text.

Invariants:
    - Report lifecycle fields passed via `extra=` (report_id, report_kind,
      requester_id, error_code, record_count, path) become top-level JSON keys
    - Fields left as None are omitted from the JSON line
    - Calling setup_logging twice replaces the handler instead of stacking one

Design Decisions:
    - stdlib logging with a small JSONFormatter; modules log through
      logging.getLogger(__name__) and never import this module
"""

import json
import logging
from datetime import datetime, timezone

REPORT_LOG_FIELDS = (
    "report_id", "report_kind", "requester_id", "error_code",
    "record_count", "path",
)

_HANDLER_NAME = "payroll_reports"


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            name: getattr(record, name)
            for name in REPORT_LOG_FIELDS
            if getattr(record, name, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(level.upper())
