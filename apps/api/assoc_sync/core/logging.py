from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from assoc_sync.core.config import get_settings

_RESERVED_ATTRS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line, including `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    if any(getattr(handler, "_assoc_sync", False) for handler in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    handler._assoc_sync = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel((level or get_settings().log_level).upper())
    # httpx logs every request at INFO; page-level events already cover that.
    logging.getLogger("httpx").setLevel(logging.WARNING)
