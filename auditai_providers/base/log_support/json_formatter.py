"""JSON logging formatter used by the shared ``auditai`` logger."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

ISO = "%Y-%m-%dT%H:%M:%S.%fZ"

# LogRecord attributes that are logging internals rather than event data.
_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Messages produced by ``log_event`` are JSON already; their keys are hoisted
    to the top level instead of being double-encoded under ``msg``. Extra
    attributes passed through ``logger.info(..., extra=...)`` are merged too.
    """

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - trivial formatting
        out = {
            "ts": datetime.now(timezone.utc).strftime(ISO),
            "level": record.levelname,
            "logger": record.name,
        }
        text = record.getMessage()
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            out.update(parsed)
        else:
            out["msg"] = text
        for k, v in record.__dict__.items():
            if k.startswith("_") or k in _RESERVED or k in out:
                continue
            out[k] = v
        if record.exc_info:
            out["exc"] = self.formatException(record.exc_info)
        return json.dumps(out, ensure_ascii=False, default=str)


__all__ = ["JsonFormatter", "ISO"]
