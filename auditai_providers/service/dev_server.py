"""Run the audit HTTP service under uvicorn (``auditai-service``).

Environment:

- ``AUDITAI_SERVICE_HOST``: bind address (default ``127.0.0.1``)
- ``AUDITAI_SERVICE_PORT``: port (default 8091); a non-numeric value is ignored
- ``AUDITAI_SERVICE_RELOAD``: ``1``/``true``/``yes`` enables auto-reload (off by default)
"""

from __future__ import annotations

import os

import uvicorn

from auditai_providers.base.logging import get_logger, log_event
from auditai_providers.config.defaults import AUDIT_SERVICE_DEFAULT_HOST, AUDIT_SERVICE_DEFAULT_PORT

_logger = get_logger("service")


def _port(value: str | None) -> int:
    if value and value.strip().isdigit():
        return int(value)
    return AUDIT_SERVICE_DEFAULT_PORT


def main() -> None:
    host = os.getenv("AUDITAI_SERVICE_HOST", AUDIT_SERVICE_DEFAULT_HOST)
    port = _port(os.getenv("AUDITAI_SERVICE_PORT"))
    reload_enabled = os.getenv("AUDITAI_SERVICE_RELOAD", "").strip().lower() in ("1", "true", "yes")
    log_event(_logger, "service.start", host=host, port=port, reload=reload_enabled)
    uvicorn.run("auditai_providers.service.app:app", host=host, port=port, reload=reload_enabled)


if __name__ == "__main__":
    main()
