"""``python -m auditai_providers.service.cli`` entry point."""

from __future__ import annotations

from . import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
