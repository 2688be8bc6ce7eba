"""AuditAI command line interface (package entrypoint).

This package wires argument parsing to action handlers kept in small, focused
modules. It performs no provider logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ...audit import AuditOrchestrator, get_orchestrator
from ...base.logging import configure_logger
from .cli_actions import handle_audit, handle_chat, handle_providers, handle_scan
from .cli_parser import build_parser
from .cli_utils import parse_verbosity

_HANDLERS = {
    "providers": handle_providers,
    "audit": handle_audit,
    "scan": handle_scan,
    "chat": handle_chat,
}


def main(argv: Optional[list[str]] = None, *, orchestrator: Optional[AuditOrchestrator] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.
    orchestrator: Optional[AuditOrchestrator]
        Orchestrator to run against; defaults to the process-wide one.

    Returns
    -------
    int
        Process exit code (0 success, 1 provider failure, 2 bad input).
    """
    args = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    level = parse_verbosity(args.log_level) if args.log_level else None
    if args.log_level and level is None:
        print(f"auditai-cli: unknown log level {args.log_level!r}", file=sys.stderr)
        return 2
    if level is not None or args.log_file:
        configure_logger(level=level, file_path=args.log_file)
    return _HANDLERS[args.cmd](args, orchestrator=orchestrator or get_orchestrator())


__all__ = ["main"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
