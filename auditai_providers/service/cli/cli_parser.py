"""CLI parser construction for auditai-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse

from ...base.models import AuditScenario, Language
from ...config.defaults import (
    AUDIT_CLI_DEFAULT_LANGUAGE,
    AUDIT_CLI_DEFAULT_PROVIDER,
    AUDIT_CLI_DEFAULT_SCENARIO,
)


def _str2bool(v: str | None) -> bool:
    """Best-effort conversion of common truthy/falsey strings to bool.

    When ``None`` and used via argparse with ``const=True``, this returns
    ``True``.
    """
    if v is None:
        return True
    val = v.strip().lower()
    if val in {"1", "t", "true", "y", "yes", "on"}:
        return True
    return False if val in {"0", "f", "false", "n", "no", "off"} else bool(val)


def add_stream_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--stream``/``--no-stream`` flags to a parser.

    ``--stream`` accepts an optional boolean (``--stream``, ``--stream true``,
    ``--stream false``); ``--no-stream`` is the explicit negation.
    """
    grp = parser.add_mutually_exclusive_group()
    grp.add_argument("--stream", nargs="?", const=True, type=_str2bool, default=False)
    grp.add_argument("--no-stream", dest="stream", action="store_false")


def _add_selectors(parser: argparse.ArgumentParser, *, scenario: bool = True) -> None:
    parser.add_argument("--provider", default=AUDIT_CLI_DEFAULT_PROVIDER)
    parser.add_argument(
        "--language",
        default=AUDIT_CLI_DEFAULT_LANGUAGE,
        choices=[lang.value for lang in Language],
    )
    if scenario:
        parser.add_argument(
            "--scenario",
            default=AUDIT_CLI_DEFAULT_SCENARIO,
            choices=[s.value for s in AuditScenario],
        )


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Subcommands: ``providers``, ``audit``, ``scan`` and ``chat``. No I/O or
    network calls occur here.
    """
    p = argparse.ArgumentParser(
        prog="auditai-cli", description="Headless access to the audit provider layer"
    )
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR or a synonym (quiet, verbose)")
    p.add_argument("--log-file", default=None, help="Also write JSON logs to this file")
    sub = p.add_subparsers(dest="cmd", required=True)

    # providers
    sub.add_parser("providers", help="List configured providers (credentials masked)")

    # audit
    p_audit = sub.add_parser("audit", help="Structured audit of transaction data")
    p_audit.add_argument(
        "--data",
        required=True,
        help="Transaction text, '@path' to read a file, or '-' for stdin",
    )
    _add_selectors(p_audit)

    # scan
    p_scan = sub.add_parser("scan", help="Forensic analysis of a receipt image or PDF")
    p_scan.add_argument("path", help="Image or PDF file to analyze")
    p_scan.add_argument("--mime", default=None, help="MIME type; guessed from the extension when omitted")
    _add_selectors(p_scan)

    # chat
    p_chat = sub.add_parser("chat", help="Ask the audit consultant a question")
    p_chat.add_argument("message")
    p_chat.add_argument(
        "--history",
        default=None,
        help="JSON list of {role, text} turns, or '@path' to a JSON file",
    )
    _add_selectors(p_chat, scenario=False)
    add_stream_flags(p_chat)

    return p


__all__ = ["build_parser", "add_stream_flags"]
