"""CLI action handlers.

Purpose
-------
One handler per subcommand. Handlers take the parsed ``argparse.Namespace``
and an ``AuditOrchestrator`` (tests inject one built on a mock transport),
run the operation on a fresh event loop and print the result to stdout.

Fallback & Error Semantics
--------------------------
- Provider failures and cancellation print the JSON error envelope to stderr
  and return ``1``.
- Unreadable input files or malformed ``--history`` return ``2``.
- Pooled HTTP clients are closed before the event loop ends.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Awaitable, List, TypeVar

from pydantic import TypeAdapter

from ...audit import AuditOrchestrator
from ...base.cancellation import CancelledError
from ...base.dto import ChatTurnDTO
from ...base.errors import ProviderError
from ...base.http import aclose_all_clients
from ...base.models import ChatTurn
from .cli_utils import error_payload, guess_mime_type, read_text_source

T = TypeVar("T")

_HISTORY = TypeAdapter(List[ChatTurnDTO])


def run_async(work: Awaitable[T]) -> T:
    """Run ``work`` on a new event loop and release pooled clients afterwards."""

    async def _main() -> T:
        try:
            return await work
        finally:
            await aclose_all_clients()

    return asyncio.run(_main())


def _fail(exc: BaseException, code: int = 1) -> int:
    print(json.dumps(error_payload(exc), ensure_ascii=False), file=sys.stderr)
    return code


def load_history(raw: str | None) -> List[ChatTurn]:
    """Parse ``--history`` into chat turns.

    Raises ``ValueError`` (including pydantic's ``ValidationError``) on
    malformed JSON or turns, ``OSError`` when an ``@file`` cannot be read.
    """
    if not raw:
        return []
    text = read_text_source(raw)
    return [dto.to_turn() for dto in _HISTORY.validate_python(json.loads(text))]


def handle_providers(args: argparse.Namespace, *, orchestrator: AuditOrchestrator) -> int:
    """Print every provider descriptor as JSON."""
    print(json.dumps({"providers": orchestrator.registry.describe()}, indent=2, ensure_ascii=False))
    return 0


def handle_audit(args: argparse.Namespace, *, orchestrator: AuditOrchestrator) -> int:
    """Run a structured audit and print the result payload as JSON."""
    try:
        data = read_text_source(args.data)
    except OSError as e:
        return _fail(e, 2)
    try:
        result = run_async(
            orchestrator.analyze_structured_data(data, args.provider, args.language, args.scenario)
        )
    except (ProviderError, CancelledError) as e:
        return _fail(e)
    print(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))
    return 0


def handle_scan(args: argparse.Namespace, *, orchestrator: AuditOrchestrator) -> int:
    """Analyze one document file and print the Markdown report."""
    mime = args.mime or guess_mime_type(args.path)
    if not mime:
        return _fail(ValueError(f"cannot guess MIME type of {args.path!r}; pass --mime"), 2)
    try:
        with open(args.path, "rb") as fh:
            content = fh.read()
    except OSError as e:
        return _fail(e, 2)
    try:
        markdown = run_async(
            orchestrator.analyze_document(content, mime, args.provider, args.language, args.scenario)
        )
    except (ProviderError, CancelledError) as e:
        return _fail(e)
    print(markdown)
    return 0


def handle_chat(args: argparse.Namespace, *, orchestrator: AuditOrchestrator) -> int:
    """Send one chat message; with ``--stream`` print text as it arrives."""
    try:
        history = load_history(args.history)
    except (OSError, ValueError) as e:
        return _fail(e, 2)

    printed: List[str] = [""]

    def _print_delta(text: str) -> None:
        # The sink receives the full text so far; print only what is new.
        previous = printed[0]
        delta = text[len(previous):] if text.startswith(previous) else "\n" + text
        sys.stdout.write(delta)
        sys.stdout.flush()
        printed[0] = text

    sink: Any = _print_delta if args.stream else None
    try:
        reply = run_async(
            orchestrator.send_chat_message(
                history, args.message, args.provider, args.language, on_increment=sink
            )
        )
    except (ProviderError, CancelledError) as e:
        if args.stream and printed[0]:
            sys.stdout.write("\n")
        return _fail(e)
    if args.stream:
        sys.stdout.write("\n" if printed[0] else reply + "\n")
    else:
        print(reply)
    return 0


__all__ = [
    "run_async",
    "load_history",
    "handle_providers",
    "handle_audit",
    "handle_scan",
    "handle_chat",
]
