"""Parsing of structured audit replies.

Models frequently wrap JSON in a Markdown fence even when asked not to, so the
fence is stripped before ``json.loads``. Validation against
``StructuredAuditResult`` turns shape problems (missing ``risks``, unknown
severity) into ``ParseError`` rather than letting a half-valid dict reach the
caller.
"""

from __future__ import annotations

import json
import re
from typing import Optional

from pydantic import ValidationError

from ..base.dto import StructuredAuditResult
from ..base.errors import ParseError

_FENCE_OPEN = re.compile(r"^```(?:json|JSON)?[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```` ```json ```` / ```` ``` ```` and trailing ```` ``` ```` fence."""
    s = text.strip()
    s = _FENCE_OPEN.sub("", s, count=1)
    s = _FENCE_CLOSE.sub("", s, count=1)
    return s.strip()


def parse_audit_result(text: Optional[str], provider: str, model: Optional[str] = None) -> StructuredAuditResult:
    """Parse model output into a validated ``StructuredAuditResult``.

    Raises:
        ParseError: empty reply, invalid JSON, or schema mismatch.
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise ParseError("The model returned an empty response.", provider, model)
    try:
        data = json.loads(cleaned)
    except ValueError as exc:
        raise ParseError("The model response is not valid JSON.", provider, model, raw=exc) from exc
    try:
        return StructuredAuditResult.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "<root>" for err in exc.errors())
        raise ParseError(
            f"The model response does not match the audit result schema ({fields}).",
            provider,
            model,
            raw=exc,
        ) from exc


__all__ = ["strip_code_fences", "parse_audit_result"]
