# -*- coding: utf-8 -*-
"""Utility helpers shared by the CLI handlers.

Functions
---------
- ``parse_verbosity(value)``: Map user strings and synonyms to a canonical
  logging level name.
- ``error_payload(exc)``: JSON-ready error description printed to stderr.
- ``read_text_source(value)``: Read a literal, ``@file`` or ``-`` (stdin)
  argument.
- ``guess_mime_type(path)``: MIME type for a document file by extension.
"""

from __future__ import annotations

import mimetypes
import sys
from typing import Any, Dict, Optional

from ...base.errors import ProviderError, classify_exception


def parse_verbosity(value: str) -> Optional[str]:
    """Parse a user-provided verbosity string into a canonical level.

    Accepted values (case-insensitive):
    - Canonical: DEBUG, INFO, WARNING, ERROR, CRITICAL
    - Synonyms: verbose->DEBUG; warn->WARNING; quiet->ERROR; silent->CRITICAL

    Returns ``None`` for anything else.
    """
    mapping = {
        "verbose": "DEBUG",
        "warn": "WARNING",
        "err": "ERROR",
        "quiet": "ERROR",
        "crit": "CRITICAL",
        "silent": "CRITICAL",
    }
    v = value.strip().lower()
    if v in mapping:
        return mapping[v]
    canon = v.upper()
    if canon in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        return canon
    return None


def error_payload(exc: BaseException) -> Dict[str, Any]:
    """Describe a failure for stderr; provider errors keep their code."""
    if isinstance(exc, ProviderError):
        return {
            "error": {
                "code": exc.code.value,
                "message": exc.message,
                "provider": exc.provider,
                "model": exc.model,
            }
        }
    return {"error": {"code": classify_exception(exc).value, "message": str(exc)}}


def read_text_source(value: str) -> str:
    """Return ``value`` itself, stdin for ``-``, or a file's text for ``@path``.

    Raises ``OSError`` when the file cannot be read.
    """
    if value == "-":
        return sys.stdin.read()
    if value.startswith("@"):
        with open(value[1:], "r", encoding="utf-8") as fh:
            return fh.read()
    return value


def guess_mime_type(path: str) -> Optional[str]:
    mime, _ = mimetypes.guess_type(path)
    return mime


__all__ = ["parse_verbosity", "error_payload", "read_text_source", "guess_mime_type"]
