"""Audit operations built on the provider layer."""

from .orchestrator import (
    AuditOrchestrator,
    analyze_document,
    analyze_structured_data,
    get_orchestrator,
    send_chat_message,
)
from .parsing import parse_audit_result, strip_code_fences
from .schema import AUDIT_RESULT_SCHEMA
from .state import CallPhase, CallTracker

__all__ = [
    "AuditOrchestrator",
    "analyze_document",
    "analyze_structured_data",
    "get_orchestrator",
    "send_chat_message",
    "parse_audit_result",
    "strip_code_fences",
    "AUDIT_RESULT_SCHEMA",
    "CallPhase",
    "CallTracker",
]
