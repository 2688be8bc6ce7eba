"""Pydantic DTOs: the audit result contract and inbound service requests."""

from .audit_result import ChartDataPoint, KeyMetric, RiskItem, Severity, StructuredAuditResult
from .requests import (
    AttachmentDTO,
    AuditRequestDTO,
    ChatRequestDTO,
    ChatTurnDTO,
    DocumentRequestDTO,
)

__all__ = [
    "ChartDataPoint",
    "KeyMetric",
    "RiskItem",
    "Severity",
    "StructuredAuditResult",
    "AttachmentDTO",
    "AuditRequestDTO",
    "ChatRequestDTO",
    "ChatTurnDTO",
    "DocumentRequestDTO",
]
