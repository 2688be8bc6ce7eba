"""
Pydantic models for the structured audit result.

Purpose
-------
This is the contract the model's JSON output must satisfy. Parsing goes
through ``StructuredAuditResult.model_validate`` so a response with a missing
``risks``/``keyMetrics`` list or an out-of-range severity is rejected before
it reaches the caller.

Field names keep the camelCase used on the wire (``keyMetrics``,
``chartData``) so a result round-trips to the UI unchanged.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

Severity = Literal["high", "medium", "low"]


class RiskItem(BaseModel):
    """One identified risk with a remediation hint."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    description: str
    recommendation: str


class KeyMetric(BaseModel):
    """Headline figure; numeric ``value``/``change`` are kept as their string form."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    label: str
    value: str
    change: Optional[str] = None


class ChartDataPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    value: float


class StructuredAuditResult(BaseModel):
    """Structured audit returned by ``analyze_structured_data``.

    Attributes:
        summary: Narrative overview in the requested output language.
        risks: Ordered risks; required, may be empty.
        keyMetrics: Ordered headline metrics; required, may be empty.
        chartData: Optional category/value series for charting.
    """

    model_config = ConfigDict(frozen=True)

    summary: str
    risks: List[RiskItem]
    keyMetrics: List[KeyMetric]
    chartData: Optional[List[ChartDataPoint]] = None

    def to_payload(self) -> dict:
        """JSON-ready dict; ``chartData`` is omitted when absent."""
        return self.model_dump(exclude_none=True)


__all__ = [
    "Severity",
    "RiskItem",
    "KeyMetric",
    "ChartDataPoint",
    "StructuredAuditResult",
]
