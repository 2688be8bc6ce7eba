"""Response schema for structured audits.

Single source for the structured-audit contract on the request side. Gemini
receives it natively as ``responseSchema``; JSON-mode-only providers receive
its skeleton rendered into the prompt. The pydantic models in
``base.dto.audit_result`` enforce the same contract on the response side.
"""

from __future__ import annotations

from ..base.models import OutputSchema

_STRING = {"type": "STRING"}

AUDIT_RESULT_SCHEMA = OutputSchema(
    name="structured_audit_result",
    schema={
        "type": "OBJECT",
        "properties": {
            "summary": _STRING,
            "risks": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "severity": {"type": "STRING", "enum": ["high", "medium", "low"]},
                        "description": _STRING,
                        "recommendation": _STRING,
                    },
                    "required": ["severity", "description", "recommendation"],
                },
            },
            "keyMetrics": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {"label": _STRING, "value": _STRING, "change": _STRING},
                    "required": ["label", "value"],
                },
            },
            "chartData": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {"category": _STRING, "value": {"type": "NUMBER"}},
                    "required": ["category", "value"],
                },
            },
        },
        "required": ["summary", "risks", "keyMetrics"],
    },
)

__all__ = ["AUDIT_RESULT_SCHEMA"]
