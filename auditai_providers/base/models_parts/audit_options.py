"""
Selectors for audit calls: scenario and output language.

Both are pure selectors; they carry no state beyond their value.
"""
from __future__ import annotations

from enum import Enum


class AuditScenario(str, Enum):
    """Which audit-focus system instruction variant to apply."""

    GENERAL = "general"
    FRAUD = "fraud"
    TAX = "tax"
    COMPLIANCE = "compliance"


class Language(str, Enum):
    """Target output language of the model."""

    EN = "en"
    ZH = "zh"

    @property
    def instruction(self) -> str:
        """Language name as written into prompts."""
        return "Simplified Chinese (zh-CN)" if self is Language.ZH else "English"


__all__ = [
    "AuditScenario",
    "Language",
]
