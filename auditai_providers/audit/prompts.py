"""Prompt and system-instruction text for the audit operations.

Only the request-shaping parts live here: the four scenario instructions
(each parametrized by output language), the structured-audit prompt, the
forensic document prompt, the consultant persona and the redirect note
prefixed to documents analysed by a fallback provider.
"""

from __future__ import annotations

from typing import Dict

from ..base.models import AuditScenario, Language

_SCENARIO_FOCUS: Dict[AuditScenario, str] = {
    AuditScenario.GENERAL: "Provide a balanced financial overview.",
    AuditScenario.FRAUD: "Focus on FRAUD DETECTION. Look for round number anomalies, weekend transactions.",
    AuditScenario.TAX: "Focus on TAX COMPLIANCE. Identify non-deductible expenses.",
    AuditScenario.COMPLIANCE: "Focus on INTERNAL CONTROLS.",
}

_PERSONA: Dict[Language, str] = {
    Language.EN: "You are a professional financial audit consultant (AuditAI). Answer based on accounting standards.",
    Language.ZH: "你是一名专业的财务审计顾问 (AuditAI)。请根据会计准则回答，保持专业。",
}


def scenario_instruction(scenario: AuditScenario, language: Language) -> str:
    base = f"You are a professional auditor. Output language: {language.instruction}."
    return f"{base} {_SCENARIO_FOCUS[scenario]}"


def structured_audit_prompt(data: str, language: Language) -> str:
    """User prompt for ``analyze_structured_data``.

    The JSON structure itself is not written here; providers without native
    schema support get it appended by the payload builder.
    """
    lang = language.instruction
    return (
        "Analyze the following financial data:\n"
        f"{data}\n\n"
        "Output valid JSON matching this structure.\n"
        "Values for 'summary', 'description', 'recommendation', 'label', 'category', "
        f"'change' MUST be in {lang}."
    )


def document_prompt(scenario: AuditScenario, language: Language) -> str:
    return (
        f"Perform a forensic audit on this image. Scenario: {scenario.value}. "
        f"Language: {language.instruction}. Format as Markdown."
    )


def persona_instruction(language: Language) -> str:
    return _PERSONA[language]


def redirect_note(requested: str, used: str) -> str:
    """Markdown note prefixed when document analysis ran on a fallback provider."""
    return (
        f"> **Note:** {requested} does not support image analysis; "
        f"this document was analysed by {used}.\n\n"
    )


NO_ANALYSIS_TEXT = "No analysis generated."

__all__ = [
    "scenario_instruction",
    "structured_audit_prompt",
    "document_prompt",
    "persona_instruction",
    "redirect_note",
    "NO_ANALYSIS_TEXT",
]
