"""auditai_providers.config.defaults
================================

Central place for small, stable default values used across the
auditai_providers package and the lightweight service layer. These defaults can
be overridden via environment variables or an external configuration file, but
provide sensible fallbacks for local development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep presentation/infra layers free of magic literals.

This module intentionally avoids importing from other provider packages to
prevent circular dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- Service / HTTP layer ----

# Comma-separated list of allowed origins for the audit service (browser UI dev server).
AUDIT_SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"
AUDIT_SERVICE_DEFAULT_HOST = "127.0.0.1"
AUDIT_SERVICE_DEFAULT_PORT = 8091


# ---- CLI Defaults ----
AUDIT_CLI_DEFAULT_PROVIDER = "gemini"
AUDIT_CLI_DEFAULT_LANGUAGE = "en"
AUDIT_CLI_DEFAULT_SCENARIO = "general"


# ---- Sampling ----
# OpenAI-compatible calls are pinned to a low temperature for audit output.
OPENAI_STYLE_TEMPERATURE = 0.1


# ---- Provider-specific defaults ----
# Gemini (primary multimodal provider)
GEMINI_DEFAULT_MODEL = "gemini-3-flash-preview"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
GEMINI_API_VERSION = "v1beta"
GEMINI_DEFAULT_STREAM_MODE = "sse"

# DeepSeek (OpenAI-compatible, text only)
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com/chat/completions"

# OpenAI
OPENAI_DEFAULT_MODEL = "gpt-4o"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1/chat/completions"

# Qwen via DashScope compatible mode
QWEN_DEFAULT_MODEL = "qwen-max"
QWEN_DEFAULT_VISION_MODEL = "qwen-vl-max"
QWEN_DEFAULT_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1/chat/completions"


__all__ = [
    # Service
    "AUDIT_SERVICE_CORS_DEFAULT_ORIGINS",
    "AUDIT_SERVICE_DEFAULT_HOST",
    "AUDIT_SERVICE_DEFAULT_PORT",
    # CLI
    "AUDIT_CLI_DEFAULT_PROVIDER",
    "AUDIT_CLI_DEFAULT_LANGUAGE",
    "AUDIT_CLI_DEFAULT_SCENARIO",
    # Sampling
    "OPENAI_STYLE_TEMPERATURE",
    # Provider defaults
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_API_VERSION",
    "GEMINI_DEFAULT_STREAM_MODE",
    "DEEPSEEK_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "QWEN_DEFAULT_MODEL",
    "QWEN_DEFAULT_VISION_MODEL",
    "QWEN_DEFAULT_BASE_URL",
]
