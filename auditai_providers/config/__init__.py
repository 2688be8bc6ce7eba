"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (endpoints, models, display names, capability flags).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by AUDITAI_CONFIG_FILE
    3. Environment variables (e.g. QWEN_MODEL, DEEPSEEK_BASE_URL)
    4. Credential env vars including aliases (see ``config.env``)
    5. In-code overrides passed to helper
* Provide a single call site: ``get_provider_config(provider: str)``.

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL, <PROVIDER>_API_KEY, <PROVIDER>_BASE_URL, <PROVIDER>_VISION_MODEL,
<PROVIDER>_STREAM_MODE, e.g. GEMINI_MODEL, QWEN_VISION_MODEL. ``OPENAI_BASE_URL``
overrides the ``gpt`` endpoint.

External Config File (Optional)
-------------------------------
If AUDITAI_CONFIG_FILE is set to a path, we attempt to load JSON first.
If that fails, attempt YAML (PyYAML). Structure example:

```
gemini:
  model: gemini-3-flash-preview
  stream_mode: json_array
qwen:
  vision_model: qwen-vl-max
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

import yaml

from .env import is_placeholder, resolve_provider_key
from .defaults import (
    GEMINI_DEFAULT_MODEL,
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_STREAM_MODE,
    DEEPSEEK_DEFAULT_MODEL,
    DEEPSEEK_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    QWEN_DEFAULT_MODEL,
    QWEN_DEFAULT_VISION_MODEL,
    QWEN_DEFAULT_BASE_URL,
)


# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "gemini": {
        "display_name": "Gemini",
        "model": GEMINI_DEFAULT_MODEL,
        "base_url": GEMINI_DEFAULT_BASE_URL,
        "auth_scheme": "query_key",
        "supports_structured_output": True,
        "supports_vision": True,
        "stream_mode": GEMINI_DEFAULT_STREAM_MODE,
    },
    "deepseek": {
        "display_name": "DeepSeek",
        "model": DEEPSEEK_DEFAULT_MODEL,
        "base_url": DEEPSEEK_DEFAULT_BASE_URL,
        "auth_scheme": "bearer",
        "supports_structured_output": False,
        "supports_vision": False,
        # DeepSeek has no vision endpoint; documents are redirected to Gemini.
        "vision_fallback": "gemini",
    },
    "gpt": {
        "display_name": "OpenAI",
        "model": OPENAI_DEFAULT_MODEL,
        "base_url": OPENAI_DEFAULT_BASE_URL,
        "auth_scheme": "bearer",
        "supports_structured_output": False,
        "supports_vision": True,
    },
    "qwen": {
        "display_name": "Qwen",
        "model": QWEN_DEFAULT_MODEL,
        "vision_model": QWEN_DEFAULT_VISION_MODEL,
        "base_url": QWEN_DEFAULT_BASE_URL,
        "auth_scheme": "bearer",
        "supports_structured_output": False,
        "supports_vision": True,
    },
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "vision_model": "VISION_MODEL",
    "stream_mode": "STREAM_MODE",
}

# Provider ids whose env prefix differs from the id itself.
ENV_PREFIX_MAP = {
    "gpt": "OPENAI",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Read ``DOTENV_FILE`` (default ``.env``) into ``os.environ`` once.

    ``KEY=VALUE`` lines only; comments, blank lines and quotes are skipped.
    A variable already set in the process wins unless it holds a
    placeholder value.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    path = Path(os.getenv("DOTENV_FILE", ".env"))
    if not path.is_file():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        name, value = (part.strip() for part in line.split("=", 1))
        if name and (name not in os.environ or is_placeholder(os.environ[name])):
            os.environ[name] = value.strip("\"'")


def _parse_config_text(text: str) -> Dict[str, Any]:
    """JSON first, YAML second; anything that is not a mapping counts as empty."""
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            return {}
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    """Per-provider sections from ``AUDITAI_CONFIG_FILE``, read once."""
    global _FILE_CACHE
    if _FILE_CACHE is None:
        path = os.getenv("AUDITAI_CONFIG_FILE")
        p = Path(path) if path else None
        _FILE_CACHE = _parse_config_text(p.read_text(encoding="utf-8")) if p and p.is_file() else {}
    return _FILE_CACHE


def reset_config_cache() -> None:
    """Forget the cached external file and .env state (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = ENV_PREFIX_MAP.get(provider, provider.upper())
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars ->
    credential env vars -> overrides. Unknown providers yield an empty dict
    unless a config file or override defines them.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    # 1. Defaults
    cfg |= DEFAULTS.get(name, {})

    # 2. External config file section
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    # 3. Env overrides
    cfg |= _env_overrides(name)

    # 4. Credential via canonical env var or alias (only if not already set)
    if not cfg.get("api_key"):
        key, _env_name = resolve_provider_key(name)
        if key:
            cfg["api_key"] = key

    # 5. Explicit overrides arg
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


__all__ = [
    "get_provider_config",
    "reset_config_cache",
    "DEFAULTS",
]
