"""Tests for the configuration layer (defaults, file, env, overrides)."""
from __future__ import annotations

import json
import os

from auditai_providers.config import get_provider_config, reset_config_cache
from auditai_providers.config.env import (
    CREDENTIAL_ENV,
    credential_env_names,
    is_placeholder,
    mask_key,
    resolve_provider_key,
)


def test_credential_env_covers_every_provider():
    assert set(CREDENTIAL_ENV) == {"gemini", "deepseek", "gpt", "qwen"}  # nosec B101
    assert credential_env_names(" QWEN ") == ("DASHSCOPE_API_KEY",)  # nosec B101
    assert credential_env_names("gemini")[0] == "API_KEY"  # nosec B101
    assert credential_env_names("claude") == ()  # nosec B101


def test_is_placeholder_heuristics():
    assert is_placeholder("placeholder-value")  # nosec B101
    assert is_placeholder("ChangeMe123")  # nosec B101
    assert is_placeholder("test_token")  # nosec B101
    assert not is_placeholder("real-value")  # nosec B101
    assert not is_placeholder(None)  # nosec B101


def test_mask_key():
    assert mask_key(None) == "MISSING"  # nosec B101
    assert mask_key("short") == "SHORT_KEY"  # nosec B101
    assert mask_key("abcd-secret-wxyz") == "abcd...wxyz"  # nosec B101


def test_gemini_key_alias_resolution(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "google-alias-key")
    assert resolve_provider_key("gemini") == ("google-alias-key", "GOOGLE_API_KEY")  # nosec B101
    monkeypatch.setenv("API_KEY", "canonical-key")
    assert resolve_provider_key("gemini") == ("canonical-key", "API_KEY")  # nosec B101


def test_defaults_without_environment():
    cfg = get_provider_config("deepseek")
    assert cfg["base_url"] == "https://api.deepseek.com/chat/completions"  # nosec B101
    assert cfg["vision_fallback"] == "gemini"  # nosec B101
    assert "api_key" not in cfg  # nosec B101
    assert get_provider_config("nope") == {}  # nosec B101


def test_env_overrides_use_provider_prefix(monkeypatch):
    monkeypatch.setenv("QWEN_MODEL", "qwen-plus")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://proxy.internal/v1/chat/completions")
    monkeypatch.setenv("GEMINI_STREAM_MODE", "json_array")
    assert get_provider_config("qwen")["model"] == "qwen-plus"  # nosec B101
    assert get_provider_config("gpt")["base_url"] == "https://proxy.internal/v1/chat/completions"  # nosec B101
    assert get_provider_config("gemini")["stream_mode"] == "json_array"  # nosec B101


def test_merge_order_file_then_env_then_overrides(monkeypatch, tmp_path):
    path = tmp_path / "providers.json"
    path.write_text(json.dumps({"qwen": {"model": "from-file", "vision_model": "vl-file"}}), encoding="utf-8")
    monkeypatch.setenv("AUDITAI_CONFIG_FILE", str(path))
    reset_config_cache()
    assert get_provider_config("qwen")["model"] == "from-file"  # nosec B101

    monkeypatch.setenv("QWEN_MODEL", "from-env")
    cfg = get_provider_config("qwen", {"vision_model": "from-code", "model": None})
    assert cfg["model"] == "from-env"  # nosec B101
    assert cfg["vision_model"] == "from-code"  # nosec B101


def test_yaml_config_file(monkeypatch, tmp_path):
    path = tmp_path / "providers.yaml"
    path.write_text("gemini:\n  model: gemini-yaml\n  stream_mode: json_array\n", encoding="utf-8")
    monkeypatch.setenv("AUDITAI_CONFIG_FILE", str(path))
    reset_config_cache()
    cfg = get_provider_config("gemini")
    assert cfg["model"] == "gemini-yaml"  # nosec B101
    assert cfg["stream_mode"] == "json_array"  # nosec B101


def test_dotenv_file_is_loaded_once(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("# comment\nDEEPSEEK_API_KEY='dotenv-deepseek-key'\n", encoding="utf-8")
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
    reset_config_cache()
    try:
        assert get_provider_config("deepseek")["api_key"] == "dotenv-deepseek-key"  # nosec B101
    finally:
        os.environ.pop("DEEPSEEK_API_KEY", None)
