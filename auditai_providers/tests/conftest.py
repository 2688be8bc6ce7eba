"""Pytest configuration for the audit provider test suite.

Every test runs with a scrubbed environment (no real credentials, no ``.env``
file, no external config file) and with the process-wide caches cleared so
registry and timeout state never leaks between tests. Network access is never
used: orchestrators run on ``httpx.MockTransport`` (see ``helpers``).
"""

from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from auditai_providers.audit import get_orchestrator
from auditai_providers.base.logging import get_logger
from auditai_providers.config import reset_config_cache
from auditai_providers.registry import ProviderRegistry, get_registry

from .helpers import build_registry

_SCRUBBED_ENV = (
    "API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "DEEPSEEK_API_KEY",
    "OPENAI_API_KEY",
    "DASHSCOPE_API_KEY",
    "AUDITAI_CONFIG_FILE",
    "AUDITAI_LOG_LEVEL",
    "AUDITAI_TIMEOUT_CONNECT_SECONDS",
    "AUDITAI_TIMEOUT_READ_SECONDS",
    "AUDITAI_TIMEOUT_STREAM_SECONDS",
    "AUDITAI_TIMEOUT_OVERALL_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Remove credential/config variables and reset module caches."""
    for name in _SCRUBBED_ENV:
        monkeypatch.delenv(name, raising=False)
    for provider in ("GEMINI", "DEEPSEEK", "OPENAI", "QWEN"):
        for suffix in ("MODEL", "BASE_URL", "VISION_MODEL", "STREAM_MODE"):
            monkeypatch.delenv(f"{provider}_{suffix}", raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    get_registry.cache_clear()
    get_orchestrator.cache_clear()
    yield
    reset_config_cache()
    get_registry.cache_clear()
    get_orchestrator.cache_clear()


@pytest.fixture()
def registry() -> ProviderRegistry:
    return build_registry()


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture()
def captured_logs() -> Iterator[List[str]]:
    """Messages emitted on the shared ``auditai`` logger during the test."""
    logger = get_logger()
    handler = _ListHandler()
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler.messages
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)
