from __future__ import annotations

import asyncio
import types

import httpx

from auditai_providers.base.cancellation import CancelledError
from auditai_providers.base.errors import (
    ConfigurationError,
    CredentialRevokedError,
    ErrorCode,
    ModelUnreachableError,
    ProviderError,
    classify_exception,
    classify_response,
)


def test_invalid_key_on_403_is_credential_revoked():
    c = classify_response(403, '{"error":{"message":"API key not valid"}}', "Gemini")
    assert c.code is ErrorCode.CREDENTIAL_REVOKED  # nosec B101
    assert c.detail == "API key not valid"  # nosec B101
    assert "Gemini API key is invalid or has been revoked" in c.message  # nosec B101
    exc = c.to_exception("gemini", "gemini-3-flash-preview")
    assert isinstance(exc, CredentialRevokedError)  # nosec B101
    assert exc.status == 403 and exc.provider == "gemini"  # nosec B101


def test_leaked_key_on_400_is_credential_revoked_case_insensitive():
    c = classify_response(400, '{"error":{"message":"Your key was reported as LEAKED"}}', "Gemini")
    assert c.code is ErrorCode.CREDENTIAL_REVOKED  # nosec B101


def test_403_without_key_wording_is_generic_provider_error():
    c = classify_response(403, '{"error":{"message":"permission denied"}}', "Qwen")
    assert c.code is ErrorCode.PROVIDER_ERROR  # nosec B101
    assert c.message == "Qwen API Error: permission denied"  # nosec B101


def test_404_is_model_unreachable_regardless_of_body():
    for body in ("", "<html>not found</html>", '{"error":"no such model"}'):
        c = classify_response(404, body, "Gemini")
        assert c.code is ErrorCode.MODEL_UNREACHABLE  # nosec B101
        assert "VPN" in c.message  # nosec B101
        assert isinstance(c.to_exception("gemini"), ModelUnreachableError)  # nosec B101


def test_500_oops_is_provider_error_carrying_body():
    c = classify_response(500, "oops", "DeepSeek")
    assert c.code is ErrorCode.PROVIDER_ERROR  # nosec B101
    assert "oops" in c.message  # nosec B101
    exc = c.to_exception("deepseek")
    assert type(exc) is ProviderError  # nosec B101
    assert "oops" in str(exc)  # nosec B101


def test_detail_extraction_variants():
    assert classify_response(502, '{"error":"bad gateway"}', "X").detail == "bad gateway"  # nosec B101
    long_body = "x" * 150
    assert classify_response(503, long_body, "X").detail == "Error (503)"  # nosec B101
    assert classify_response(503, "", "X").detail == "Error (503)"  # nosec B101


def test_classify_exception_passthrough_and_mappings():
    assert classify_exception(ConfigurationError("m", "gpt")) is ErrorCode.CONFIGURATION  # nosec B101
    assert classify_exception(asyncio.TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused")) is ErrorCode.TRANSPORT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow")) is ErrorCode.TIMEOUT  # nosec B101
    e404 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=404))
    assert classify_exception(e404) is ErrorCode.MODEL_UNREACHABLE  # nosec B101
    assert classify_exception(types.SimpleNamespace(status_code=500)) is ErrorCode.PROVIDER_ERROR  # nosec B101


def test_classify_exception_heuristics():
    assert classify_exception(Exception("connection reset by peer")) is ErrorCode.TRANSPORT  # nosec B101
    assert classify_exception(Exception("malformed payload")) is ErrorCode.PARSE  # nosec B101
    assert classify_exception(Exception("random")) is ErrorCode.UNKNOWN  # nosec B101


def test_classify_exception_honours_carried_code():
    assert classify_exception(CancelledError("stopped")) is ErrorCode.CANCELLED  # nosec B101
    assert classify_exception(TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
