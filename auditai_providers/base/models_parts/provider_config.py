"""
Immutable per-provider connection configuration.

Built once from the merged configuration layer (``auditai_providers.config``)
and held by the registry for the life of the process. A config with an empty
``api_key`` is valid; request building fails fast on it instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Optional

from ...config.env import is_placeholder, mask_key
from .provider_id import AuthScheme, ProviderId

StreamMode = Literal["sse", "json_array"]
_STREAM_MODES = ("sse", "json_array")


@dataclass(frozen=True)
class ProviderConfig:
    """Static connection settings and capability flags for one provider.

    Attributes:
        identifier: Provider id.
        endpoint: Base URL (multimodal family) or full chat-completions URL
            (OpenAI-compatible family).
        model: Default model name.
        auth_scheme: Where the credential goes on the wire.
        display_name: Human-facing name used in error messages.
        supports_structured_output: Native schema-constrained generation.
        supports_vision: Accepts image/PDF attachments.
        api_key: Credential; may be empty.
        vision_model: Model used instead of ``model`` for vision calls.
        vision_fallback: Provider id that document analysis is redirected to
            when this provider has no vision support.
        stream_mode: Streaming framing for the multimodal family.
    """

    identifier: ProviderId
    endpoint: str
    model: str
    auth_scheme: AuthScheme
    display_name: str
    supports_structured_output: bool = False
    supports_vision: bool = False
    api_key: str = ""
    vision_model: Optional[str] = None
    vision_fallback: Optional[ProviderId] = None
    stream_mode: StreamMode = "sse"

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    def model_for(self, *, vision: bool) -> str:
        """Model name to use for a call, honouring ``vision_model`` overrides."""
        if vision and self.vision_model:
            return self.vision_model
        return self.model

    def describe(self) -> Dict[str, Any]:
        """Public descriptor without the credential (masked only)."""
        return {
            "id": self.identifier.value,
            "display_name": self.display_name,
            "model": self.model,
            "vision_model": self.vision_model,
            "supports_structured_output": self.supports_structured_output,
            "supports_vision": self.supports_vision,
            "vision_fallback": self.vision_fallback.value if self.vision_fallback else None,
            "stream_mode": self.stream_mode,
            "auth_scheme": self.auth_scheme.value,
            "credential": mask_key(self.api_key),
            "credential_placeholder": is_placeholder(self.api_key) if self.api_key else False,
        }

    @classmethod
    def from_mapping(cls, provider: ProviderId, cfg: Mapping[str, Any]) -> "ProviderConfig":
        """Build a config from a merged ``get_provider_config`` dict.

        Unknown keys are ignored. An invalid ``stream_mode`` falls back to SSE.
        """
        mode = str(cfg.get("stream_mode") or "sse").strip().lower()
        fallback = ProviderId.parse(cfg.get("vision_fallback"))
        return cls(
            identifier=provider,
            endpoint=str(cfg.get("base_url") or "").rstrip("/"),
            model=str(cfg.get("model") or ""),
            auth_scheme=AuthScheme(cfg.get("auth_scheme") or AuthScheme.BEARER.value),
            display_name=str(cfg.get("display_name") or provider.value),
            supports_structured_output=_as_bool(cfg.get("supports_structured_output")),
            supports_vision=_as_bool(cfg.get("supports_vision")),
            api_key=str(cfg.get("api_key") or "").strip(),
            vision_model=cfg.get("vision_model") or None,
            vision_fallback=fallback if fallback is not provider else None,
            stream_mode=mode if mode in _STREAM_MODES else "sse",  # type: ignore[arg-type]
        )


def _as_bool(value: Any) -> bool:
    """Coerce config/env values ("true", "0", True) to bool."""
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


__all__ = [
    "ProviderConfig",
    "StreamMode",
]
