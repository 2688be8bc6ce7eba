"""Provider registry.

Holds one immutable ``ProviderConfig`` per supported provider, built once
from the merged configuration layer (``config.get_provider_config``). The
registry is read-only after construction and safe to share between
concurrent calls.

Lookup contract
---------------
``resolve(provider_id)``
    Returns the config of an OpenAI-compatible provider. Returns ``None``
    when the id denotes the primary multimodal provider or is not
    recognized; callers then route to ``primary()``.
``primary()``
    The multimodal provider's config.
``get(provider_id)``
    Any known provider; unknown ids raise ``ConfigurationError``.

A provider whose credential is empty still has a config. Building a request
for it fails fast with a "missing credential" error instead.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .base.errors import ConfigurationError
from .base.logging import get_logger, log_event
from .base.models import ProviderConfig, ProviderId
from .config import get_provider_config

PRIMARY_PROVIDER = ProviderId.GEMINI

_logger = get_logger("registry")


class ProviderRegistry:
    """Immutable mapping of provider id to ``ProviderConfig``."""

    def __init__(self, configs: Iterable[ProviderConfig]) -> None:
        by_id: Dict[ProviderId, ProviderConfig] = {}
        for cfg in configs:
            by_id[cfg.identifier] = cfg
        if PRIMARY_PROVIDER not in by_id:
            raise ConfigurationError(
                "Registry requires a configuration for the primary provider.",
                provider=PRIMARY_PROVIDER.value,
            )
        self._configs: Mapping[ProviderId, ProviderConfig] = by_id

    @classmethod
    def from_config(cls, overrides: Optional[Mapping[str, Dict[str, Any]]] = None) -> "ProviderRegistry":
        """Build every provider config from defaults, files and environment.

        ``overrides`` maps a provider id to in-code overrides (highest
        precedence), e.g. ``{"qwen": {"api_key": "..."}}``.
        """
        configs = []
        for pid in ProviderId:
            merged = get_provider_config(pid.value, (overrides or {}).get(pid.value))
            configs.append(ProviderConfig.from_mapping(pid, merged))
        registry = cls(configs)
        log_event(
            _logger,
            "registry.loaded",
            providers=[c.identifier.value for c in configs],
            missing_credentials=[c.identifier.value for c in configs if not c.has_credential],
        )
        return registry

    def resolve(self, provider_id: Union[ProviderId, str, None]) -> Optional[ProviderConfig]:
        """OpenAI-compatible provider config, or ``None`` for primary/unknown ids."""
        pid = ProviderId.parse(provider_id)
        if pid is None or pid is PRIMARY_PROVIDER:
            return None
        return self._configs.get(pid)

    def primary(self) -> ProviderConfig:
        return self._configs[PRIMARY_PROVIDER]

    def get(self, provider_id: Union[ProviderId, str, None]) -> ProviderConfig:
        """Config for any known provider.

        Raises:
            ConfigurationError: ``provider_id`` is not a supported provider.
        """
        pid = ProviderId.parse(provider_id)
        cfg = self._configs.get(pid) if pid is not None else None
        if cfg is None:
            raise ConfigurationError(f"Unknown provider: {provider_id!r}", provider=str(provider_id))
        return cfg

    def describe(self) -> List[Dict[str, Any]]:
        """Public descriptors of every provider (credential masked)."""
        out = []
        for cfg in self._configs.values():
            item = cfg.describe()
            item["primary"] = cfg.identifier is PRIMARY_PROVIDER
            out.append(item)
        return out


@lru_cache(maxsize=1)
def get_registry() -> ProviderRegistry:
    """Process-wide registry built from configuration on first use.

    ``get_registry.cache_clear()`` forces a rebuild (tests, config reload).
    """
    return ProviderRegistry.from_config()


__all__ = ["PRIMARY_PROVIDER", "ProviderRegistry", "get_registry"]
