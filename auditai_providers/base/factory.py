"""Provider family lookup table.

Purpose
-------
Map each ``ProviderId`` to the ``ProviderFamily`` implementation that speaks
its wire dialect. Families are imported lazily using ``importlib`` so the base
package never imports provider packages at module import time, and each
family is instantiated once (families are stateless).

Scope
-----
``gemini`` uses :class:`auditai_providers.gemini.GeminiFamily`; ``deepseek``,
``gpt`` and ``qwen`` share :class:`OpenAIStyleFamily`.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import import_module
from typing import Dict, Union

from .errors import ConfigurationError
from .interfaces import ProviderFamily
from .models import ProviderId

_FAMILIES: Dict[ProviderId, Dict[str, str]] = {
    ProviderId.GEMINI: {"module": "auditai_providers.gemini.family", "class": "GeminiFamily"},
    ProviderId.DEEPSEEK: {"module": "auditai_providers.base.openai_style_parts.family", "class": "OpenAIStyleFamily"},
    ProviderId.GPT: {"module": "auditai_providers.base.openai_style_parts.family", "class": "OpenAIStyleFamily"},
    ProviderId.QWEN: {"module": "auditai_providers.base.openai_style_parts.family", "class": "OpenAIStyleFamily"},
}


@lru_cache(maxsize=None)
def _load(module_path: str, class_name: str) -> ProviderFamily:
    cls = getattr(import_module(module_path), class_name)
    return cls()


def get_family(provider: Union[ProviderId, str]) -> ProviderFamily:
    """Return the (shared) family instance for ``provider``.

    Raises:
        ConfigurationError: Unknown provider id.
    """
    pid = ProviderId.parse(provider)
    if pid is None:
        raise ConfigurationError(f"Unknown provider: {provider!r}", provider=str(provider))
    spec = _FAMILIES[pid]
    return _load(spec["module"], spec["class"])


__all__ = ["get_family"]
