"""``ProviderFamily``: the wire-dialect interface each provider family implements.

The class lives in ``interfaces_parts.provider_family``; import it from here.
"""

from __future__ import annotations

from .interfaces_parts import ProviderFamily

__all__ = ["ProviderFamily"]
