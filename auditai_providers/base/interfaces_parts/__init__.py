"""Single-class interface modules for the provider layer."""

from .provider_family import ProviderFamily

__all__ = ["ProviderFamily"]
