"""HTTP utilities package for providers.

Exposes the pooled async httpx clients and the single-request transport.
"""

from .client import aclose_all_clients, get_httpx_client
from .transport import TransportClient, TransportResponse

__all__ = ["get_httpx_client", "aclose_all_clients", "TransportClient", "TransportResponse"]
