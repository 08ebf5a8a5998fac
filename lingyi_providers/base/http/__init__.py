"""HTTP transport helpers: pooled ``httpx`` clients keyed by base URL and purpose."""

from .client import get_httpx_client, close_all_clients

__all__ = ["get_httpx_client", "close_all_clients"]
