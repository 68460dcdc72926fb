"""HTTP utilities package for providers.

Exposes pooled httpx clients and the scoped exchange helpers adapters use to
send requests.
"""

from .client import get_httpx_client, close_all_clients
from .exchange import open_exchange, iter_response_lines, as_provider_failure

__all__ = [
    "get_httpx_client",
    "close_all_clients",
    "open_exchange",
    "iter_response_lines",
    "as_provider_failure",
]
