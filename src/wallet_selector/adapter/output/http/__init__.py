"""HTTP adapters"""

from wallet_selector.adapter.output.http.httpx_request_fetcher import HttpxRequestObjectFetcher

__all__ = ["HttpxRequestObjectFetcher"]
