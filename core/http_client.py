"""
Shared HTTP Client
==================

One requests.Session for talking to the LLM proxy.

- Fixed User-Agent and JSON Accept header on every request
- Default timeout of 60s, the proxy's analysis budget
- Exactly one attempt per request: the adapter never retries

Usage:
    from core.http_client import get_http_client

    client = get_http_client()
    response = client.post("http://localhost:3000/api/gemini", json={"prompt": "..."})
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class HTTPClient:
    """Session wrapper used by the proxy transport."""

    DEFAULT_USER_AGENT = "GovernanceMonitor/1.0"
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.user_agent = user_agent
        self.timeout = timeout
        self.requests_sent = 0

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json",
        })
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        logger.debug(f"HTTPClient ready: ua={user_agent!r} timeout={timeout}s")

    def post(
        self,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        **kwargs
    ) -> requests.Response:
        """
        POST a JSON body.

        Transport exceptions from requests are logged and re-raised; mapping
        them to domain errors is the caller's job.
        """
        if timeout is None:
            timeout = self.timeout
        self.requests_sent += 1
        logger.debug(f"POST {url} #{self.requests_sent} (timeout={timeout}s)")

        try:
            response = self.session.post(url, json=json, headers=headers, timeout=timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"POST {url} timed out after {timeout}s: {e}")
            raise
        except requests.exceptions.ConnectionError as e:
            logger.error(f"POST {url} could not connect: {e}")
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f"POST {url} failed: {e}")
            raise

        logger.debug(f"POST {url} -> {response.status_code} ({len(response.content)} bytes)")
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


_http_client: Optional[HTTPClient] = None


def get_http_client(
    user_agent: Optional[str] = None,
    timeout: Optional[float] = None,
) -> HTTPClient:
    """Shared client; arguments only count on the first call."""
    global _http_client
    if _http_client is None:
        _http_client = HTTPClient(
            user_agent=user_agent or HTTPClient.DEFAULT_USER_AGENT,
            timeout=timeout or HTTPClient.DEFAULT_TIMEOUT,
        )
    return _http_client


def reset_http_client() -> None:
    """Close and forget the shared client (for testing)."""
    global _http_client
    if _http_client is not None:
        _http_client.close()
    _http_client = None
