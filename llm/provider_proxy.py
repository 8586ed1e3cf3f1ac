"""
HTTP Proxy Transport
====================

Posts analysis prompts to the backend LLM proxy over HTTP.

The proxy accepts {"prompt": <string>} and answers {"text": <string>}.
On failure it may answer with a body holding an "error" field; that detail
is preferred over the generic HTTP error text.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from core.exceptions import ProxyError
from core.http_client import HTTPClient

from .provider_base import ProxyTransport

logger = logging.getLogger(__name__)


def _error_detail(response: requests.Response) -> Optional[str]:
    """Extract the server-supplied "error" message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("error")
        if isinstance(detail, str) and detail:
            return detail
        if isinstance(detail, dict) and detail.get("message"):
            return str(detail["message"])
    return None


class HTTPProxyTransport(ProxyTransport):
    """
    requests-backed transport.

    Makes exactly one attempt per call; retries are left to the user.
    """

    def __init__(self, client: Optional[HTTPClient] = None):
        """
        Initialize the transport.

        Args:
            client: HTTP client to post with; a private client is
                created when omitted
        """
        self._client = client or HTTPClient()

    @property
    def provider_name(self) -> str:
        return "http"

    def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        timeout: float,
    ) -> Dict[str, Any]:
        try:
            response = self._client.post(url, json=payload, timeout=timeout)
        except requests.exceptions.Timeout as e:
            raise ProxyError(f"Request timed out after {timeout:g}s", cause=e) from e
        except requests.exceptions.RequestException as e:
            raise ProxyError(str(e) or type(e).__name__, cause=e) from e

        if not response.ok:
            detail = _error_detail(response)
            if detail is None:
                detail = f"Http failure response for {url}: {response.status_code} {response.reason or ''}".rstrip()
            logger.error(f"LLM proxy returned {response.status_code}: {detail}")
            raise ProxyError(detail, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"LLM proxy returned a non-JSON body ({len(response.content)} bytes)")
            raise ProxyError(f"Http failure during parsing for {url}", status_code=response.status_code, cause=e) from e

        if not isinstance(body, dict):
            raise ProxyError(
                f"Unexpected response body type: {type(body).__name__}",
                status_code=response.status_code,
            )
        return body

    def close(self) -> None:
        self._client.close()
