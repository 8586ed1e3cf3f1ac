"""
Proxy Transport Base - Abstract Interface
=========================================

Defines the abstract transport used to reach the LLM proxy.
A transport exposes a single operation: post a JSON body, get a JSON body back.
Tests substitute a fake transport; production uses HTTPProxyTransport.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class ProxyTransport(ABC):
    """
    Abstract base class for proxy transports.

    Subclasses must implement:
    - provider_name (property): String identifier
    - post_json(): Send one request and return the decoded response body

    Implementations raise core.exceptions.ProxyError for any transport
    failure (network error, non-2xx status, timeout, undecodable body).
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return transport identifier (e.g. "http")."""
        pass

    @abstractmethod
    def post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        timeout: float,
    ) -> Dict[str, Any]:
        """
        Send a JSON body to the proxy.

        Args:
            url: Proxy endpoint
            payload: JSON-serialisable request body
            timeout: Request timeout in seconds

        Returns:
            Decoded JSON response body
        """
        pass

    def close(self) -> None:
        """Release any resources held by the transport."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider_name!r})"
