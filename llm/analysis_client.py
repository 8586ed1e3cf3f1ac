"""
Code Governance Analysis Client
===============================

Sends a code snippet, a free-text query and the governance rules to the LLM
proxy and returns a structured compliance analysis.

Flow:
1. Validate inputs (no request is made when any is empty)
2. Build the prompt from the fixed template
3. POST {"prompt": ...} once, bounded by the timeout (default 60s)
4. Unwrap the "text" field and parse the (possibly fenced) JSON inside it

Failures surface as:
- InvalidInputError: missing code, query or rules
- ProxyError: network failure, non-2xx response or timeout
- MalformedResponseError: model output is not the expected JSON

No retries and no partial results.

Usage:
    from llm import AnalysisClient, HTTPProxyTransport

    client = AnalysisClient(HTTPProxyTransport(), proxy_url="http://localhost:3000/api/gemini")
    analysis = await client.analyze_code(code, "Check the re-entry rule", rules)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from core.exceptions import (
    GovernanceSystemError,
    InvalidInputError,
    MalformedResponseError,
    ProxyError,
)
from core.structured_log import jlog
from core.types import AnalysisResult

from .prompts import build_analysis_prompt
from .provider_base import ProxyTransport
from .response_parser import parse_analysis_text

logger = logging.getLogger(__name__)


class AnalysisClient:
    """
    Client for the governance analysis proxy.

    The transport is injected so tests can substitute a fake. The blocking
    transport call runs in a worker thread; the event loop stays free while
    the request is in flight.
    """

    DEFAULT_PROXY_URL = "http://localhost:3000/api/gemini"
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        transport: ProxyTransport,
        proxy_url: str = DEFAULT_PROXY_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            transport: Proxy transport used for the single POST
            proxy_url: Full URL of the proxy endpoint
            timeout: Client-side bound on the request, in seconds
        """
        self.transport = transport
        self.proxy_url = proxy_url
        self.timeout = timeout

    async def analyze_code(self, code: str, user_query: str, rules: str) -> AnalysisResult:
        """
        Analyze a code snippet against the governance rules.

        Args:
            code: Code proposed by an agent
            user_query: What the user wants checked
            rules: Governance rules (source of truth)

        Returns:
            Parsed AnalysisResult

        Raises:
            InvalidInputError, ProxyError, MalformedResponseError
        """
        if not code or not user_query or not rules:
            raise InvalidInputError("Code, user query, and rules must be provided.")

        prompt = build_analysis_prompt(code, user_query, rules)
        jlog("analysis_started", proxy_url=self.proxy_url, prompt_chars=len(prompt))

        envelope = await self._post_prompt(prompt)

        text = envelope.get("text") if isinstance(envelope, dict) else None
        if not isinstance(text, str):
            logger.error(f"Proxy response has no text field: {type(envelope).__name__}")
            jlog("analysis_parse_failed", level="ERROR", error="missing text field", raw_text=str(envelope))
            raise MalformedResponseError(context={"reason": "missing_text"})

        result = parse_analysis_text(text)
        jlog(
            "analysis_succeeded",
            checks=len(result.rule_compliance_check),
            violations=len(result.violations),
        )
        return result

    async def _post_prompt(self, prompt: str) -> dict:
        """Send the prompt once and normalise every failure to ProxyError."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(
                    self.transport.post_json,
                    self.proxy_url,
                    {"prompt": prompt},
                    self.timeout,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"LLM proxy timed out after {self.timeout:g}s")
            raise ProxyError(f"Request timed out after {self.timeout:g}s", cause=e) from e
        except ProxyError as e:
            logger.error(f"LLM proxy error: {e}")
            raise
        except GovernanceSystemError:
            raise
        except Exception as e:
            logger.error(f"LLM proxy error: {e}")
            raise ProxyError(str(e) or "Unknown proxy error", cause=e) from e


def create_analysis_client(
    transport: Optional[ProxyTransport] = None,
    proxy_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> AnalysisClient:
    """
    Build a client from settings, with optional overrides.

    Defaults come from config (proxy.base_url + proxy.path, proxy.timeout_seconds).
    """
    from config.settings_schema import load_validated_settings
    from core.http_client import get_http_client
    from .provider_proxy import HTTPProxyTransport

    settings = load_validated_settings()
    if transport is None:
        transport = HTTPProxyTransport(
            get_http_client(
                user_agent=settings.proxy.user_agent,
                timeout=settings.proxy.timeout_seconds,
            )
        )
    return AnalysisClient(
        transport=transport,
        proxy_url=proxy_url or settings.proxy.url,
        timeout=timeout if timeout is not None else settings.proxy.timeout_seconds,
    )
