"""
LLM Governance Analysis Layer
=============================

Talks to the backend LLM proxy to check agent-proposed code against the
bot's governance rules.

Usage:
    from llm import AnalysisClient, HTTPProxyTransport, create_analysis_client

    # From settings (config/base.yaml + environment)
    client = create_analysis_client()

    # Explicit
    client = AnalysisClient(HTTPProxyTransport(), proxy_url="http://localhost:3000/api/gemini")
    analysis = await client.analyze_code(code, query, rules)

CRITICAL: This layer is for review ONLY.
- NO trading decisions
- One request per analysis, no retries
"""

from .provider_base import ProxyTransport
from .provider_proxy import HTTPProxyTransport
from .prompts import build_analysis_prompt, ANALYSIS_KEYS
from .response_parser import parse_analysis_text, strip_json_fence
from .analysis_client import AnalysisClient, create_analysis_client

__all__ = [
    # Transport
    "ProxyTransport",
    "HTTPProxyTransport",
    # Prompt
    "build_analysis_prompt",
    "ANALYSIS_KEYS",
    # Extraction
    "parse_analysis_text",
    "strip_json_fence",
    # Client
    "AnalysisClient",
    "create_analysis_client",
]
