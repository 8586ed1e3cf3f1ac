"""
Unit Tests for the governance AnalysisClient.

Run: python -m pytest tests/llm/test_analysis_client.py -v
"""

import asyncio
import json

import pytest

from core.exceptions import InvalidInputError, MalformedResponseError, ProxyError
from core.http_client import get_http_client
from llm.analysis_client import AnalysisClient, create_analysis_client
from llm.provider_proxy import HTTPProxyTransport
from tests.fixtures.llm_mocks import ANALYSIS_PAYLOAD, FakeTransport, fenced

PROXY_URL = "http://proxy.test/api/gemini"


def _run(coro):
    return asyncio.run(coro)


class TestInputValidation:

    @pytest.mark.parametrize("code,query,rules", [
        ("", "query", "rules"),
        ("code", "", "rules"),
        ("code", "query", ""),
    ])
    def test_empty_input_rejected_without_network(self, code, query, rules):
        transport = FakeTransport()
        client = AnalysisClient(transport, proxy_url=PROXY_URL)

        with pytest.raises(InvalidInputError) as exc_info:
            _run(client.analyze_code(code, query, rules))

        assert transport.calls == []
        assert exc_info.value.message == "Code, user query, and rules must be provided."


class TestSuccessfulAnalysis:

    def test_fenced_payload_parsed(self):
        transport = FakeTransport({"text": fenced(ANALYSIS_PAYLOAD)})
        client = AnalysisClient(transport, proxy_url=PROXY_URL)

        result = _run(client.analyze_code("code()", "check it", "rule 1"))

        assert result.to_dict() == ANALYSIS_PAYLOAD

    def test_unfenced_payload_parsed(self):
        transport = FakeTransport({"text": json.dumps(ANALYSIS_PAYLOAD)})
        client = AnalysisClient(transport, proxy_url=PROXY_URL)

        result = _run(client.analyze_code("code()", "check it", "rule 1"))

        assert result.overall_assessment == ANALYSIS_PAYLOAD["overallAssessment"]

    def test_single_request_with_prompt_body(self):
        transport = FakeTransport()
        client = AnalysisClient(transport, proxy_url=PROXY_URL, timeout=12.5)

        _run(client.analyze_code("closeLeg()", "any delays?", "Reopen immediately"))

        assert len(transport.calls) == 1
        call = transport.calls[0]
        assert call["url"] == PROXY_URL
        assert call["timeout"] == 12.5
        assert set(call["payload"]) == {"prompt"}
        prompt = call["payload"]["prompt"]
        assert "closeLeg()" in prompt
        assert "any delays?" in prompt
        assert "Reopen immediately" in prompt

    def test_default_timeout_is_sixty_seconds(self):
        client = AnalysisClient(FakeTransport())
        assert client.timeout == 60.0


class TestFailures:

    def test_transport_proxy_error_propagates(self):
        transport = FakeTransport(error=ProxyError("Gemini quota exceeded", status_code=429))
        client = AnalysisClient(transport, proxy_url=PROXY_URL)

        with pytest.raises(ProxyError) as exc_info:
            _run(client.analyze_code("c", "q", "r"))

        assert exc_info.value.message == "Proxy Error: Gemini quota exceeded"
        assert exc_info.value.status_code == 429

    def test_unexpected_transport_exception_normalised(self):
        transport = FakeTransport(error=RuntimeError("socket closed"))
        client = AnalysisClient(transport, proxy_url=PROXY_URL)

        with pytest.raises(ProxyError) as exc_info:
            _run(client.analyze_code("c", "q", "r"))

        assert exc_info.value.message == "Proxy Error: socket closed"

    def test_exception_without_message_gets_generic_detail(self):
        transport = FakeTransport(error=RuntimeError())
        client = AnalysisClient(transport, proxy_url=PROXY_URL)

        with pytest.raises(ProxyError) as exc_info:
            _run(client.analyze_code("c", "q", "r"))

        assert exc_info.value.message == "Proxy Error: Unknown proxy error"

    def test_timeout_becomes_proxy_error(self):
        transport = FakeTransport(delay=0.5)
        client = AnalysisClient(transport, proxy_url=PROXY_URL, timeout=0.05)

        with pytest.raises(ProxyError) as exc_info:
            _run(client.analyze_code("c", "q", "r"))

        assert "timed out" in exc_info.value.message
        assert exc_info.value.message.startswith("Proxy Error: ")

    def test_missing_text_field_is_malformed(self):
        transport = FakeTransport({"candidates": []})
        client = AnalysisClient(transport, proxy_url=PROXY_URL)

        with pytest.raises(MalformedResponseError):
            _run(client.analyze_code("c", "q", "r"))

    def test_non_json_text_is_malformed_not_empty(self):
        transport = FakeTransport({"text": "I think the code is fine."})
        client = AnalysisClient(transport, proxy_url=PROXY_URL)

        with pytest.raises(MalformedResponseError):
            _run(client.analyze_code("c", "q", "r"))


class TestCreateAnalysisClient:

    def test_uses_settings_defaults(self):
        client = create_analysis_client()
        assert client.proxy_url == "http://localhost:3000/api/gemini"
        assert client.timeout == 60.0
        assert isinstance(client.transport, HTTPProxyTransport)
        assert client.transport._client is get_http_client()

    def test_env_url_override(self, monkeypatch):
        monkeypatch.setenv("GOVERNANCE_PROXY_URL", "https://bot.example.com/api/gemini")
        client = create_analysis_client(transport=FakeTransport())
        assert client.proxy_url == "https://bot.example.com/api/gemini"

    def test_explicit_arguments_win(self):
        transport = FakeTransport()
        client = create_analysis_client(transport=transport, proxy_url=PROXY_URL, timeout=5)
        assert client.transport is transport
        assert client.proxy_url == PROXY_URL
        assert client.timeout == 5
