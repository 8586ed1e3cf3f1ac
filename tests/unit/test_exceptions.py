"""
Tests for the unified exception hierarchy.

This module tests core/exceptions.py which provides the standard
exception hierarchy for the governance monitor.
"""

import pytest
from datetime import datetime

from core.exceptions import (
    GovernanceSystemError,
    AnalysisError,
    InvalidInputError,
    ProxyError,
    MalformedResponseError,
    DataValidationError,
    ConfigurationError,
    SettingsValidationError,
    describe_error,
    get_error_code,
)


class TestGovernanceSystemError:
    """Tests for the base exception class."""

    def test_basic_creation(self):
        error = GovernanceSystemError("Test error")
        assert str(error) == "[SYSTEM_ERROR] Test error"
        assert error.message == "Test error"
        assert error.error_code == "SYSTEM_ERROR"
        assert error.is_recoverable is True
        assert error.context == {}
        assert error.cause is None
        assert isinstance(error.timestamp, datetime)

    def test_with_context(self):
        error = GovernanceSystemError("Test error", context={"symbol": "BTCUSDT", "leg": "Buy"})
        assert "symbol=BTCUSDT" in str(error)
        assert "leg=Buy" in str(error)

    def test_to_dict(self):
        original = ValueError("Original error")
        d = GovernanceSystemError("Wrapped", context={"k": 1}, cause=original).to_dict()
        assert d["error_code"] == "SYSTEM_ERROR"
        assert d["message"] == "Wrapped"
        assert d["context"] == {"k": 1}
        assert d["cause"] == "Original error"
        assert "timestamp" in d


class TestAnalysisErrors:

    def test_hierarchy(self):
        for cls in (InvalidInputError, ProxyError, MalformedResponseError):
            assert issubclass(cls, AnalysisError)
            assert issubclass(cls, GovernanceSystemError)

    def test_invalid_input(self):
        error = InvalidInputError("Code, user query, and rules must be provided.")
        assert error.error_code == "INVALID_INPUT"
        assert error.is_recoverable is False

    def test_proxy_error_prefix_and_status(self):
        error = ProxyError("Bad Gateway", status_code=502)
        assert error.message == "Proxy Error: Bad Gateway"
        assert error.detail == "Bad Gateway"
        assert error.status_code == 502
        assert error.context["status_code"] == 502
        assert str(error) == "[PROXY_ERROR] Proxy Error: Bad Gateway (status_code=502)"

    def test_proxy_error_without_detail(self):
        assert ProxyError("").message == "Proxy Error: Unknown proxy error"

    def test_malformed_default_message(self):
        error = MalformedResponseError()
        assert error.message == "Failed to parse analysis from AI. The response was not valid JSON."
        assert error.error_code == "MALFORMED_AI_RESPONSE"


class TestOtherErrors:

    def test_settings_validation_is_configuration_error(self):
        error = SettingsValidationError("bad timeout")
        assert isinstance(error, ConfigurationError)
        assert error.is_recoverable is False

    def test_data_validation(self):
        assert DataValidationError("bad record").error_code == "DATA_VALIDATION_FAILED"


class TestHelpers:

    @pytest.mark.parametrize("error,expected", [
        (ProxyError("down", status_code=503), "Proxy Error: down"),
        (MalformedResponseError(context={"reason": "JSONDecodeError"}),
         "Failed to parse analysis from AI. The response was not valid JSON."),
        (ValueError("plain failure"), "plain failure"),
        (RuntimeError(), "An unknown error occurred."),
    ])
    def test_describe_error(self, error, expected):
        assert describe_error(error) == expected

    def test_get_error_code(self):
        assert get_error_code(ProxyError("x")) == "PROXY_ERROR"
        assert get_error_code(KeyError("x")) == "UNKNOWN"
