"""
Unified Exception Hierarchy for the Governance Monitor.

All exceptions inherit from GovernanceSystemError, enabling consistent error
handling at the boundary of the analysis workflow and the web layer.

Usage:
    from core.exceptions import AnalysisError, ProxyError, describe_error

    try:
        result = await client.analyze_code(code, query, rules)
    except ProxyError as e:
        # Transport-level failure (network, non-2xx, timeout)
        show(e.message)
    except AnalysisError as e:
        # Invalid input or malformed AI response
        show(describe_error(e))
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class GovernanceSystemError(Exception):
    """
    Base exception for all governance monitor errors.

    Attributes:
        error_code: Unique identifier for this error type
        is_recoverable: Whether the caller can simply try again
        context: Additional context about the error
        timestamp: When the error occurred
    """
    error_code: str = "SYSTEM_ERROR"
    is_recoverable: bool = True

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(message)

    def __str__(self) -> str:
        base = f"[{self.error_code}] {self.message}"
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "is_recoverable": self.is_recoverable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# ANALYSIS ERRORS
# =============================================================================

class AnalysisError(GovernanceSystemError):
    """
    Base class for code-analysis errors.

    Every subclass is recovered by the dashboard state and shown to the user
    as a plain message; none propagates past the analysis workflow.
    """
    error_code = "ANALYSIS_ERROR"


class InvalidInputError(AnalysisError):
    """
    Raised when code, query or rules are missing.

    Raised before any request is sent to the proxy.
    """
    error_code = "INVALID_INPUT"
    is_recoverable = False


class ProxyError(AnalysisError):
    """
    Raised when the LLM proxy call fails.

    Covers connection failures, non-2xx responses, timeouts and unreadable
    response bodies. The message is always prefixed with "Proxy Error: " so
    it can be told apart from a parse failure.
    """
    error_code = "PROXY_ERROR"
    PREFIX = "Proxy Error: "

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.detail = detail or "Unknown proxy error"
        self.status_code = status_code
        ctx = dict(context or {})
        if status_code is not None:
            ctx.setdefault("status_code", status_code)
        super().__init__(f"{self.PREFIX}{self.detail}", ctx, cause)


class MalformedResponseError(AnalysisError):
    """
    Raised when the model output cannot be parsed into an analysis.

    The message never contains the raw model output; that is only logged.
    """
    error_code = "MALFORMED_AI_RESPONSE"
    DEFAULT_MESSAGE = "Failed to parse analysis from AI. The response was not valid JSON."

    def __init__(
        self,
        message: str = DEFAULT_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, context, cause)


# =============================================================================
# DATA ERRORS
# =============================================================================

class DataValidationError(GovernanceSystemError):
    """
    Raised when a record or fixture does not match the expected shape.
    """
    error_code = "DATA_VALIDATION_FAILED"
    is_recoverable = False


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(GovernanceSystemError):
    """
    Base class for configuration errors.
    """
    error_code = "CONFIG_ERROR"
    is_recoverable = False


class SettingsValidationError(ConfigurationError):
    """
    Raised when settings fail schema validation.
    """
    error_code = "SETTINGS_INVALID"


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def describe_error(error: BaseException) -> str:
    """
    Return the human-readable message for an error.

    Our own exceptions give their bare message (without code and context);
    anything else gives str(error). Falls back to a generic message when
    neither has text.
    """
    if isinstance(error, GovernanceSystemError):
        message = error.message
    else:
        message = str(error)
    return message or UNKNOWN_ERROR_MESSAGE


def get_error_code(error: Exception) -> str:
    """
    Get the error code for an exception.

    Returns:
        Error code string, or "UNKNOWN" for foreign exceptions
    """
    if isinstance(error, GovernanceSystemError):
        return error.error_code
    return "UNKNOWN"
