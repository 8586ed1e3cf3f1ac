"""
Core Infrastructure
====================

Foundational components for the governance monitor.

Components:
- exceptions: Unified error hierarchy
- types: Change records, log entries, analysis results
- structured_log: JSON event logging
- http_client: Shared requests session
"""

from .exceptions import (
    GovernanceSystemError,
    AnalysisError,
    InvalidInputError,
    ProxyError,
    MalformedResponseError,
    describe_error,
)
from .structured_log import jlog, read_recent_logs

__all__ = [
    # Errors
    'GovernanceSystemError',
    'AnalysisError',
    'InvalidInputError',
    'ProxyError',
    'MalformedResponseError',
    'describe_error',
    # Structured Logging
    'jlog',
    'read_recent_logs',
]
