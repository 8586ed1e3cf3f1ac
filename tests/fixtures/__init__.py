"""
Centralized test fixtures for the governance monitor.

- llm_mocks: analysis payloads, fake proxy transport, fake analysis clients
"""

from .llm_mocks import (
    ANALYSIS_PAYLOAD,
    analysis_payload,
    fenced,
    FakeTransport,
    FakeAnalysisClient,
    ImmediateAnalysisClient,
)

__all__ = [
    'ANALYSIS_PAYLOAD',
    'analysis_payload',
    'fenced',
    'FakeTransport',
    'FakeAnalysisClient',
    'ImmediateAnalysisClient',
]
