"""
Pytest configuration and shared fixtures for governance monitor tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings_loader import clear_settings_cache  # noqa: E402
from core import structured_log  # noqa: E402
from core.http_client import reset_http_client  # noqa: E402
from core.types import AnalysisResult, ChangeRecord  # noqa: E402
from dashboard.state import reset_dashboard_state  # noqa: E402
from tests.fixtures.llm_mocks import ANALYSIS_PAYLOAD  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Send event logs to tmp_path and reset global singletons and settings."""
    for var in (
        "GOVERNANCE_CONFIG_PATH",
        "GOVERNANCE_PROXY_URL",
        "GOVERNANCE_PROXY_TIMEOUT",
        "GOVERNANCE_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)

    structured_log.configure_event_log(tmp_path / "events.jsonl")
    clear_settings_cache()
    reset_dashboard_state()
    reset_http_client()
    yield
    structured_log.configure_event_log(tmp_path / "events.jsonl")
    clear_settings_cache()
    reset_dashboard_state()
    reset_http_client()


def _record(id_, timestamp, author, impact, status="active", type_="code"):
    return ChangeRecord.from_dict({
        "id": id_,
        "timestamp": timestamp,
        "type": type_,
        "files": ["trading-engine.service.ts"],
        "description": f"change {id_}",
        "reason": "test",
        "author": author,
        "impactScore": impact,
        "status": status,
    })


@pytest.fixture
def sample_records():
    """Four records: impacts [6, 4, 8, 2], alternating authors, one reverted."""
    return [
        _record("CHG_1", 1765145975343, "agent", 6),
        _record("CHG_2", 1765135080558, "human", 4, type_="config"),
        _record("CHG_3", 1765123633657, "agent", 8, status="reverted", type_="strategy"),
        _record("CHG_4", 1765042736807, "human", 2, type_="infrastructure"),
    ]


@pytest.fixture
def sample_analysis():
    """AnalysisResult built from the canonical payload."""
    return AnalysisResult.from_dict(ANALYSIS_PAYLOAD)
