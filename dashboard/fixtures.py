"""
Sample data loader.

The dashboard has no change-tracking backend yet; at startup it shows the
records in sample_data.yaml. Log timestamps are generated relative to load
time so the log panel always looks recent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from core.exceptions import DataValidationError
from core.types import ChangeRecord, LogEntry

logger = logging.getLogger(__name__)

SAMPLE_DATA_PATH = Path(__file__).parent / "sample_data.yaml"


@dataclass(frozen=True)
class SampleData:
    """Everything the dashboard shows before a real backend exists."""
    governance_rules: str = ""
    code_snippet: str = ""
    analyzer_query: str = ""
    change_history: Tuple[ChangeRecord, ...] = field(default_factory=tuple)
    logs: Tuple[LogEntry, ...] = field(default_factory=tuple)


def _iso_millis(ts: datetime) -> str:
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _build_logs(raw_logs: Any, now: datetime) -> Tuple[LogEntry, ...]:
    entries = []
    for raw in raw_logs or []:
        data: Dict[str, Any] = dict(raw)
        offset = float(data.pop("offset_seconds", 0))
        data["timestamp"] = _iso_millis(now - timedelta(seconds=offset))
        entries.append(LogEntry.from_dict(data))
    return tuple(entries)


def load_sample_data(
    path: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> SampleData:
    """
    Load sample data from YAML.

    Args:
        path: YAML file (defaults to the bundled sample_data.yaml)
        now: Reference time for log timestamps (defaults to current UTC time)

    Raises:
        DataValidationError: file missing or records malformed
    """
    path = path or SAMPLE_DATA_PATH
    now = now or datetime.now(timezone.utc)

    if not path.exists():
        raise DataValidationError(f"Sample data file not found: {path}", context={"path": str(path)})

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise DataValidationError("Sample data must be a mapping", context={"path": str(path)})

    sample = SampleData(
        governance_rules=str(raw.get("governance_rules", "")),
        code_snippet=str(raw.get("code_snippet", "")),
        analyzer_query=str(raw.get("analyzer_query", "")),
        change_history=tuple(ChangeRecord.from_dict(r) for r in raw.get("change_history") or []),
        logs=_build_logs(raw.get("logs"), now),
    )
    logger.info(
        f"Loaded sample data: {len(sample.change_history)} changes, {len(sample.logs)} log entries"
    )
    return sample
