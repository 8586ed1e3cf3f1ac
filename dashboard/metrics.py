"""
Change-history metrics shown on the dashboard panel.

compute_metrics() is a pure function of the record collection. The state
holder calls it every time the collection is replaced; nothing is cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable

from core.types import ChangeAuthor, ChangeRecord, ChangeStatus

HIGH_IMPACT_THRESHOLD = 7


@dataclass(frozen=True)
class DashboardMetrics:
    """Aggregate counts over the change history."""
    total_changes: int = 0
    agent_changes: int = 0
    human_changes: int = 0
    reverted_changes: int = 0
    high_impact_changes: int = 0
    average_impact: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalChanges": self.total_changes,
            "agentChanges": self.agent_changes,
            "humanChanges": self.human_changes,
            "revertedChanges": self.reverted_changes,
            "highImpactChanges": self.high_impact_changes,
            "averageImpact": self.average_impact,
        }


def compute_metrics(records: Iterable[ChangeRecord]) -> DashboardMetrics:
    """
    Derive dashboard metrics from change records.

    High impact means impact_score strictly above 7. The average is 0.0 for
    an empty collection.
    """
    history = list(records)
    total = len(history)
    if total == 0:
        return DashboardMetrics()

    return DashboardMetrics(
        total_changes=total,
        agent_changes=sum(1 for c in history if c.author == ChangeAuthor.AGENT),
        human_changes=sum(1 for c in history if c.author == ChangeAuthor.HUMAN),
        reverted_changes=sum(1 for c in history if c.status == ChangeStatus.REVERTED),
        high_impact_changes=sum(1 for c in history if c.impact_score > HIGH_IMPACT_THRESHOLD),
        average_impact=sum(c.impact_score for c in history) / total,
    )
