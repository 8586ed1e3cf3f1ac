"""
Dashboard State Holder
======================

Owns everything the dashboard shows: the active view, the code analyzer's
inputs and outcome, the governance rules, the change history, the bot logs
and the metrics derived from the history.

Observers subscribe to field changes instead of polling:

    state = DashboardState(client)
    state.subscribe(lambda field_name: print("changed:", field_name))
    state.set_view("analyzer")          # -> changed: active_view

Analysis workflow (one run):

    Idle -> Requesting -> Succeeded | Failed -> (reset at next run)

    is_analyzing=True, analysis=None, analysis_error=""
    -> client.analyze_code(code, query, rules)
    -> analysis=<result>  or  analysis_error=<message>
    -> is_analyzing=False   (always, via finally)

Overlapping runs are not serialised: each one completes on its own and the
one that resolves last owns analysis/analysis_error. The first to finish
also clears is_analyzing while the other may still be in flight.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from core.exceptions import describe_error, get_error_code
from core.structured_log import jlog
from core.types import ActiveView, AnalysisResult, ChangeRecord, LogEntry

from .fixtures import SampleData, load_sample_data
from .metrics import DashboardMetrics, compute_metrics

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


@dataclass(frozen=True)
class DashboardSnapshot:
    """Immutable view of the dashboard state at one point in time."""
    active_view: ActiveView
    analyzer_code: str
    analyzer_query: str
    analysis: Optional[AnalysisResult]
    analysis_error: str
    is_analyzing: bool
    governance_rules: str
    change_history: Tuple[ChangeRecord, ...] = field(default_factory=tuple)
    logs: Tuple[LogEntry, ...] = field(default_factory=tuple)
    metrics: DashboardMetrics = field(default_factory=DashboardMetrics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activeView": self.active_view.value,
            "analyzerCode": self.analyzer_code,
            "analyzerQuery": self.analyzer_query,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "analysisError": self.analysis_error,
            "isAnalyzing": self.is_analyzing,
            "governanceRules": self.governance_rules,
            "changeHistory": [c.to_dict() for c in self.change_history],
            "logs": [entry.to_dict() for entry in self.logs],
            "metrics": self.metrics.to_dict(),
        }


class DashboardState:
    """
    Observable state for the governance dashboard.

    The analysis client is injected; anything with an async
    analyze_code(code, user_query, rules) works.
    """

    def __init__(
        self,
        analysis_client: Any,
        default_view: Union[ActiveView, str] = ActiveView.DASHBOARD,
    ):
        self._client = analysis_client
        self._listeners: List[Listener] = []

        self._active_view = ActiveView(default_view)
        self._analyzer_code = ""
        self._analyzer_query = ""
        self._analysis: Optional[AnalysisResult] = None
        self._analysis_error = ""
        self._is_analyzing = False

        self._governance_rules = ""
        self._change_history: Tuple[ChangeRecord, ...] = ()
        self._logs: Tuple[LogEntry, ...] = ()
        self._metrics = compute_metrics(self._change_history)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, field_name: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(field_name)
            except Exception as e:
                logger.error(f"State listener failed on '{field_name}': {e}")

    def _set(self, field_name: str, value: Any) -> None:
        attr = f"_{field_name}"
        if getattr(self, attr) == value:
            return
        setattr(self, attr, value)
        self._notify(field_name)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def active_view(self) -> ActiveView:
        return self._active_view

    @property
    def analyzer_code(self) -> str:
        return self._analyzer_code

    @property
    def analyzer_query(self) -> str:
        return self._analyzer_query

    @property
    def analysis(self) -> Optional[AnalysisResult]:
        return self._analysis

    @property
    def analysis_error(self) -> str:
        return self._analysis_error

    @property
    def is_analyzing(self) -> bool:
        return self._is_analyzing

    @property
    def governance_rules(self) -> str:
        return self._governance_rules

    @property
    def change_history(self) -> Tuple[ChangeRecord, ...]:
        return self._change_history

    @property
    def logs(self) -> Tuple[LogEntry, ...]:
        return self._logs

    @property
    def metrics(self) -> DashboardMetrics:
        return self._metrics

    def snapshot(self) -> DashboardSnapshot:
        return DashboardSnapshot(
            active_view=self._active_view,
            analyzer_code=self._analyzer_code,
            analyzer_query=self._analyzer_query,
            analysis=self._analysis,
            analysis_error=self._analysis_error,
            is_analyzing=self._is_analyzing,
            governance_rules=self._governance_rules,
            change_history=self._change_history,
            logs=self._logs,
            metrics=self._metrics,
        )

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_view(self, view: Union[ActiveView, str]) -> None:
        """
        Switch the active panel.

        Raises:
            ValueError: view is not one of dashboard, analyzer, history, rules, logs
        """
        view = ActiveView(view)
        if view != self._active_view:
            jlog("view_changed", level="DEBUG", previous=self._active_view.value, view=view.value)
        self._set("active_view", view)

    def set_analyzer_code(self, code: str) -> None:
        self._set("analyzer_code", code)

    def set_analyzer_query(self, query: str) -> None:
        self._set("analyzer_query", query)

    def set_governance_rules(self, rules: str) -> None:
        self._set("governance_rules", rules)

    def set_change_history(self, records: Iterable[ChangeRecord]) -> None:
        """Replace the change history (newest first) and recompute metrics."""
        history = tuple(sorted(records, key=lambda c: c.timestamp, reverse=True))
        self._set("change_history", history)
        self._set("metrics", compute_metrics(history))

    def set_logs(self, entries: Iterable[LogEntry]) -> None:
        self._set("logs", tuple(entries))

    def load_sample_data(self, sample: Optional[SampleData] = None) -> None:
        """Install rules, history, logs and analyzer defaults from sample data."""
        sample = sample or load_sample_data()
        self.set_governance_rules(sample.governance_rules)
        self.set_change_history(sample.change_history)
        self.set_logs(sample.logs)
        self.set_analyzer_code(sample.code_snippet)
        self.set_analyzer_query(sample.analyzer_query)
        jlog(
            "sample_data_loaded",
            changes=len(sample.change_history),
            logs=len(sample.logs),
        )

    # ------------------------------------------------------------------
    # Analysis workflow
    # ------------------------------------------------------------------

    async def run_analysis(self) -> None:
        """
        Analyze the current code against the governance rules.

        Does nothing when code or query is empty. Rules are passed through as
        they are; the client rejects empty rules and that error is stored like
        any other. Never raises for analysis failures.
        """
        code = self._analyzer_code
        query = self._analyzer_query
        if not code or not query:
            return

        self._set("is_analyzing", True)
        self._set("analysis", None)
        self._set("analysis_error", "")

        try:
            analysis = await self._client.analyze_code(code, query, self._governance_rules)
            self._set("analysis", analysis)
        except Exception as e:
            message = describe_error(e)
            logger.warning(f"Analysis failed: {message}")
            jlog("analysis_failed", level="WARNING", error_code=get_error_code(e), error=message)
            self._set("analysis_error", message)
        finally:
            self._set("is_analyzing", False)


# Global instance
_state: Optional[DashboardState] = None


def get_dashboard_state() -> DashboardState:
    """Get the global dashboard state, built from settings on first use."""
    global _state
    if _state is None:
        from config.settings_schema import load_validated_settings
        from llm.analysis_client import create_analysis_client

        settings = load_validated_settings()
        _state = DashboardState(
            create_analysis_client(),
            default_view=settings.dashboard.default_view,
        )
        if settings.dashboard.load_sample_data:
            _state.load_sample_data()
    return _state


def reset_dashboard_state() -> None:
    """Reset the global dashboard state (for testing)."""
    global _state
    _state = None
