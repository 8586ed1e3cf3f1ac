"""
Web Dashboard - FastAPI Application
=====================================

Serves the governance monitor's state over HTTP: metrics, change history,
bot logs, governance rules, view selection and the code analyzer.

Features:
- **Metrics:** Change counts by author, reverted and high-impact changes, average impact.
- **History / Logs / Rules:** Sample data until a change-tracking backend exists.
- **Analyzer:** Edit code and query, run an LLM compliance analysis through the proxy.

Usage:
    To run the FastAPI application:
    uvicorn web.main:app --reload --port 8000

    Or: python scripts/serve_dashboard.py --port 8000
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from core.types import ActiveView, LogLevel
from dashboard.formatting import format_locale_string, format_locale_time_string
from dashboard.state import DashboardState, get_dashboard_state

logger = logging.getLogger(__name__)
app = FastAPI(
    title="Governance Monitor API",
    description="Monitoring dashboard and code-governance analyzer for the hedge trading bot.",
    version="1.0.0",
)


class ViewSelection(BaseModel):
    view: Literal["dashboard", "analyzer", "history", "rules", "logs"]


class AnalyzerInput(BaseModel):
    code: Optional[str] = None
    query: Optional[str] = None


def _analyzer_payload(state: DashboardState) -> Dict[str, Any]:
    return {
        "code": state.analyzer_code,
        "query": state.analyzer_query,
        "isAnalyzing": state.is_analyzing,
        "analysis": state.analysis.to_dict() if state.analysis else None,
        "error": state.analysis_error,
    }


@app.get("/", response_class=HTMLResponse, summary="Home Page")
async def read_root():
    """
    Returns a simple HTML page with links to the API documentation and key endpoints.
    """
    html_content = """
    <html>
        <head>
            <title>Governance Monitor</title>
        </head>
        <body>
            <h1>Governance Monitor</h1>
            <p>Change history, logs and rule compliance for the hedge trading bot.</p>
            <ul>
                <li><a href="/docs">API Documentation (Swagger UI)</a></li>
                <li><a href="/status">Dashboard Status</a></li>
                <li><a href="/metrics">Change Metrics</a></li>
                <li><a href="/history">Change History</a></li>
                <li><a href="/logs">Bot Logs</a></li>
                <li><a href="/rules">Governance Rules</a></li>
                <li><a href="/analyzer">Code Analyzer</a></li>
            </ul>
        </body>
    </html>
    """
    return html_content


@app.get("/status", summary="Get dashboard status")
async def get_status() -> Dict[str, Any]:
    """
    Returns the active view and the analyzer's current state.
    """
    try:
        state = get_dashboard_state()
        return {
            "timestamp": datetime.now().isoformat(),
            "active_view": state.active_view.value,
            "is_analyzing": state.is_analyzing,
            "has_analysis": state.analysis is not None,
            "analysis_error": state.analysis_error,
            "log_level": logging.getLevelName(logger.getEffectiveLevel()),
        }
    except Exception as e:
        logger.error(f"Error getting dashboard status: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/metrics", summary="Get change-history metrics")
async def get_metrics() -> Dict[str, Any]:
    try:
        return get_dashboard_state().metrics.to_dict()
    except Exception as e:
        logger.error(f"Error computing metrics: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/history", summary="Get change history (newest first)")
async def get_history() -> List[Dict[str, Any]]:
    try:
        records = get_dashboard_state().change_history
        return [
            {**record.to_dict(), "formattedTimestamp": format_locale_string(record.timestamp)}
            for record in records
        ]
    except Exception as e:
        logger.error(f"Error getting change history: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/logs", summary="Get bot log entries")
async def get_logs(level: Optional[LogLevel] = Query(default=None)) -> List[Dict[str, Any]]:
    """
    Returns bot log entries, optionally filtered by level.
    """
    try:
        entries = get_dashboard_state().logs
        return [
            {**entry.to_dict(), "formattedTime": format_locale_time_string(entry.timestamp)}
            for entry in entries
            if level is None or entry.level == level
        ]
    except Exception as e:
        logger.error(f"Error getting logs: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/rules", summary="Get governance rules")
async def get_rules() -> Dict[str, str]:
    try:
        return {"rules": get_dashboard_state().governance_rules}
    except Exception as e:
        logger.error(f"Error getting governance rules: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.put("/view", summary="Select the active view")
async def set_view(selection: ViewSelection) -> Dict[str, str]:
    try:
        state = get_dashboard_state()
        state.set_view(ActiveView(selection.view))
        return {"active_view": state.active_view.value}
    except Exception as e:
        logger.error(f"Error setting view: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/analyzer", summary="Get analyzer state")
async def get_analyzer() -> Dict[str, Any]:
    try:
        return _analyzer_payload(get_dashboard_state())
    except Exception as e:
        logger.error(f"Error getting analyzer state: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.put("/analyzer", summary="Update analyzer code and query")
async def update_analyzer(body: AnalyzerInput) -> Dict[str, Any]:
    try:
        state = get_dashboard_state()
        if body.code is not None:
            state.set_analyzer_code(body.code)
        if body.query is not None:
            state.set_analyzer_query(body.query)
        return _analyzer_payload(state)
    except Exception as e:
        logger.error(f"Error updating analyzer: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/analyzer/run", summary="Run LLM compliance analysis")
async def run_analyzer() -> Dict[str, Any]:
    """
    Runs the analysis on the current code and query.

    Analysis failures are reported in the "error" field with status 200;
    when code or query is empty nothing is run and the previous outcome stays.
    """
    try:
        state = get_dashboard_state()
        await state.run_analysis()
        return _analyzer_payload(state)
    except Exception as e:
        logger.error(f"Error running analysis: {e}")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
