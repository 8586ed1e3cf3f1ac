"""
Dashboard Module for the Governance Monitor

Holds the dashboard state, change-history metrics and display helpers.
"""

from dashboard.metrics import DashboardMetrics, compute_metrics
from dashboard.formatting import format_locale_string, format_locale_time_string
from dashboard.fixtures import SampleData, load_sample_data
from dashboard.state import (
    DashboardSnapshot,
    DashboardState,
    get_dashboard_state,
    reset_dashboard_state,
)

__all__ = [
    'DashboardMetrics',
    'compute_metrics',
    'format_locale_string',
    'format_locale_time_string',
    'SampleData',
    'load_sample_data',
    'DashboardSnapshot',
    'DashboardState',
    'get_dashboard_state',
    'reset_dashboard_state',
]
