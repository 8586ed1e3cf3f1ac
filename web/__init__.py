"""
Governance Monitor - Web Dashboard Module.

Exposes the dashboard state over HTTP:
- Change metrics, history, logs and governance rules
- View selection
- LLM code analyzer
"""

from .main import app

__all__ = [
    'app',
]
