"""
Typed Settings Schema (Pydantic)
================================

Provides typed, validated configuration for the governance monitor.

Usage:
    from config.settings_schema import load_validated_settings

    settings = load_validated_settings()

    url = settings.proxy.url
    timeout = settings.proxy.timeout_seconds
    view = settings.dashboard.default_view

Environment overrides (applied after base.yaml, .env is read first):
    GOVERNANCE_PROXY_URL       full proxy URL, replaces base_url + path
    GOVERNANCE_PROXY_TIMEOUT   timeout in seconds
    GOVERNANCE_LOG_LEVEL       logging level name
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import SettingsValidationError
from core.types import ActiveView

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


# ============================================================================
# Schema Definitions
# ============================================================================

class ProxyConfig(BaseModel):
    """LLM proxy endpoint configuration."""
    base_url: str = Field(default="http://localhost:3000", description="Proxy host")
    path: str = Field(default="/api/gemini", description="Proxy route")
    url_override: Optional[str] = Field(default=None, description="Full URL, wins over base_url + path")
    timeout_seconds: float = Field(default=60.0, gt=0, description="Client-side request timeout")
    user_agent: str = "GovernanceMonitor/1.0"

    @property
    def url(self) -> str:
        if self.url_override:
            return self.url_override
        return f"{self.base_url.rstrip('/')}/{self.path.lstrip('/')}"


class DashboardConfig(BaseModel):
    """Dashboard startup configuration."""
    default_view: ActiveView = ActiveView.DASHBOARD
    load_sample_data: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    events_file: str = "logs/events.jsonl"
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    backup_count: int = Field(default=5, ge=0)

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class Settings(BaseModel):
    """Complete settings schema."""
    model_config = ConfigDict(extra="allow")  # Allow extra fields not in schema

    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ============================================================================
# Loading
# ============================================================================

def _apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay GOVERNANCE_* environment variables onto raw YAML settings."""
    merged = {k: dict(v) if isinstance(v, dict) else v for k, v in raw.items()}

    proxy_url = os.getenv("GOVERNANCE_PROXY_URL")
    if proxy_url:
        merged.setdefault("proxy", {})["url_override"] = proxy_url

    timeout = os.getenv("GOVERNANCE_PROXY_TIMEOUT")
    if timeout:
        merged.setdefault("proxy", {})["timeout_seconds"] = timeout

    log_level = os.getenv("GOVERNANCE_LOG_LEVEL")
    if log_level:
        merged.setdefault("logging", {})["level"] = log_level

    return merged


def load_validated_settings(force_reload: bool = False) -> Settings:
    """
    Load and validate settings from base.yaml plus environment.

    Returns:
        Validated Settings object

    Raises:
        SettingsValidationError: If settings are invalid
    """
    load_dotenv()
    raw = _apply_env_overrides(load_settings(force_reload=force_reload))

    try:
        return Settings(**raw)
    except ValidationError as e:
        logger.error(f"Settings validation failed: {e}")
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise SettingsValidationError(
            "Settings validation failed:\n" + "\n".join(f"  - {msg}" for msg in errors),
            context={"error_count": len(errors)},
            cause=e,
        ) from e


def configure_logging(settings: Optional[Settings] = None) -> Settings:
    """
    Apply logging settings: root level and the JSONL event log location.
    """
    from core.structured_log import configure_event_log

    settings = settings or load_validated_settings()
    logging.basicConfig(
        level=settings.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(settings.logging.level)
    configure_event_log(
        settings.logging.events_file,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )
    return settings
