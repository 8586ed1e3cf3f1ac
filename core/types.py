"""
Unified Types for the Governance Monitor.

Single import location for the records shown on the dashboard and the
structured result of a code analysis.

Usage:
    from core.types import (
        ChangeRecord, ChangeType, ChangeAuthor, ChangeStatus,
        LogEntry, LogLevel,
        AnalysisResult, RuleComplianceCheck,
    )

Note:
    Field names follow the JSON payloads (camelCase) in from_dict/to_dict and
    snake_case on the Python side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.exceptions import DataValidationError


# =============================================================================
# ENUMS
# =============================================================================

class ChangeType(str, Enum):
    """Kind of change applied to the bot."""
    CODE = "code"
    CONFIG = "config"
    STRATEGY = "strategy"
    INFRASTRUCTURE = "infrastructure"


class ChangeAuthor(str, Enum):
    """Who made the change."""
    AGENT = "agent"
    HUMAN = "human"


class ChangeStatus(str, Enum):
    """Lifecycle status of a change."""
    ACTIVE = "active"
    REVERTED = "reverted"
    SUPERSEDED = "superseded"


class ActiveView(str, Enum):
    """Dashboard panel currently shown."""
    DASHBOARD = "dashboard"
    ANALYZER = "analyzer"
    HISTORY = "history"
    RULES = "rules"
    LOGS = "logs"


class LogLevel(str, Enum):
    """Severity of a bot log entry."""
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _enum_value(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise DataValidationError(
            f"Invalid {field_name}: {value!r} (expected one of: {allowed})",
            context={"field": field_name},
        )


def _require(data: Mapping[str, Any], key: str, record_kind: str) -> Any:
    if key not in data:
        raise DataValidationError(
            f"{record_kind} is missing required field '{key}'",
            context={"field": key},
        )
    return data[key]


def _number(value: Any, field_name: str, cast):
    if isinstance(value, bool):
        raise DataValidationError(
            f"Invalid {field_name}: {value!r} (expected a number)",
            context={"field": field_name},
        )
    try:
        return cast(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise DataValidationError(
            f"Invalid {field_name}: {value!r} (expected a number)",
            context={"field": field_name},
            cause=e,
        ) from e


def _string_list(value: Any, field_name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise DataValidationError(
            f"Invalid {field_name}: expected a list of strings",
            context={"field": field_name},
        )
    return tuple(value)


# =============================================================================
# CHANGE HISTORY
# =============================================================================

@dataclass(frozen=True)
class ChangeRecord:
    """An immutable entry in the bot's change history."""
    id: str
    timestamp: int  # epoch milliseconds
    type: ChangeType
    files: Tuple[str, ...]
    description: str
    reason: str
    author: ChangeAuthor
    impact_score: float
    status: ChangeStatus

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChangeRecord":
        """Build a record from its camelCase mapping."""
        return cls(
            id=str(_require(data, "id", "ChangeRecord")),
            timestamp=_number(_require(data, "timestamp", "ChangeRecord"), "timestamp", int),
            type=_enum_value(ChangeType, _require(data, "type", "ChangeRecord"), "type"),
            files=_string_list(data.get("files"), "files"),
            description=str(data.get("description", "")),
            reason=str(data.get("reason", "")),
            author=_enum_value(ChangeAuthor, _require(data, "author", "ChangeRecord"), "author"),
            impact_score=_number(_require(data, "impactScore", "ChangeRecord"), "impactScore", float),
            status=_enum_value(ChangeStatus, _require(data, "status", "ChangeRecord"), "status"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "type": self.type.value,
            "files": list(self.files),
            "description": self.description,
            "reason": self.reason,
            "author": self.author.value,
            "impactScore": self.impact_score,
            "status": self.status.value,
        }


# =============================================================================
# LOGS
# =============================================================================

@dataclass(frozen=True)
class LogEntry:
    """A log line emitted by the trading bot."""
    timestamp: str  # ISO-8601
    level: LogLevel
    message: str
    context: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LogEntry":
        context = data.get("context")
        return cls(
            timestamp=str(_require(data, "timestamp", "LogEntry")),
            level=_enum_value(LogLevel, _require(data, "level", "LogEntry"), "level"),
            message=str(_require(data, "message", "LogEntry")),
            context=dict(context) if context is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "message": self.message,
        }
        if self.context is not None:
            d["context"] = dict(self.context)
        return d


# =============================================================================
# ANALYSIS RESULT
# =============================================================================

@dataclass(frozen=True)
class RuleComplianceCheck:
    """Verdict for a single governance rule."""
    rule: str
    compliant: bool
    details: str

    @classmethod
    def from_dict(cls, data: Any) -> "RuleComplianceCheck":
        if not isinstance(data, Mapping):
            raise DataValidationError("ruleComplianceCheck entries must be objects")
        rule = _require(data, "rule", "RuleComplianceCheck")
        compliant = _require(data, "compliant", "RuleComplianceCheck")
        details = _require(data, "details", "RuleComplianceCheck")
        if not isinstance(rule, str) or not isinstance(details, str):
            raise DataValidationError("'rule' and 'details' must be strings")
        if not isinstance(compliant, bool):
            raise DataValidationError("'compliant' must be a boolean")
        return cls(rule=rule, compliant=compliant, details=details)

    def to_dict(self) -> Dict[str, Any]:
        return {"rule": self.rule, "compliant": self.compliant, "details": self.details}


@dataclass(frozen=True)
class AnalysisResult:
    """Structured compliance analysis returned by the model."""
    overall_assessment: str
    rule_compliance_check: List[RuleComplianceCheck] = field(default_factory=list)
    detailed_analysis: str = ""
    suggested_correction: Optional[str] = None
    cost_optimization: Optional[str] = None

    @property
    def violations(self) -> List[RuleComplianceCheck]:
        """Checks that came back non-compliant."""
        return [c for c in self.rule_compliance_check if not c.compliant]

    @property
    def is_compliant(self) -> bool:
        return not self.violations

    @classmethod
    def from_dict(cls, data: Any) -> "AnalysisResult":
        """
        Build a result from the model's JSON payload.

        Requires overallAssessment, ruleComplianceCheck and detailedAnalysis.
        suggestedCorrection and costOptimization may be absent or null.

        Raises:
            DataValidationError: payload does not have the expected shape
        """
        if not isinstance(data, Mapping):
            raise DataValidationError(
                f"Analysis payload must be an object, got {type(data).__name__}"
            )

        overall = _require(data, "overallAssessment", "AnalysisResult")
        checks = _require(data, "ruleComplianceCheck", "AnalysisResult")
        detailed = _require(data, "detailedAnalysis", "AnalysisResult")

        if not isinstance(overall, str) or not isinstance(detailed, str):
            raise DataValidationError("'overallAssessment' and 'detailedAnalysis' must be strings")
        if not isinstance(checks, list):
            raise DataValidationError("'ruleComplianceCheck' must be an array")

        optional: Dict[str, Optional[str]] = {}
        for key in ("suggestedCorrection", "costOptimization"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise DataValidationError(f"'{key}' must be a string when present")
            optional[key] = value

        return cls(
            overall_assessment=overall,
            rule_compliance_check=[RuleComplianceCheck.from_dict(c) for c in checks],
            detailed_analysis=detailed,
            suggested_correction=optional["suggestedCorrection"],
            cost_optimization=optional["costOptimization"],
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "overallAssessment": self.overall_assessment,
            "ruleComplianceCheck": [c.to_dict() for c in self.rule_compliance_check],
            "detailedAnalysis": self.detailed_analysis,
        }
        if self.suggested_correction is not None:
            d["suggestedCorrection"] = self.suggested_correction
        if self.cost_optimization is not None:
            d["costOptimization"] = self.cost_optimization
        return d
