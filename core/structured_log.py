from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger("governance.events")

LOG_FILE = Path(os.getenv("GOVERNANCE_EVENTS_FILE", "logs/events.jsonl"))

# Log rotation settings (configurable via environment or configure_event_log)
MAX_LOG_BYTES = int(os.getenv("GOVERNANCE_LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB default
LOG_BACKUP_COUNT = int(os.getenv("GOVERNANCE_LOG_BACKUP_COUNT", 5))

_file_handler: Optional[RotatingFileHandler] = None


def configure_event_log(
    path: str | Path,
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = LOG_BACKUP_COUNT,
) -> None:
    """Point the event log at a new file. Closes any open handler."""
    global LOG_FILE, MAX_LOG_BYTES, LOG_BACKUP_COUNT, _file_handler
    if _file_handler is not None:
        _file_handler.close()
        _file_handler = None
    LOG_FILE = Path(path)
    MAX_LOG_BYTES = int(max_bytes)
    LOG_BACKUP_COUNT = int(backup_count)


def _get_file_handler() -> RotatingFileHandler:
    """Get or create the rotating file handler."""
    global _file_handler
    if _file_handler is None:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        _file_handler = RotatingFileHandler(
            str(LOG_FILE),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    return _file_handler


def jlog(event: str, level: str = "INFO", **fields: Any) -> None:
    """
    Write a structured JSON log entry with automatic rotation.

    Args:
        event: Event name/type
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **fields: Additional fields to include in the log entry
    """
    rec: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "event": event,
        **fields,
    }
    line = json.dumps(rec, default=str)

    handler = _get_file_handler()
    record = logging.LogRecord(
        name="governance", level=logging.INFO, pathname="", lineno=0,
        msg=line, args=(), exc_info=None,
    )
    try:
        if handler.shouldRollover(record):
            handler.doRollover()
        handler.stream.write(line + "\n")
        handler.stream.flush()
    except (OSError, ValueError) as e:
        logger.warning(f"Event log write failed, falling back to direct append: {e}")
        with LOG_FILE.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    # Also echo a concise line to the standard logger
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO
    logger.log(log_level, f"[{level}] {event} | {fields}")


def get_log_stats() -> Dict[str, Any]:
    """Get statistics about current log files."""
    stats: Dict[str, Any] = {
        "main_log": str(LOG_FILE),
        "main_log_size_bytes": 0,
        "backup_files": [],
        "total_size_bytes": 0,
    }

    if LOG_FILE.exists():
        stats["main_log_size_bytes"] = LOG_FILE.stat().st_size
        stats["total_size_bytes"] = stats["main_log_size_bytes"]

    for i in range(1, LOG_BACKUP_COUNT + 1):
        backup = LOG_FILE.with_name(f"{LOG_FILE.name}.{i}")
        if backup.exists():
            size = backup.stat().st_size
            stats["backup_files"].append({"file": str(backup), "size_bytes": size})
            stats["total_size_bytes"] += size

    return stats


def read_recent_logs(count: int = 100, level: str | None = None) -> list[Dict[str, Any]]:
    """
    Read the most recent log entries.

    Args:
        count: Maximum number of entries to return
        level: Optional filter by log level

    Returns:
        List of log entries (most recent last)
    """
    entries: list[Dict[str, Any]] = []

    if not LOG_FILE.exists():
        return entries

    with LOG_FILE.open("r", encoding="utf-8") as f:
        lines = f.readlines()

    # Read from end for efficiency
    for line in reversed(lines):
        if len(entries) >= count:
            break
        try:
            entry = json.loads(line.strip())
        except json.JSONDecodeError:
            continue
        if level is None or entry.get("level") == level:
            entries.append(entry)

    return list(reversed(entries))
