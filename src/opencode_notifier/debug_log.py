"""
Debug event log.

Enabled with OPENCODE_NOTIFIER_DEBUG=true. Records from the `opencode_notifier`
logger tree are appended as JSON lines to .opencode_notifier_logs.jsonl in the
working directory. Structured fields travel in the record's `fields` extra.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

DEBUG_ENV = "OPENCODE_NOTIFIER_DEBUG"
LOG_FILE_NAME = ".opencode_notifier_logs.jsonl"

logger = logging.getLogger("opencode_notifier.events")


def is_debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV) == "true"


class JsonLinesFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            entry.update(fields)
        else:
            entry["message"] = record.getMessage()
        return json.dumps(entry, default=str)


def configure_debug_logging(path: Optional[Path] = None, force: bool = False) -> Optional[logging.Handler]:
    """Attach the JSONL file handler. No-op unless debug is enabled or forced."""
    if not (force or is_debug_enabled()):
        return None
    root = logging.getLogger("opencode_notifier")
    log_path = path or Path.cwd() / LOG_FILE_NAME
    for existing in root.handlers:
        if isinstance(existing, logging.FileHandler) and existing.baseFilename == os.path.abspath(log_path):
            return existing
    handler = logging.FileHandler(log_path, encoding="utf-8", delay=True)
    handler.setFormatter(JsonLinesFormatter())
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    return handler


def log_event(action: str, **fields: Any) -> None:
    """Emit one structured debug record."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(action, extra={"fields": {"action": action, **fields}})
