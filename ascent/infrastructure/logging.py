"""
Centralized Logging

Architectural Intent:
- Configures the "ascent" logger once, from the log_level config value
- Library modules only call logging.getLogger(__name__)
- Node-group context passed through `extra` (node_group, provider_id) is kept
  as structured fields in JSON output
"""

import json
import logging
import sys
from datetime import datetime, UTC

# LogRecord attributes promoted to top-level JSON fields when present
CONTEXT_FIELDS = ("node_group", "provider_id")


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(
    level: int | str = logging.WARNING,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ascent logger and return it.

    Args:
        level: Logging level, as an int or a name such as "DEBUG".
        json_format: If True, use JSON structured output. Otherwise human-readable.
    """
    resolved = _resolve_level(level)

    root = logging.getLogger("ascent")
    root.setLevel(resolved)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root.addHandler(handler)
    return root
