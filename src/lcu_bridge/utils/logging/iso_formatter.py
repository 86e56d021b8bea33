"""Log formatters for console and JSONL output.

The file log is JSONL with an ISO 8601 UTC timestamp as first field;
the console shows only the human-readable part of structured messages.
"""

from __future__ import annotations

__all__ = ["ConsoleFormatter", "ISO8601Formatter"]

import json
import logging
from datetime import datetime, timezone


class ISO8601Formatter(logging.Formatter):
    """Formatter emitting one JSON object per record.

    Format: {"time": "YYYY-MM-DDTHH:MM:SS.sssZ", "level": ..., **fields}
    Example: {"time": "2025-12-04T10:48:37.123Z", "level": "WARNING", "event": "lcu_connection_lost", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSONL with ISO 8601 timestamp.

        Args:
            record: The log record to format.

        Returns:
            str: JSON-formatted log entry with timestamp.
        """
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        if isinstance(record.msg, dict):
            log_data = record.msg
        else:
            log_data = {"message": record.getMessage()}

        log_entry = {"time": timestamp, "level": record.levelname, **log_data}
        # default=str keeps unexpected payload types (paths, enums) from breaking the log
        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Extracts 'message' or 'event' field from dict messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output."""
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            return f"{record.levelname}: {msg}"
        return f"{record.levelname}: {record.getMessage()}"
