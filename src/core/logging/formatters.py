"""Log formatters for JSON and console output."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from core.logging.context import get_log_context


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        # Catalog
        "version",
        "asset_key",
        "data_dir",
        # Transfer
        "download_url",
        "destination",
        "http_status",
        "content_length",
        "bytes_written",
        "duration_ms",
        "timeout_seconds",
        # Errors
        "error_category",
        "error_message",
        # Batch tracking
        "batch_size",
        "records_fetched",
        "records_skipped",
        "records_failed",
    ]

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3]
            + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # Inject context variables
        ctx = get_log_context()
        if ctx["domain"]:
            log_entry["domain"] = ctx["domain"]
        if ctx["stage"]:
            log_entry["stage"] = ctx["stage"]
        if ctx["worker_id"]:
            log_entry["worker_id"] = ctx["worker_id"]

        # Add source location for DEBUG/ERROR
        if record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        # Include exception info
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter.

    Includes context when available.
    """

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_log_context()

        parts = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            record.levelname,
        ]

        if ctx["domain"]:
            parts.append(f"[{ctx['domain']}]")
        if ctx["stage"]:
            parts.append(f"[{ctx['stage']}]")

        prefix = " - ".join(parts)

        # Add version if present
        version = getattr(record, "version", None)
        if version:
            return f"{prefix} - [{version}] {record.getMessage()}"

        return f"{prefix} - {record.getMessage()}"
