"""Structured JSON logging for OraLicense-Engine."""

import json
import logging
import sys
from datetime import datetime, timezone

# Reconciliation context passed through ``extra=`` and lifted into the entry.
CONTEXT_FIELDS = ("hostname", "dbname", "check", "alert_code")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the host and check being reconciled."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Attach the JSON handler to the package logger once; later calls only change the level."""
    logger = logging.getLogger("oralicense_engine")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if any(isinstance(h.formatter, JSONFormatter) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.propagate = False
