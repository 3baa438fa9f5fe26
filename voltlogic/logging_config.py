"""
Console logging for the analyzer.

``setup_logging()`` replaces the root logger's handlers with a single stream
handler, either human-readable or one JSON object per line with
``timestamp``, ``level``, ``logger`` and ``message``.
"""

import json
import logging
from datetime import datetime, timezone

TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Logging formatter that outputs a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        return json.dumps(log_entry, default=str)


def setup_logging(level: int = logging.WARNING, json_output: bool = False) -> None:
    """Configure the root logger.

    Args:
        level: Logging level for the root logger.
        json_output: Emit JSON lines instead of plain text.
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicate output.
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
