"""Logging setup for the CLI and the HTTP server.

``text`` renders through Rich for terminals; ``json`` emits one JSON object
per line for log collectors. Modules log through
``logging.getLogger(__name__)`` and never configure handlers themselves.
"""

import json
import logging
from datetime import UTC, datetime

from rich.console import Console
from rich.logging import RichHandler


# Extra attributes surfaced in JSON output when a record carries them.
EXTRA_FIELDS = ("user_id", "task_id", "error_code", "operation", "path")


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            value = record.__dict__.get(key)
            if value is not None:
                log[key] = str(value)
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure root logging; safe to call more than once."""
    if fmt == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True), show_path=False, rich_tracebacks=True
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )
