"""Logging setup: terse stderr output, optional JSON Lines file."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from oar.utils.errors import FileAccessError


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with ``extra={"fields": {...}}`` merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    verbose: bool = False,
) -> logging.Logger:
    """
    Attach handlers to the ``oar`` logger, replacing any from a previous call.

    Probe lines reach stderr only with ``verbose``; the file, when given,
    records everything as JSON Lines.

    Raises:
        FileAccessError: If the log file cannot be opened
    """
    logger = logging.getLogger("oar")
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            raise FileAccessError(f"Error opening log file '{log_file}'") from e
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    return logger
