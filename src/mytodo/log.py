"""Logging setup.

Two surfaces:
- a JSONL file in settings.LOG_DIR (machine-readable, always at DEBUG)
- rich-colored stderr output at settings.LOG_LEVEL (human-readable)
"""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from typing_extensions import override

ROOT_LOGGER = "mytodo"


class JSONFormatter(logging.Formatter):
    """Format log records as a single-line JSON object."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, ensure_ascii=False)


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for h in list(logger.handlers):
        try:
            h.close()
        finally:
            logger.removeHandler(h)

    console_handler = RichHandler(
        console=Console(stderr=True),
        level=getattr(logging, level.upper(), logging.WARNING),
        show_path=False,
    )
    logger.addHandler(console_handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cannot open log file {log_file}: {e}")
        else:
            file_handler.setFormatter(JSONFormatter())
            file_handler.setLevel(logging.DEBUG)
            logger.addHandler(file_handler)

    return logger
