"""
Logging setup for directory loads.

Console output goes through Rich; the optional file log is JSONL (one
object per event) or plain text. Load events carry `event`, `url` and
`sequence` extras, which both file formats put first so a load can be
followed across its start/joined/complete/discarded lines.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig

LOGGER_NAME = "link_directory"

# Extras that identify a load, in output order
LOAD_FIELDS = ("event", "url", "sequence")


def setup_logging(cfg: LoggingConfig, log_dir: Path | None) -> logging.Logger:
    """Configure the package logger from `cfg`.

    The file handler is only attached when `cfg.file` is set and a
    directory is given.
    """
    level = _level_from_string(cfg.level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers = []
    logger.propagate = False

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if cfg.file and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / cfg.filename, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(_build_file_formatter(cfg.format))
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.info(message, extra=fields)


class JsonlFormatter(logging.Formatter):
    """One JSON object per record: level, logger, message, load fields, other extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_load_fields(record))
        payload.update(_extract_extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class EventFormatter(logging.Formatter):
    """Plain-text lines with the load fields appended as `[key=value ...]`."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _load_fields(record)
        if not fields:
            return line
        tail = " ".join(f"{key}={value}" for key, value in fields.items())
        # Keep a traceback, if any, below the event line
        head, sep, rest = line.partition("\n")
        return f"{head} [{tail}]{sep}{rest}"


_RESERVED = set(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    *LOAD_FIELDS,
}


def _load_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {key: getattr(record, key) for key in LOAD_FIELDS if hasattr(record, key)}


def _extract_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED}


def _build_file_formatter(fmt: str) -> logging.Formatter:
    if fmt == "jsonl":
        return JsonlFormatter()
    return EventFormatter()


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
