"""Tests for logging setup and structured events."""

import json
import logging
from pathlib import Path

from link_directory.config import LoggingConfig
from link_directory.utils.logging import EventFormatter, JsonlFormatter, log_event, setup_logging


def test_setup_logging_writes_jsonl_events(tmp_path: Path):
    cfg = LoggingConfig(level="INFO", console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)

    log_event(logger, "Load complete", event="load_complete", rows=3, tag_mode="legacy")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()
    payload = json.loads(lines[-1])
    assert payload["message"] == "Load complete"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "link_directory"
    assert payload["event"] == "load_complete"
    assert payload["rows"] == 3
    assert payload["tag_mode"] == "legacy"


def test_setup_logging_without_file_handler(tmp_path: Path):
    cfg = LoggingConfig(console=False, file=True)
    logger = setup_logging(cfg, None)

    assert logger.handlers == []


def test_log_event_ignores_missing_logger():
    log_event(None, "nothing", event="noop")


def test_jsonl_formatter_skips_standard_attributes():
    record = logging.LogRecord("link_directory", logging.WARNING, __file__, 1, "hello %s", ("x",), None)
    record.url = "https://x.io"

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["message"] == "hello x"
    assert payload["url"] == "https://x.io"
    assert "lineno" not in payload
    assert "args" not in payload


def test_jsonl_formatter_puts_load_fields_first():
    record = logging.LogRecord("link_directory", logging.INFO, __file__, 1, "Load complete", (), None)
    record.rows = 3
    record.sequence = 2
    record.url = "https://x.io"
    record.event = "load_complete"

    payload = json.loads(JsonlFormatter().format(record))

    assert list(payload)[3:] == ["message", "event", "url", "sequence", "rows"]
    assert payload["sequence"] == 2


def test_event_formatter_appends_load_fields():
    record = logging.LogRecord(
        "link_directory", logging.INFO, __file__, 1, "Discarding stale load", (), None
    )
    record.event = "load_discarded"
    record.url = "https://x.io"
    record.sequence = 1
    record.latest = 2

    line = EventFormatter().format(record)

    assert line.endswith("INFO Discarding stale load [event=load_discarded url=https://x.io sequence=1]")


def test_event_formatter_leaves_plain_records_alone():
    record = logging.LogRecord("link_directory", logging.WARNING, __file__, 1, "Could not load", (), None)

    assert EventFormatter().format(record).endswith("WARNING Could not load")


def test_setup_logging_writes_plain_events(tmp_path: Path):
    cfg = LoggingConfig(level="INFO", console=False, file=True, format="plain", filename="run.log")
    logger = setup_logging(cfg, tmp_path)

    log_event(logger, "Load start", event="load_start", url="https://x.io", sequence=1)
    for handler in logger.handlers:
        handler.flush()

    line = (tmp_path / "run.log").read_text(encoding="utf-8").splitlines()[-1]
    assert line.endswith("Load start [event=load_start url=https://x.io sequence=1]")
