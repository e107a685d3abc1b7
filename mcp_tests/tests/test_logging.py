import json
import logging
import sys
from datetime import date
from logging.handlers import TimedRotatingFileHandler

from core.log import (
    TOOL_INPUT_MESSAGE,
    _JsonFormatter,
    build_file_handler,
    get_logger,
    log_tool_input,
    setup_logging,
)
from sources.log_source import LogSource

MARKER = f"INFO - {TOOL_INPUT_MESSAGE}"


def _drop_new_handlers(root, before, level):
    for h in root.handlers[:]:
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_json_formatter_emits_fields():
    record = logging.LogRecord("core.cache", logging.INFO, __file__, 1, "evicted %s", ("k",), None)
    payload = json.loads(_JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "core.cache"
    assert payload["msg"] == "evicted k"


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    payload = json.loads(_JsonFormatter().format(record))
    assert "ValueError: bad" in payload["exc_info"]


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
    finally:
        _drop_new_handlers(root, before, level)

    assert get_logger("core.jobs").name == "core.jobs"


def test_setup_logging_writes_application_log(tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    log_file = tmp_path / "logs" / "application.log"
    try:
        setup_logging(logging.INFO, log_file=log_file)
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 2
        assert any(isinstance(h, TimedRotatingFileHandler) for h in added)

        get_logger("core.cache").info("cache query: cleared (0 entries)")
        for h in added:
            h.flush()
    finally:
        _drop_new_handlers(root, before, level)

    text = log_file.read_text(encoding="utf-8")
    assert text.startswith(date.today().isoformat())
    assert "INFO - cache query: cleared (0 entries)" in text


def test_rotated_log_is_read_back_without_tool_inputs(tmp_path):
    log_file = tmp_path / "application.log"
    handler = build_file_handler(log_file)
    logger = logging.getLogger("test.rotation")
    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    try:
        logger.info("recipe created")
        log_tool_input(logger, "read_logs", date="2024-01-05")
        handler.doRollover()
    finally:
        logger.removeHandler(handler)
        handler.close()

    today = date.today().isoformat()
    assert (tmp_path / f"application.log.{today}.0.gz").is_file()

    # Pretend today is long gone so only the archive is consulted
    src = LogSource(log_file=log_file, excluded_marker=MARKER, today=lambda: date(2000, 1, 1))
    lines = src.lines_for(today)
    assert len(lines) == 1
    assert lines[0].endswith("INFO - recipe created")


def test_log_tool_input_uses_excluded_category(caplog):
    with caplog.at_level(logging.INFO):
        log_tool_input(get_logger("tools.read_logs"), "read_logs", date="2024-01-05")

    assert caplog.records[-1].getMessage().startswith(TOOL_INPUT_MESSAGE + " read_logs")
    assert "2024-01-05" in caplog.records[-1].getMessage()
