"""Unit tests for logging setup and context injection."""

import json
import logging

import pytest

from event_catalog.monitoring.logging import (
    ROOT_LOGGER_NAME,
    ContextAdapter,
    JsonFormatter,
    LoggingOptions,
    TextFormatter,
    setup_logging,
    with_context,
)


@pytest.fixture
def record():
    rec = logging.LogRecord(
        name="event_catalog.ingestion",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Fetched %d rows",
        args=(3,),
        exc_info=None,
    )
    rec.run_id = "abc123"
    rec.stage = "fetching"
    return rec


@pytest.fixture
def restore_root_logger():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    for h in list(logger.handlers):
        logger.removeHandler(h)
    for h in handlers:
        logger.addHandler(h)
    logger.setLevel(level)
    logger.propagate = propagate


class TestFormatters:
    """Tests for JsonFormatter and TextFormatter."""

    def test_json(self, record):
        data = json.loads(JsonFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["message"] == "Fetched 3 rows"
        assert data["time"].endswith("+00:00")
        assert data["run_id"] == "abc123"
        assert data["stage"] == "fetching"
        assert "source_id" not in data

    def test_json_payload(self, record):
        record.payload = {"rows": 3}
        assert json.loads(JsonFormatter().format(record))["payload"] == {"rows": 3}

    def test_text(self, record):
        line = TextFormatter().format(record)
        assert line == "INFO event_catalog.ingestion [run=abc123 stage=fetching] Fetched 3 rows"


class TestWithContext:
    """Tests for with_context."""

    def test_adds_fields(self):
        adapter = with_context(logging.getLogger("x"), run_id="r1", source_id="events")
        assert isinstance(adapter, ContextAdapter)
        assert adapter.extra == {"run_id": "r1", "source_id": "events"}

    def test_nested_contexts_merge(self):
        outer = with_context(logging.getLogger("x"), run_id="r1")
        inner = with_context(outer, stage="merging")
        assert inner.extra == {"run_id": "r1", "stage": "merging"}
        assert inner.logger is logging.getLogger("x")

    def test_call_extra_wins(self):
        adapter = with_context(logging.getLogger("x"), stage="a")
        _, kwargs = adapter.process("msg", {"extra": {"stage": "b"}})
        assert kwargs["extra"] == {"stage": "b"}


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_idempotent(self, restore_root_logger):
        setup_logging(LoggingOptions(level="debug"))
        logger = setup_logging(LoggingOptions(level="warning", json_logs=True))
        ours = [h for h in logger.handlers if getattr(h, "_event_catalog_handler", False)]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, JsonFormatter)
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    def test_log_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "catalog.log"
        logger = setup_logging(LoggingOptions(enable_console=False, log_file=log_file))
        logging.getLogger(f"{ROOT_LOGGER_NAME}.test").info("hello")
        for h in logger.handlers:
            h.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")
