"""Verify the JSON logging configuration emits one object per line with only the fields set."""

import io
import json
import logging

from prioritizer.config import CustomJsonFormatter, setup_json_logging


def capture(logger_name: str = "prioritizer.test"):
    setup_json_logging(logging.DEBUG)
    root = logging.getLogger("prioritizer")
    stream = io.StringIO()
    root.handlers[0].setStream(stream)
    return logging.getLogger(logger_name), stream


def lines(stream: io.StringIO):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_basic_logging():
    """Basic log message without extra fields."""
    logger, stream = capture()
    logger.info("intake.session_started")

    (record,) = lines(stream)
    assert record["message"] == "intake.session_started"
    assert record["levelname"] == "INFO"
    assert record["name"] == "prioritizer.test"
    assert "session_id" not in record
    assert "total_score" not in record


def test_logging_with_extra():
    """Context fields used by intake and scoring."""
    logger, stream = capture()
    logger.info(
        "scoring.computed",
        extra={"initiative_id": "abc", "total_score": 250, "trigger": "workflow.move"},
    )
    logger.warning(
        "intake.extraction_rejected",
        extra={"session_id": "s-1", "reason": "title,vertical"},
    )

    computed, rejected = lines(stream)
    assert computed["total_score"] == 250
    assert computed["trigger"] == "workflow.move"
    assert rejected["levelname"] == "WARNING"
    assert rejected["reason"] == "title,vertical"
    assert "initiative_id" not in rejected


def test_none_values_are_dropped():
    formatter = CustomJsonFormatter("%(message)s %(session_id)s %(phase)s")
    record = logging.LogRecord("prioritizer.x", logging.INFO, __file__, 1, "intake.turn", None, None)
    record.session_id = None
    record.phase = "collecting"

    payload = json.loads(formatter.format(record))
    assert payload == {"message": "intake.turn", "phase": "collecting"}


def test_setup_is_idempotent():
    setup_json_logging()
    setup_json_logging()
    root = logging.getLogger("prioritizer")
    assert len(root.handlers) == 1
    assert root.propagate is False
