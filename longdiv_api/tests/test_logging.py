"""
Tests for the structured logging helpers.
"""

import json
import logging

from ..core.logging import LoggerAdapter, StructuredFormatter, TextFormatter


def make_record(**extra):
    record = logging.LogRecord(
        name="longdiv_api.services.grading_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Answer submitted",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_includes_extra_data(self):
        record = make_record(extra_data={"session_id": "abc", "correct": False})
        data = json.loads(StructuredFormatter().format(record))
        assert data["message"] == "Answer submitted"
        assert data["level"] == "INFO"
        assert data["session_id"] == "abc"
        assert data["correct"] is False

    def test_text_appends_fields(self):
        record = make_record(extra_data={"session_id": "abc"})
        text = TextFormatter().format(record)
        assert "Answer submitted" in text
        assert text.endswith("[session_id=abc]")

    def test_text_without_extra_data(self):
        assert "[" not in TextFormatter().format(make_record())


class TestLoggerAdapter:
    def test_merges_context_and_call_fields(self):
        """Permanent context and per-call extra_data end up on the record."""
        adapter = LoggerAdapter(logging.getLogger("test"), {"session_id": "abc"})
        msg, kwargs = adapter.process("Session reset", {"extra_data": {"step_index": 3}})
        assert msg == "Session reset"
        assert kwargs["extra"]["extra_data"] == {"session_id": "abc", "step_index": 3}
