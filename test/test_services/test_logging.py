# tests/test_services/test_logging.py
import json
import logging

from symptom_chat.logging import JsonFormatter


def _record(**extra):
    record = logging.LogRecord("symptom_chat.test", logging.WARNING, __file__, 1, "could not persist %s", ("k",), None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_json_line_carries_session_when_present():
    line = JsonFormatter().format(_record(session="symptom_chat_v1:s1"))
    payload = json.loads(line)

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "symptom_chat.test"
    assert payload["msg"] == "could not persist k"
    assert payload["session"] == "symptom_chat_v1:s1"


def test_json_line_without_session():
    payload = json.loads(JsonFormatter().format(_record()))

    assert "session" not in payload
    assert "exc_info" not in payload
