import json
import logging
import sys

from wizeprompt.core.logging.formatters import ColorFormatter, JsonFormatter


def make_record():
    return logging.LogRecord("wizeprompt", logging.INFO, __file__, 10, "hello %s", ("tester",), None)


def test_json_formatter_basic_fields():
    rec = make_record()
    rec.conversation_id = 12
    rec.request_id = "req-1"

    data = json.loads(JsonFormatter(env="testing", service="svc").format(rec))

    assert data["message"] == "hello tester"
    assert data["level"] == "INFO"
    assert data["service"] == "svc"
    assert data["env"] == "testing"
    assert "timestamp" in data
    assert data["request_id"] == "req-1"
    assert data["conversation_id"] == 12
    assert "version" in data


def test_json_formatter_non_serializable_extra():
    rec = make_record()

    class X:
        def __repr__(self):
            return "<X>"

    rec.obj = X()

    data = json.loads(JsonFormatter(env="dev", service="svc").format(rec))

    assert data["obj"] == "<X>"


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad temperature")
    except ValueError:
        rec = logging.LogRecord("wizeprompt", logging.ERROR, __file__, 10, "failed", (), sys.exc_info())

    data = json.loads(JsonFormatter().format(rec))

    assert "ValueError: bad temperature" in data["exc_info"]


def test_color_formatter_line_layout():
    rec = make_record()
    rec.request_id = "rid-9"

    line = ColorFormatter().format(rec)

    assert "hello tester" in line
    assert "rid-9" in line
    assert ColorFormatter.COLOR_CODES["INFO"] in line
