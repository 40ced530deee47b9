"""JSON log output: the keys a log aggregator filters rejections on."""

from __future__ import annotations

import json
import logging
import sys

from passgate.core.logging import _ContainerFormatter, _JsonFormatter


def _record(msg: str = "test message", exc_info: object = None) -> logging.LogRecord:
    return logging.LogRecord(
        name="passgate.services.token_lifecycle",
        level=logging.WARNING,
        pathname="token_lifecycle.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,  # type: ignore[arg-type]
    )


def test_json_formatter_produces_valid_json() -> None:
    parsed = json.loads(_JsonFormatter().format(_record()))
    assert parsed["level"] == "WARNING"
    assert parsed["logger"] == "passgate.services.token_lifecycle"
    assert parsed["message"] == "test message"
    assert "timestamp" in parsed


def test_json_formatter_lifts_request_and_step_fields() -> None:
    record = _record("verify_access rejected")
    record.request_id = "abc-123"  # type: ignore[attr-defined]
    record.path = "/auth/me"  # type: ignore[attr-defined]
    record.operation = "verify_access"  # type: ignore[attr-defined]
    record.code = 401  # type: ignore[attr-defined]

    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["request_id"] == "abc-123"
    assert parsed["path"] == "/auth/me"
    assert parsed["operation"] == "verify_access"
    assert parsed["code"] == 401
    assert "method" not in parsed


def test_json_formatter_includes_exception_info() -> None:
    try:
        raise ValueError("test error")
    except ValueError:
        record = _record("Something failed", exc_info=sys.exc_info())
        output = _JsonFormatter().format(record)

    parsed = json.loads(output)
    assert "ValueError: test error" in parsed["exception"]


def test_container_formatter_is_plain_text() -> None:
    output = _ContainerFormatter().format(_record("server started"))
    assert "WARNING" in output
    assert "server started" in output
    assert not output.startswith("{")
