"""Focused tests for dcode_providers.base.logging.

Covers:
- _parse_level string parsing
- normalized_log_event emits required keys and picks the level
- JsonFormatter hoists structured messages
- call lifecycle events from ProviderCallLogMixin
"""
from __future__ import annotations

import json
import logging

import pytest

from dcode_providers.base.errors import ClassifiedError, ErrorKind
from dcode_providers.base.log_support import JsonFormatter, LogContext
from dcode_providers.base.log_support.call_events import ProviderCallLogMixin
from dcode_providers.base.logging import (
    LOG_LEVEL_ENV,
    REQUIRED_NORMALIZED_KEYS,
    _parse_level,  # type: ignore[attr-defined]
    get_logger,
    normalized_log_event,
)
from dcode_providers.base.models import Message, MessageRequest, Usage


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def payloads(self) -> list[dict]:
        return [json.loads(r.getMessage()) for r in self.records]


@pytest.fixture()
def captured(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")
    logger = get_logger("tests.logging")
    handler = _ListHandler()
    logger.addHandler(handler)
    yield logger, handler
    logger.removeHandler(handler)


def test_parse_level_variants():
    assert _parse_level(None) == logging.WARNING  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_child_logger_names_are_prefixed():
    assert get_logger("openai_compatible.groq").name == "dcode_providers.openai_compatible.groq"  # nosec B101
    assert get_logger("dcode_providers.gemini").name == "dcode_providers.gemini"  # nosec B101


def test_normalized_log_event_emits_required_keys(captured):
    logger, handler = captured
    ctx = LogContext(provider="p", model="m")
    normalized_log_event(
        logger,
        "stream.end",
        ctx,
        phase="finalize",
        error_code="rate_limit",
        emitted=3,
        tokens=Usage(input_tokens=10, output_tokens=5),
        latency_ms=12.3,
    )
    record = handler.records[-1]
    payload = json.loads(record.getMessage())
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload  # nosec B101
    assert record.levelno == logging.WARNING  # nosec B101
    assert payload["event"] == "stream.end" and payload["provider"] == "p"  # nosec B101
    assert payload["tokens"]["input_tokens"] == 10  # nosec B101


def test_error_code_omitted_without_error(captured):
    logger, handler = captured
    normalized_log_event(logger, "chat.start", LogContext(provider="p"), phase="start")
    payload = handler.payloads()[-1]
    assert "error_code" not in payload  # nosec B101
    assert handler.records[-1].levelno == logging.INFO  # nosec B101


def test_json_formatter_hoists_structured_message():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e" and out["n"] == 1 and out["level"] == "INFO"  # nosec B101

    plain = logging.LogRecord("x", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    assert json.loads(JsonFormatter().format(plain))["msg"] == "hello world"  # nosec B101


class _Adapter(ProviderCallLogMixin):
    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger


def test_call_lifecycle_events_never_include_message_text(captured):
    logger, handler = captured
    adapter = _Adapter(logger)
    request = MessageRequest(model="m", messages=[Message(role="user", content="secret prompt")])
    ctx = LogContext(provider="p", model="m")

    started = adapter._log_call_start("chat", ctx, request)
    adapter._log_call_end("chat", ctx, started, usage=Usage(output_tokens=2), stop_reason="end_turn")
    adapter._log_call_error("chat", ctx, ClassifiedError(kind=ErrorKind.AUTH, message="bad key", raw_status=401))

    events = handler.payloads()
    assert [e["event"] for e in events] == ["chat.start", "chat.end", "chat.error"]  # nosec B101
    assert events[0]["messages"] == 1  # nosec B101
    assert all(e["operation"] == "chat" for e in events)  # nosec B101
    assert "latency_ms" in events[1]  # nosec B101
    assert events[2]["error_code"] == "auth" and events[2]["status"] == 401  # nosec B101
    assert all("secret prompt" not in r.getMessage() for r in handler.records)  # nosec B101
