from __future__ import annotations

import json

import httpx
import pytest
from pydantic import ValidationError

from dcode_providers.base.errors import (
    ClassifiedError,
    ErrorKind,
    classify_exception,
    classify_status,
    is_context_overflow,
)
from dcode_providers.base.models import Tool


def test_429_is_retryable_rate_limit():
    err = classify_status(429, '{"error":{"message":"slow down"}}', headers={"Retry-After": "7"})
    assert err.kind is ErrorKind.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests
    assert err.retryable is True  # nosec B101
    assert err.retry_after == 7.0  # nosec B101
    assert err.raw_status == 429  # nosec B101
    assert "slow down" in err.message  # nosec B101


def test_401_is_terminal_auth():
    err = classify_status(401, "invalid api key", provider="groq", model="m")
    assert err.kind is ErrorKind.AUTH  # nosec B101
    assert err.retryable is False  # nosec B101
    assert err.provider == "groq" and err.model == "m"  # nosec B101
    assert err.body == "invalid api key"  # nosec B101


@pytest.mark.parametrize(
    "status,kind,retryable",
    [
        (403, ErrorKind.AUTH, False),
        (408, ErrorKind.NETWORK, True),
        (500, ErrorKind.SERVER, True),
        (503, ErrorKind.SERVER, True),
        (400, ErrorKind.INVALID_REQUEST, False),
        (404, ErrorKind.INVALID_REQUEST, False),
        (413, ErrorKind.INVALID_REQUEST, False),
        (422, ErrorKind.INVALID_REQUEST, False),
        (302, ErrorKind.UNKNOWN, False),
    ],
)
def test_status_table(status, kind, retryable):
    err = classify_status(status, "")
    assert err.kind is kind  # nosec B101
    assert err.retryable is retryable  # nosec B101


def test_quota_wording_is_rate_limit_even_without_429():
    err = classify_status(400, '{"error":{"message":"You exceeded your current quota"}}')
    assert err.kind is ErrorKind.RATE_LIMIT  # nosec B101
    assert err.retryable  # nosec B101


def test_overloaded_body_on_non_5xx_is_server():
    err = classify_status(409, "model is overloaded, try later")
    assert err.kind is ErrorKind.SERVER and err.retryable  # nosec B101


def test_context_overflow_wins_over_plain_invalid_request():
    body = json.dumps({"error": {"message": "This model's maximum context length is 8192 tokens"}})
    err = classify_status(400, body)
    assert err.kind is ErrorKind.INVALID_REQUEST  # nosec B101
    assert err.context_overflow is True  # nosec B101
    assert err.retryable is False  # nosec B101


def test_context_overflow_not_flagged_on_5xx():
    err = classify_status(504, "context deadline exceeded")
    assert err.kind is ErrorKind.SERVER  # nosec B101
    assert err.context_overflow is False  # nosec B101


def test_is_context_overflow_patterns():
    assert is_context_overflow("prompt is too long: 210000 tokens > 200000 maximum")  # nosec B101
    assert is_context_overflow("context_length_exceeded")  # nosec B101
    assert not is_context_overflow("rate limit exceeded")  # nosec B101
    assert not is_context_overflow("")  # nosec B101


def test_retry_after_http_date_is_non_negative():
    err = classify_status(429, "", headers={"retry-after": "Wed, 21 Oct 2015 07:28:00 GMT"})
    assert err.retry_after == 0.0  # nosec B101


def test_classified_error_passthrough():
    original = ClassifiedError(kind=ErrorKind.AUTH, message="nope")
    assert classify_exception(original) is original  # nosec B101


def test_http_status_error_uses_response():
    request = httpx.Request("POST", "https://api.example.com/v1/chat/completions")
    response = httpx.Response(503, text="upstream unavailable", request=request)
    exc = httpx.HTTPStatusError("boom", request=request, response=response)
    err = classify_exception(exc, provider="openai")
    assert err.kind is ErrorKind.SERVER and err.raw_status == 503  # nosec B101
    assert err.raw is exc  # nosec B101


def test_transport_and_timeout_errors_are_network():
    request = httpx.Request("GET", "https://api.example.com")
    for exc in (
        httpx.ReadTimeout("slow", request=request),
        TimeoutError("slow"),
        httpx.ConnectError("refused", request=request),
    ):
        err = classify_exception(exc)
        assert err.kind is ErrorKind.NETWORK and err.retryable  # nosec B101


def test_decode_failures_are_malformed():
    with pytest.raises(json.JSONDecodeError) as json_info:
        json.loads("{not json")
    with pytest.raises(ValidationError) as val_info:
        Tool(name="")
    for exc in (json_info.value, val_info.value):
        assert classify_exception(exc).kind is ErrorKind.MALFORMED_RESPONSE  # nosec B101


def test_anything_else_is_unknown():
    err = classify_exception(RuntimeError("weird"))
    assert err.kind is ErrorKind.UNKNOWN and not err.retryable  # nosec B101
    assert "weird" in str(err)  # nosec B101
