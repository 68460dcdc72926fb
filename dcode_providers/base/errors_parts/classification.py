"""
Error classification helpers mapping HTTP failures and exceptions to
:class:`ClassifiedError` values.

Every adapter funnels non-success responses and transport failures through
these functions. They inspect the HTTP status, the response body, and the
exception type; they never perform I/O, sleep, or retry.

Precedence for status classification:
    1. Context-window overflow patterns in a 4xx (non-429) body (invalid request).
    2. 401/403 (auth).
    3. 429 or rate/quota wording in the body (rate limit).
    4. 408 (network) and 5xx (server).
    5. Overload wording in the body (server).
    6. Remaining 4xx (invalid request).
    7. ``UNKNOWN`` fallback.
"""
from __future__ import annotations

import json
import re
from email.utils import parsedate_to_datetime
from datetime import datetime, timezone
from typing import Mapping, Optional, Tuple

import httpx
from pydantic import ValidationError

from .error_kind import ErrorKind
from .classified_error import ClassifiedError


_OVERFLOW_PATTERNS: Tuple[re.Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"prompt is too long",
        r"exceeds the model'?s maximum context",
        r"content exceeds model token limit",
        r"maximum context length",
        r"context_length_exceeded",
        r"max_tokens.*exceeds.*limit",
        r"exceeds the maximum number of tokens",
        r"GenerateContentRequest.*too large",
        r"Input is too long",
        r"Too many input tokens",
        r"Request too large",
        r"Please reduce the length",
        r"context size exceeded",
        r"(?i)context (?:window|length).*(?:too long|overflow|exceeded)",
        r"(?i)token count.*exceeds",
    )
)

_RATE_LIMIT_MARKERS = ("rate_limit", "rate limit", "too_many_requests", "quota")
_OVERLOAD_MARKERS = ("overloaded", "unavailable")


def is_context_overflow(text: str) -> bool:
    """Return True when ``text`` reads like a context-window overflow rejection."""
    if not text:
        return False
    return any(p.search(text) for p in _OVERFLOW_PATTERNS)


def _parse_retry_after(headers: Optional[Mapping[str, str]]) -> Optional[float]:
    """Parse a ``Retry-After`` header as seconds (delta or HTTP date)."""
    if not headers:
        return None
    value = None
    for key, val in headers.items():
        if key.lower() == "retry-after":
            value = val
            break
    if value is None:
        return None
    value = value.strip()
    try:
        seconds = float(value)
        return seconds if seconds >= 0 else None
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


def _error_message_from_body(body: str) -> Optional[str]:
    """Pull the vendor's ``error.message`` (or ``message``) out of a JSON body."""
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return None
    if isinstance(data, list) and data:
        data = data[0]
    if not isinstance(data, dict):
        return None
    err = data.get("error", data)
    if isinstance(err, dict) and isinstance(err.get("message"), str):
        return err["message"]
    if isinstance(err, str):
        return err
    return None


def classify_status(
    status: int,
    body: str = "",
    *,
    headers: Optional[Mapping[str, str]] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> ClassifiedError:
    """Classify a non-success HTTP response.

    Parameters:
        status: HTTP status code returned by the backend.
        body: Decoded response body (may be empty).
        headers: Response headers; only ``Retry-After`` is consulted.
        provider: Provider id for diagnostics.
        model: Model id for diagnostics.

    Returns:
        A :class:`ClassifiedError` carrying the kind, retry hint, original
        status, and original body.
    """
    body = body or ""
    detail = _error_message_from_body(body) or body.strip() or f"HTTP {status}"
    lowered = body.lower()

    def _make(kind: ErrorKind, retryable: bool, message: str, **extra) -> ClassifiedError:
        return ClassifiedError(
            kind=kind,
            message=message,
            retryable=retryable,
            raw_status=status,
            provider=provider,
            model=model,
            body=body or None,
            **extra,
        )

    if 400 <= status < 500 and status != 429 and is_context_overflow(body):
        return _make(
            ErrorKind.INVALID_REQUEST,
            False,
            f"context window exceeded: {detail}",
            context_overflow=True,
        )
    if status in (401, 403):
        return _make(ErrorKind.AUTH, False, f"authentication failed: {detail}")
    if status == 429 or any(m in lowered for m in _RATE_LIMIT_MARKERS):
        return _make(
            ErrorKind.RATE_LIMIT,
            True,
            f"rate limited: {detail}",
            retry_after=_parse_retry_after(headers),
        )
    if status == 408:
        return _make(ErrorKind.NETWORK, True, f"request timed out: {detail}")
    if 500 <= status < 600:
        return _make(ErrorKind.SERVER, True, f"server error: {detail}")
    if any(m in lowered for m in _OVERLOAD_MARKERS):
        return _make(ErrorKind.SERVER, True, f"provider overloaded: {detail}")
    if 400 <= status < 500:
        return _make(ErrorKind.INVALID_REQUEST, False, f"request rejected: {detail}")
    return _make(ErrorKind.UNKNOWN, False, detail)


def _response_text(response: httpx.Response) -> str:
    """Best-effort decoded body of a (possibly streamed) response."""
    try:
        return response.text
    except httpx.ResponseNotRead:
        return ""


def classify_exception(
    exc: BaseException,
    *,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> ClassifiedError:
    """Classify an exception raised while talking to a backend.

    Precedence:
        1. ClassifiedError passthrough.
        2. ``httpx.HTTPStatusError`` via :func:`classify_status`.
        3. Timeouts (``httpx.TimeoutException``, ``TimeoutError``).
        4. Other transport errors.
        5. Decode failures (JSON, pydantic validation).
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ClassifiedError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        resp = exc.response
        err = classify_status(
            resp.status_code,
            _response_text(resp),
            headers=resp.headers,
            provider=provider,
            model=model,
        )
        err.raw = exc
        return err
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ClassifiedError(
            kind=ErrorKind.NETWORK,
            message=f"timed out: {exc}",
            retryable=True,
            provider=provider,
            model=model,
            raw=exc,
        )
    if isinstance(exc, httpx.TransportError):
        return ClassifiedError(
            kind=ErrorKind.NETWORK,
            message=f"transport failure: {exc}",
            retryable=True,
            provider=provider,
            model=model,
            raw=exc,
        )
    if isinstance(exc, (json.JSONDecodeError, ValidationError)):
        return ClassifiedError(
            kind=ErrorKind.MALFORMED_RESPONSE,
            message=f"undecodable response: {exc}",
            retryable=False,
            provider=provider,
            model=model,
            raw=exc,
        )
    return ClassifiedError(
        kind=ErrorKind.UNKNOWN,
        message=str(exc) or type(exc).__name__,
        retryable=False,
        provider=provider,
        model=model,
        raw=exc,
    )


__all__ = [
    "classify_status",
    "classify_exception",
    "is_context_overflow",
    "_parse_retry_after",
]
