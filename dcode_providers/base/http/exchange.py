"""Scoped HTTP exchanges shared by the adapters.

Purpose:
    Every adapter call is one POST whose response is read either whole
    (blocking path) or line by line (streaming path). This module owns the
    parts that must behave identically across vendors:

    - The response is always acquired with ``client.stream(...)`` inside a
      ``with`` block, so the connection is released on every exit path
      (success, classified failure, callback abort, cancellation).
    - Non-2xx statuses are read and classified before any decoding happens.
    - A :class:`CancellationToken` closes the live response from another
      thread, and is polled between lines, so cancellation stops reading
      promptly instead of draining the body.
    - Any exception leaving an exchange is translated by
      :func:`as_provider_failure` into either ``CancelledError`` or a
      :class:`ClassifiedError`; nothing is retried here.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

import httpx

from ..cancellation import CancellationToken, CancelledError
from ..errors import classify_exception, classify_status


@contextmanager
def open_exchange(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    provider: str,
    model: Optional[str] = None,
    json: Any = None,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    cancel: Optional[CancellationToken] = None,
) -> Iterator[httpx.Response]:
    """Open a streamed request and yield the successful response.

    Raises:
        ClassifiedError: When the backend answers with a non-2xx status; the
            original status, headers and body are preserved on the error.
        CancelledError: When ``cancel`` was already cancelled.
    """
    if cancel is not None:
        cancel.raise_if_cancelled()
    with client.stream(method, url, json=json, headers=headers, params=params) as response:
        unregister = cancel.on_cancel(response.close) if cancel is not None else None
        try:
            if not response.is_success:
                response.read()
                raise classify_status(
                    response.status_code,
                    response.text,
                    headers=response.headers,
                    provider=provider,
                    model=model,
                )
            yield response
        finally:
            if unregister is not None:
                unregister()


def iter_response_lines(response: httpx.Response, cancel: Optional[CancellationToken] = None) -> Iterator[str]:
    """Yield response lines, checking ``cancel`` before each one is handed on."""
    for line in response.iter_lines():
        if cancel is not None:
            cancel.raise_if_cancelled()
        yield line
    if cancel is not None:
        cancel.raise_if_cancelled()


def as_provider_failure(
    exc: BaseException,
    *,
    provider: str,
    model: Optional[str] = None,
    cancel: Optional[CancellationToken] = None,
) -> BaseException:
    """Translate ``exc`` into the exception an adapter should raise.

    - ``CancelledError`` passes through.
    - Any failure observed after ``cancel`` fired (a read interrupted by the
      cancel hook closing the response) becomes ``CancelledError``.
    - Everything else is classified; an existing :class:`ClassifiedError` is
      annotated with the provider/model when it lacks them.
    """
    if isinstance(exc, CancelledError):
        return exc
    if cancel is not None and cancel.cancelled:
        return CancelledError(cancel.reason or "operation cancelled")
    err = classify_exception(exc, provider=provider, model=model)
    if err.provider is None:
        err.provider = provider
    if err.model is None:
        err.model = model
    return err


__all__ = ["open_exchange", "iter_response_lines", "as_provider_failure"]
