"""Helpers shared by the adapters' wire decoders.

- :func:`load_json` parses a response body or SSE payload, turning invalid
  JSON into ``malformed_response``.
- :func:`raise_for_error_payload` surfaces in-band ``{"error": {...}}``
  documents (sent by gateways inside a 200 body or as an SSE event) as a
  classified error, using the embedded ``code`` as the status when it looks
  like an HTTP status.
"""
from __future__ import annotations

import json
from typing import Any

from .errors import ClassifiedError, ErrorKind, classify_status


def malformed(message: str, body: Any = None) -> ClassifiedError:
    """Build a ``malformed_response`` error carrying the offending body."""
    text = body.decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else body
    return ClassifiedError(
        kind=ErrorKind.MALFORMED_RESPONSE,
        message=message,
        body=None if text is None else str(text),
    )


def load_json(raw: Any) -> Any:
    """Parse ``raw`` (bytes or str) as JSON; other values are returned as-is."""
    if not isinstance(raw, (str, bytes, bytearray)):
        return raw
    try:
        return json.loads(raw)
    except ValueError as exc:
        err = malformed(f"response is not valid JSON: {exc}", raw)
        err.raw = exc
        raise err from exc


def raise_for_error_payload(data: Any) -> None:
    if not isinstance(data, dict) or not data.get("error"):
        return
    err = data["error"]
    code = err.get("code") if isinstance(err, dict) else None
    if isinstance(code, int) and not isinstance(code, bool) and 400 <= code < 600:
        status = code
    else:
        status = 500
    raise classify_status(status, json.dumps(data, ensure_ascii=False, default=str))


__all__ = ["load_json", "malformed", "raise_for_error_payload"]
