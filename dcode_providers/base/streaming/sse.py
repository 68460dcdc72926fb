"""Server-Sent Events line decoding.

Both adapters receive streaming responses as SSE where every event carries a
single ``data:`` line holding one JSON document. This module turns the raw
lines produced by ``httpx.Response.iter_lines()`` into payload strings.

Rules:
    - ``data:`` lines (with or without a space after the colon) yield their
      value.
    - Blank lines, comment lines (leading ``:``) and other fields
      (``event:``, ``id:``, ``retry:``) are ignored.
    - The ``[DONE]`` sentinel ends iteration without being yielded, so the
      caller stops reading instead of draining the connection.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Union

DONE_SENTINEL = "[DONE]"


def sse_data(line: Union[str, bytes]) -> str | None:
    """Return the data payload of one SSE line, or ``None`` if it carries none."""
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    line = line.strip()
    if not line.startswith("data:"):
        return None
    return line[len("data:"):].strip()


def iter_sse_data(lines: Iterable[Union[str, bytes]]) -> Iterator[str]:
    """Yield the non-empty data payloads in ``lines`` until ``[DONE]``."""
    for raw in lines:
        payload = sse_data(raw)
        if not payload:
            continue
        if payload == DONE_SENTINEL:
            return
        yield payload


__all__ = ["iter_sse_data", "sse_data", "DONE_SENTINEL"]
