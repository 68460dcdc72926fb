"""Callback delivery for adapter chunk generators.

Adapters implement streaming as a generator of canonical chunks that owns the
HTTP response inside a ``with`` block. :func:`deliver_chunks` drives such a
generator and hands each chunk to the caller's callback:

- Chunks are delivered synchronously, in arrival order.
- Delivery stops after the first :class:`MessageStop`; nothing follows it.
- If the callback raises, the generator is closed immediately (which exits the
  adapter's ``with`` block and releases the connection) and the callback's
  exception propagates unchanged.
"""
from __future__ import annotations

from contextlib import closing
from typing import Any, Callable, Generator

from .stream_chunk import MessageStop

StreamCallback = Callable[[Any], None]


def deliver_chunks(chunks: Generator[Any, None, None], callback: StreamCallback) -> int:
    """Drive ``chunks`` into ``callback``; return the number of chunks delivered."""
    delivered = 0
    with closing(chunks) as stream:
        for chunk in stream:
            callback(chunk)
            delivered += 1
            if isinstance(chunk, MessageStop):
                break
    return delivered


__all__ = ["deliver_chunks", "StreamCallback"]
