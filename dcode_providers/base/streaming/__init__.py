"""Streaming package for the provider layer.

Exposes canonical stream chunks, SSE line decoding, callback delivery, and
chunk accumulation under a single namespace.
"""

from .stream_chunk import (
    ContentBlockDelta,
    ContentBlockStart,
    Delta,
    MessageStop,
    StreamChunk,
    decode_stream_chunk,
    text_delta,
    tool_use_start,
)
from .sse import DONE_SENTINEL, iter_sse_data, sse_data
from .dispatch import StreamCallback, deliver_chunks
from .accumulate import accumulate_chunks

__all__ = [
    "ContentBlockDelta",
    "ContentBlockStart",
    "Delta",
    "MessageStop",
    "StreamChunk",
    "decode_stream_chunk",
    "text_delta",
    "tool_use_start",
    "DONE_SENTINEL",
    "iter_sse_data",
    "sse_data",
    "StreamCallback",
    "deliver_chunks",
    "accumulate_chunks",
]
