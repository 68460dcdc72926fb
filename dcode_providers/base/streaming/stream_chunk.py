"""
Canonical streaming chunks (tagged union).

A stream is an ordered sequence of chunks terminated by exactly one
:class:`MessageStop`:

- ``content_block_delta``: an incremental text (or partial JSON) fragment.
- ``content_block_start``: a fully formed block, used for completed tool calls.
- ``message_stop``: end of stream; may carry the final stop reason and usage.

``Delta.partial_json`` fragments are never independently valid JSON; consumers
concatenate them in arrival order before parsing.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ..models_parts.content_block import ContentBlock, ToolUseBlock
from ..models_parts.usage import Usage

_FROZEN = ConfigDict(extra="ignore", frozen=True)


class Delta(BaseModel):
    """Incremental content fragment."""

    model_config = _FROZEN

    type: Literal["text_delta", "input_json_delta"] = "text_delta"
    text: str = ""
    partial_json: str = ""


class ContentBlockDelta(BaseModel):
    model_config = _FROZEN

    type: Literal["content_block_delta"] = "content_block_delta"
    index: int = 0
    delta: Delta


class ContentBlockStart(BaseModel):
    model_config = _FROZEN

    type: Literal["content_block_start"] = "content_block_start"
    index: int = 0
    content_block: ContentBlock


class MessageStop(BaseModel):
    model_config = _FROZEN

    type: Literal["message_stop"] = "message_stop"
    stop_reason: Optional[str] = None
    usage: Optional[Usage] = None


StreamChunk = Annotated[
    Union[ContentBlockDelta, ContentBlockStart, MessageStop],
    Field(discriminator="type"),
]

_STREAM_CHUNK_ADAPTER: TypeAdapter[Any] = TypeAdapter(StreamChunk)


def decode_stream_chunk(data: Any) -> Union[ContentBlockDelta, ContentBlockStart, MessageStop]:
    """Decode a raw mapping into the matching chunk variant."""
    return _STREAM_CHUNK_ADAPTER.validate_python(data)


def text_delta(text: str, index: int = 0) -> ContentBlockDelta:
    """Build a text delta chunk."""
    return ContentBlockDelta(index=index, delta=Delta(type="text_delta", text=text))


def tool_use_start(block: ToolUseBlock, index: int = 0) -> ContentBlockStart:
    """Build a content_block_start chunk carrying a completed tool call."""
    return ContentBlockStart(index=index, content_block=block)


__all__ = [
    "Delta",
    "ContentBlockDelta",
    "ContentBlockStart",
    "MessageStop",
    "StreamChunk",
    "decode_stream_chunk",
    "text_delta",
    "tool_use_start",
]
