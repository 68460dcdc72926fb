"""Rebuild a blocking-style response from a chunk sequence.

Callers that stream for responsiveness but still need the final assistant turn
(history, token accounting) fold the observed chunks back into a
:class:`MessageResponse` with :func:`accumulate_chunks`.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from ..models_parts.content_block import TextBlock, ToolUseBlock
from ..models_parts.message_response import MessageResponse, STOP_END_TURN, STOP_TOOL_USE
from ..models_parts.usage import Usage
from .stream_chunk import ContentBlockDelta, ContentBlockStart, MessageStop


def accumulate_chunks(chunks: Iterable[Any], *, id: str = "", model: str = "") -> MessageResponse:  # noqa: A002
    """Fold ``chunks`` into a :class:`MessageResponse`.

    Contract:
        - Consecutive text deltas merge into one text block, so deltas
          ``"a"``, ``"b"``, ``"c"`` become the text ``"abc"`` no matter how
          they were split.
        - ``input_json_delta`` fragments following a tool_use start are
          concatenated and parsed into that block's input.
        - ``content_block_start`` blocks are appended in arrival order.
        - Chunks after the first ``message_stop`` are ignored.
    """
    content: List[Any] = []
    text_parts: List[str] = []
    json_parts: List[str] = []
    stop_reason: Optional[str] = None
    usage: Optional[Usage] = None

    def _flush_text() -> None:
        if text_parts:
            content.append(TextBlock(text="".join(text_parts)))
            text_parts.clear()

    def _flush_json() -> None:
        if not json_parts:
            return
        raw = "".join(json_parts)
        json_parts.clear()
        if not content or not isinstance(content[-1], ToolUseBlock):
            return
        try:
            parsed: Dict[str, Any] = json.loads(raw)
        except ValueError:
            return
        if isinstance(parsed, dict):
            content[-1] = content[-1].model_copy(update={"input": parsed})

    for chunk in chunks:
        if isinstance(chunk, MessageStop):
            stop_reason = chunk.stop_reason
            usage = chunk.usage
            break
        if isinstance(chunk, ContentBlockDelta):
            if chunk.delta.type == "input_json_delta":
                json_parts.append(chunk.delta.partial_json)
            else:
                _flush_json()
                text_parts.append(chunk.delta.text)
        elif isinstance(chunk, ContentBlockStart):
            _flush_text()
            _flush_json()
            content.append(chunk.content_block)
    _flush_text()
    _flush_json()

    if stop_reason is None:
        has_tools = any(isinstance(b, ToolUseBlock) for b in content)
        stop_reason = STOP_TOOL_USE if has_tools else STOP_END_TURN
    return MessageResponse(
        id=id,
        model=model,
        content=content,
        stop_reason=stop_reason,
        usage=usage or Usage(),
    )


__all__ = ["accumulate_chunks"]
