"""Streaming reconstruction for Chat Completions SSE.

Backends stream tool calls as a series of deltas keyed by ``index``: the first
delta of a call usually carries ``id`` and ``function.name``, later ones carry
fragments of ``function.arguments`` that are only valid JSON once
concatenated. The canonical stream instead carries each tool call as one
complete ``content_block_start``, so calls are buffered here and emitted when
they close:

- a delta with a new non-empty ``id`` closes the open call and opens another;
- a change of ``index`` does the same, even when the ``id`` repeats;
- at end of stream the open call (if any) is closed before ``message_stop``.

Text deltas are forwarded as they arrive on index ``0``; tool calls are
numbered ``1..n`` in emission order. An ``id`` already used earlier in the
stream is replaced with a generated one.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Set, Tuple

from pydantic import ValidationError

from ..base.logging import normalized_log_event
from ..base.log_support import LogContext
from ..base.models import STOP_END_TURN, STOP_TOOL_USE, ToolUseBlock, Usage
from ..base.ids import new_tool_call_id
from ..base.streaming import MessageStop, text_delta, tool_use_start
from ..base.wire import malformed, raise_for_error_payload
from .decode import (
    WireCompletion,
    WireToolCall,
    map_finish_reason,
    parse_tool_arguments,
)


@dataclass
class _OpenCall:
    index: Optional[int]
    id: str = ""
    name: str = ""
    fragments: List[str] = field(default_factory=list)

    def arguments(self) -> str:
        return "".join(self.fragments)


class ToolCallAccumulator:
    """Buffers tool-call deltas and hands back each call once it closes."""

    def __init__(self) -> None:
        self._open: Optional[_OpenCall] = None

    @property
    def has_open_call(self) -> bool:
        return self._open is not None

    def add(self, call: WireToolCall) -> Optional[_OpenCall]:
        """Apply one delta; return the previously open call if this one closed it."""
        closed: Optional[_OpenCall] = None
        current = self._open
        starts_new = (
            current is None
            or (bool(call.id) and call.id != current.id)
            or (call.index is not None and current.index is not None and call.index != current.index)
        )
        if starts_new:
            closed = current
            current = _OpenCall(index=call.index, id=call.id or "")
            self._open = current
        fn = call.function
        if fn.name and not current.name:
            current.name = fn.name
        if isinstance(fn.arguments, dict):
            current.fragments.append(json.dumps(fn.arguments))
        elif fn.arguments:
            current.fragments.append(fn.arguments)
        return closed

    def flush(self) -> Optional[_OpenCall]:
        """Close and return the open call, if any."""
        closed, self._open = self._open, None
        return closed


def finalize_call(call: _OpenCall) -> Tuple[Optional[ToolUseBlock], bool]:
    """Turn a closed call into a tool_use block.

    Returns ``(block, args_valid)``; ``block`` is ``None`` for a nameless call.
    """
    if not call.name:
        return None, True
    args, valid = parse_tool_arguments(call.arguments())
    return ToolUseBlock(id=call.id or new_tool_call_id(), name=call.name, input=args), valid


class OpenAIStreamDecoder:
    """Per-call state machine turning SSE payloads into canonical chunks.

    Usage::

        decoder = OpenAIStreamDecoder(logger, ctx)
        for payload in iter_sse_data(lines):
            yield from decoder.feed(payload)
        yield from decoder.finish()
    """

    def __init__(self, logger: logging.Logger, ctx: LogContext) -> None:
        self._logger = logger
        self._ctx = ctx
        self._tools = ToolCallAccumulator()
        self._tool_count = 0
        self._seen_ids: Set[str] = set()
        self._finish_reason: Optional[str] = None
        self.usage: Optional[Usage] = None
        self.response_id: Optional[str] = None

    @property
    def tool_count(self) -> int:
        return self._tool_count

    def feed(self, payload: str) -> Iterator[Any]:
        """Decode one ``data:`` payload and yield the chunks it completes."""
        try:
            data = json.loads(payload)
        except ValueError as exc:
            err = malformed(f"stream event is not valid JSON: {exc}", payload)
            err.raw = exc
            raise err from exc
        raise_for_error_payload(data)
        try:
            event = WireCompletion.model_validate(data)
        except ValidationError as exc:
            err = malformed("unexpected stream event shape", payload)
            err.raw = exc
            raise err from exc

        if event.id and self.response_id is None:
            self.response_id = event.id
        if event.usage is not None:
            self.usage = event.usage.to_usage()
        if not event.choices:
            return
        choice = event.choices[0]
        delta = choice.delta or choice.message
        if delta is not None:
            text = delta.text()
            if text:
                yield text_delta(text, 0)
            for call in delta.tool_calls or []:
                closed = self._tools.add(call)
                if closed is not None:
                    yield from self._emit(closed)
        if choice.finish_reason:
            self._finish_reason = choice.finish_reason

    def finish(self) -> Iterator[Any]:
        """Close any open tool call, then yield the single ``MessageStop``."""
        closed = self._tools.flush()
        if closed is not None:
            yield from self._emit(closed)
        stop_reason = map_finish_reason(self._finish_reason)
        if stop_reason is None:
            stop_reason = STOP_TOOL_USE if self._tool_count else STOP_END_TURN
        yield MessageStop(stop_reason=stop_reason, usage=self.usage)

    def _emit(self, call: _OpenCall) -> Iterator[Any]:
        block, valid = finalize_call(call)
        if block is None:
            normalized_log_event(
                self._logger,
                "stream.tool_call.dropped",
                self._ctx,
                phase="mid_stream",
                level=logging.WARNING,
                tool_call_id=call.id or None,
                index=call.index,
                reason="missing function name",
            )
            return
        if not valid:
            normalized_log_event(
                self._logger,
                "stream.tool_call.args_invalid",
                self._ctx,
                phase="mid_stream",
                level=logging.WARNING,
                tool_call_id=block.id,
                tool=block.name,
                arguments_chars=len(call.arguments()),
            )
        if block.id in self._seen_ids:
            block = block.model_copy(update={"id": new_tool_call_id()})
        self._seen_ids.add(block.id)
        self._tool_count += 1
        yield tool_use_start(block, self._tool_count)


__all__ = ["OpenAIStreamDecoder", "ToolCallAccumulator", "finalize_call"]
