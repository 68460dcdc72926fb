"""``GenerateContentResponse`` -> canonical response and stream chunks.

The blocking and streaming endpoints return the same document shape; in
streaming mode every SSE event is one complete (partial-content) response.
Function calls therefore arrive whole and need no argument accumulation.

Gemini returns no tool-call ids, so each ``functionCall`` gets a generated
one (a vendor-supplied ``id`` is kept when present).
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..base.errors import ClassifiedError, ErrorKind
from ..base.ids import new_tool_call_id
from ..base.log_support import LogContext
from ..base.logging import normalized_log_event
from ..base.models import (
    MessageResponse,
    STOP_END_TURN,
    STOP_TOOL_USE,
    TextBlock,
    ToolUseBlock,
    Usage,
)
from ..base.streaming import MessageStop, text_delta, tool_use_start
from ..base.wire import load_json, malformed, raise_for_error_payload

_WIRE = ConfigDict(extra="ignore", populate_by_name=True)


class WireFunctionCall(BaseModel):
    model_config = _WIRE

    id: Optional[str] = None
    name: str = ""
    args: Optional[Dict[str, Any]] = None


class WirePart(BaseModel):
    model_config = _WIRE

    text: Optional[str] = None
    thought: Optional[bool] = None
    function_call: Optional[WireFunctionCall] = Field(None, alias="functionCall")


class WireContent(BaseModel):
    model_config = _WIRE

    role: Optional[str] = None
    parts: List[WirePart] = Field(default_factory=list)


class WireCandidate(BaseModel):
    model_config = _WIRE

    content: Optional[WireContent] = None
    finish_reason: Optional[str] = Field(None, alias="finishReason")


class WireUsageMetadata(BaseModel):
    model_config = _WIRE

    prompt_token_count: int = Field(0, alias="promptTokenCount")
    candidates_token_count: int = Field(0, alias="candidatesTokenCount")
    thoughts_token_count: int = Field(0, alias="thoughtsTokenCount")
    cached_content_token_count: int = Field(0, alias="cachedContentTokenCount")

    def to_usage(self) -> Usage:
        return Usage(
            input_tokens=self.prompt_token_count,
            output_tokens=self.candidates_token_count + self.thoughts_token_count,
            cache_read_tokens=self.cached_content_token_count,
        )


class WirePromptFeedback(BaseModel):
    model_config = _WIRE

    block_reason: Optional[str] = Field(None, alias="blockReason")


class WireGenerateResponse(BaseModel):
    model_config = _WIRE

    candidates: List[WireCandidate] = Field(default_factory=list)
    usage_metadata: Optional[WireUsageMetadata] = Field(None, alias="usageMetadata")
    prompt_feedback: Optional[WirePromptFeedback] = Field(None, alias="promptFeedback")
    response_id: Optional[str] = Field(None, alias="responseId")
    model_version: Optional[str] = Field(None, alias="modelVersion")

    def first_parts(self) -> List[WirePart]:
        if not self.candidates or self.candidates[0].content is None:
            return []
        return self.candidates[0].content.parts


def map_finish_reason(reason: Optional[str]) -> Optional[str]:
    """``STOP`` becomes ``end_turn``; other reasons are lower-cased."""
    if not reason:
        return None
    return STOP_END_TURN if reason == "STOP" else reason.lower()


def _validate(data: Any, raw: Any) -> WireGenerateResponse:
    raise_for_error_payload(data)
    try:
        parsed = WireGenerateResponse.model_validate(data)
    except ValidationError as exc:
        err = malformed("unexpected generateContent shape", raw if isinstance(raw, (str, bytes)) else json.dumps(data, default=str))
        err.raw = exc
        raise err from exc
    feedback = parsed.prompt_feedback
    if not parsed.candidates and feedback is not None and feedback.block_reason:
        raise ClassifiedError(
            kind=ErrorKind.INVALID_REQUEST,
            message=f"prompt blocked: {feedback.block_reason}",
            body=json.dumps(data, default=str),
        )
    return parsed


def _tool_use(call: WireFunctionCall) -> ToolUseBlock:
    return ToolUseBlock(id=call.id or new_tool_call_id(), name=call.name, input=call.args or {})


def decode_response(raw: Any, *, model: str = "") -> MessageResponse:
    """Decode a blocking ``generateContent`` body.

    Raises:
        ClassifiedError: ``malformed_response`` for undecodable bodies,
            ``invalid_request`` for a blocked prompt.
    """
    parsed = _validate(load_json(raw), raw)
    content: List[Any] = []
    has_tools = False
    for part in parsed.first_parts():
        if part.thought:
            continue
        if part.text:
            content.append(TextBlock(text=part.text))
        if part.function_call is not None:
            content.append(_tool_use(part.function_call))
            has_tools = True

    if has_tools:
        stop_reason = STOP_TOOL_USE
    else:
        finish = parsed.candidates[0].finish_reason if parsed.candidates else None
        stop_reason = map_finish_reason(finish) or STOP_END_TURN
    return MessageResponse(
        id=parsed.response_id or "",
        model=parsed.model_version or model,
        content=content,
        stop_reason=stop_reason,
        usage=parsed.usage_metadata.to_usage() if parsed.usage_metadata else Usage(),
    )


class GeminiStreamDecoder:
    """Per-call decoder for ``streamGenerateContent?alt=sse`` events."""

    def __init__(self, logger: logging.Logger, ctx: LogContext) -> None:
        self._logger = logger
        self._ctx = ctx
        self._tool_count = 0
        self._finish_reason: Optional[str] = None
        self.usage: Optional[Usage] = None
        self.response_id: Optional[str] = None

    def feed(self, payload: str) -> Iterator[Any]:
        try:
            data = json.loads(payload)
        except ValueError as exc:
            err = malformed(f"stream event is not valid JSON: {exc}", payload)
            err.raw = exc
            raise err from exc
        event = _validate(data, payload)
        if event.response_id and self.response_id is None:
            self.response_id = event.response_id
        if event.usage_metadata is not None:
            self.usage = event.usage_metadata.to_usage()
        for part in event.first_parts():
            if part.thought:
                continue
            if part.text:
                yield text_delta(part.text, 0)
            if part.function_call is not None:
                if not part.function_call.name:
                    normalized_log_event(
                        self._logger,
                        "stream.tool_call.dropped",
                        self._ctx,
                        phase="mid_stream",
                        level=logging.WARNING,
                        reason="missing function name",
                    )
                    continue
                self._tool_count += 1
                yield tool_use_start(_tool_use(part.function_call), self._tool_count)
        if event.candidates and event.candidates[0].finish_reason:
            self._finish_reason = event.candidates[0].finish_reason

    def finish(self) -> Iterator[Any]:
        """Yield the synthetic ``MessageStop`` closing the stream."""
        if self._tool_count:
            stop_reason = STOP_TOOL_USE
        else:
            stop_reason = map_finish_reason(self._finish_reason) or STOP_END_TURN
        yield MessageStop(stop_reason=stop_reason, usage=self.usage)


def decode_model_ids(raw: Any) -> List[str]:
    """Model ids from ``GET /v1beta/models`` (``models[].name`` minus ``models/``)."""
    data = load_json(raw)
    rows = data.get("models") if isinstance(data, dict) else None
    if not isinstance(rows, list):
        raise malformed("unexpected model list shape", json.dumps(data, default=str))
    ids: List[str] = []
    for row in rows:
        name = row.get("name", "") if isinstance(row, dict) else ""
        methods = row.get("supportedGenerationMethods") if isinstance(row, dict) else None
        if not name or (methods is not None and "generateContent" not in methods):
            continue
        ids.append(name.removeprefix("models/"))
    return ids


__all__ = [
    "WireGenerateResponse",
    "WireCandidate",
    "WirePart",
    "WireFunctionCall",
    "WireUsageMetadata",
    "decode_response",
    "decode_model_ids",
    "map_finish_reason",
    "GeminiStreamDecoder",
]
