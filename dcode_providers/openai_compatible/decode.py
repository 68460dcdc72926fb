"""Chat Completions response -> canonical response.

Wire models are permissive pydantic mirrors of the fields the adapter reads;
unknown fields are ignored and nullable fields tolerate ``null`` because
several compatible backends emit it where OpenAI omits the key.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..base.wire import load_json, malformed, raise_for_error_payload
from ..base.logging import get_logger, normalized_log_event
from ..base.ids import new_tool_call_id
from ..base.models import (
    MessageResponse,
    STOP_END_TURN,
    STOP_TOOL_USE,
    TextBlock,
    ToolUseBlock,
    Usage,
)

_LENIENT = ConfigDict(extra="ignore")


class WireFunction(BaseModel):
    model_config = _LENIENT

    name: Optional[str] = None
    arguments: Union[str, Dict[str, Any], None] = None


class WireToolCall(BaseModel):
    model_config = _LENIENT

    index: Optional[int] = None
    id: Optional[str] = None
    type: Optional[str] = None
    function: WireFunction = Field(default_factory=WireFunction)


class WireMessage(BaseModel):
    """A full ``message`` or an incremental ``delta``; same shape."""

    model_config = _LENIENT

    role: Optional[str] = None
    content: Union[str, List[Dict[str, Any]], None] = None
    tool_calls: Optional[List[WireToolCall]] = None

    def text(self) -> str:
        if isinstance(self.content, list):
            return "".join(
                str(p.get("text", "")) for p in self.content if p.get("type") == "text"
            )
        return self.content or ""


class WireChoice(BaseModel):
    model_config = _LENIENT

    index: int = 0
    message: Optional[WireMessage] = None
    delta: Optional[WireMessage] = None
    finish_reason: Optional[str] = None


class WireUsage(BaseModel):
    model_config = _LENIENT

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    prompt_tokens_details: Optional[Dict[str, Any]] = None

    def to_usage(self) -> Usage:
        cached = (self.prompt_tokens_details or {}).get("cached_tokens") or 0
        return Usage(
            input_tokens=self.prompt_tokens or 0,
            output_tokens=self.completion_tokens or 0,
            cache_read_tokens=int(cached),
        )


class WireCompletion(BaseModel):
    """A ``chat.completion`` body or one ``chat.completion.chunk`` event."""

    model_config = _LENIENT

    id: Optional[str] = None
    model: Optional[str] = None
    choices: List[WireChoice] = Field(default_factory=list)
    usage: Optional[WireUsage] = None


class WireModelEntry(BaseModel):
    model_config = _LENIENT

    id: str


class WireModelList(BaseModel):
    model_config = _LENIENT

    data: List[WireModelEntry] = Field(default_factory=list)


def map_finish_reason(reason: Optional[str]) -> Optional[str]:
    """Map a wire finish reason to a canonical stop reason.

    ``"stop"`` becomes ``"end_turn"``; every other value passes through.
    """
    if reason is None:
        return None
    return STOP_END_TURN if reason == "stop" else reason


def parse_tool_arguments(raw: Any) -> Tuple[Dict[str, Any], bool]:
    """Parse tool-call ``arguments`` into an object.

    Returns ``(args, valid)``. Empty input yields ``({}, True)``; input that is
    not JSON or not a JSON object yields ``({}, False)``.
    """
    if isinstance(raw, dict):
        return raw, True
    if raw is None or not str(raw).strip():
        return {}, True
    try:
        value = json.loads(raw)
    except ValueError:
        return {}, False
    if not isinstance(value, dict):
        return {}, False
    return value, True


def decode_response(
    raw: Any,
    *,
    model: str = "",
    logger: Optional[logging.Logger] = None,
) -> MessageResponse:
    """Decode a blocking ``/chat/completions`` body.

    Only the first choice is read. Tool calls without an id (or repeating an
    earlier id) get a generated one; unparseable arguments become ``{}``.
    Tool calls without a function name are dropped and logged.

    Raises:
        ClassifiedError: ``malformed_response`` when the body is not JSON or
            does not have the completion shape; a status-derived kind for an
            in-band error payload.
    """
    data = load_json(raw)
    raise_for_error_payload(data)
    try:
        completion = WireCompletion.model_validate(data)
    except ValidationError as exc:
        err = malformed(f"unexpected completion shape: {exc.error_count()} error(s)", json.dumps(data, default=str))
        err.raw = exc
        raise err from exc

    resolved_model = completion.model or model
    if not completion.choices:
        return MessageResponse(
            id=completion.id or "",
            model=resolved_model,
            usage=completion.usage.to_usage() if completion.usage else Usage(),
        )

    choice = completion.choices[0]
    message = choice.message or WireMessage()
    content: List[Any] = []
    text = message.text()
    if text:
        content.append(TextBlock(text=text))
    seen: Set[str] = set()
    for call in message.tool_calls or []:
        if not call.function.name:
            normalized_log_event(
                logger or get_logger("dcode_providers.openai_compatible"),
                "tool_call.dropped",
                phase="finalize",
                level=logging.WARNING,
                tool_call_id=call.id or None,
                reason="missing function name",
            )
            continue
        args, _ = parse_tool_arguments(call.function.arguments)
        call_id = call.id if call.id and call.id not in seen else new_tool_call_id()
        seen.add(call_id)
        content.append(ToolUseBlock(id=call_id, name=call.function.name, input=args))

    stop_reason = map_finish_reason(choice.finish_reason)
    if stop_reason is None:
        stop_reason = STOP_TOOL_USE if seen else STOP_END_TURN
    return MessageResponse(
        id=completion.id or "",
        model=resolved_model,
        content=content,
        stop_reason=stop_reason,
        usage=completion.usage.to_usage() if completion.usage else Usage(),
    )


def decode_model_ids(raw: Any) -> List[str]:
    """Return model ids from a ``GET /models`` body (``{"data": [{"id"}]}``)."""
    data = load_json(raw)
    if isinstance(data, list):
        data = {"data": data}
    try:
        listing = WireModelList.model_validate(data)
    except ValidationError as exc:
        err = malformed("unexpected model list shape", json.dumps(data, default=str))
        err.raw = exc
        raise err from exc
    return [entry.id for entry in listing.data if entry.id]


__all__ = [
    "WireFunction",
    "WireToolCall",
    "WireMessage",
    "WireChoice",
    "WireUsage",
    "WireCompletion",
    "decode_response",
    "decode_model_ids",
    "map_finish_reason",
    "parse_tool_arguments",
]
