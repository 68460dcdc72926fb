"""Canonical request -> Chat Completions payload (and back).

Translation rules:
    - ``MessageRequest.system`` becomes a leading ``system`` message.
    - ``tool_result`` blocks are lifted out of their canonical message into
      separate ``{"role": "tool", "tool_call_id", "content"}`` messages that
      precede whatever else the message carried. Results without an id are
      skipped; structured result content is JSON-encoded.
    - User messages containing an image use the multi-part content form
      (``text`` and ``image_url`` parts in order); everything else uses the
      plain string form.
    - Assistant ``tool_use`` blocks become ``tool_calls`` entries whose
      ``arguments`` is the JSON-encoded input (``"{}"`` when empty). Blocks
      without a name are skipped; blocks without an id get a generated one.

``decode_request_messages`` reverses the mapping so a wire conversation can be
turned back into canonical messages.
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Tuple

from ..base.ids import new_tool_call_id
from ..base.models import (
    ImageBlock,
    ImageSource,
    Message,
    MessageRequest,
    TextBlock,
    Tool,
    ToolResultBlock,
    ToolUseBlock,
)
from .decode import parse_tool_arguments

_DATA_URL = re.compile(r"^data:(?P<media>[^;,]*);base64,(?P<data>.*)$", re.DOTALL)


def encode_tool(tool: Tool) -> Dict[str, Any]:
    """Return the ``{"type": "function", ...}`` declaration for ``tool``."""
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.input_schema,
        },
    }


def _encode_tool_call(block: ToolUseBlock) -> Dict[str, Any]:
    return {
        "id": block.id or new_tool_call_id(),
        "type": "function",
        "function": {
            "name": block.name,
            "arguments": json.dumps(block.input or {}, ensure_ascii=False),
        },
    }


def _encode_parts(blocks: List[Any]) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = []
    for block in blocks:
        if isinstance(block, TextBlock):
            parts.append({"type": "text", "text": block.text})
        elif isinstance(block, ImageBlock):
            parts.append({"type": "image_url", "image_url": {"url": block.source.as_data_url()}})
    return parts


def _encode_message(msg: Message) -> List[Dict[str, Any]]:
    """Encode one canonical message into zero or more wire messages."""
    if isinstance(msg.content, str):
        role = msg.role if msg.role in ("system", "assistant") else "user"
        return [{"role": role, "content": msg.content}]

    out: List[Dict[str, Any]] = []
    rest: List[Any] = []
    for block in msg.content:
        if isinstance(block, ToolResultBlock):
            if block.tool_use_id:
                out.append(
                    {
                        "role": "tool",
                        "tool_call_id": block.tool_use_id,
                        "content": block.content_text(),
                    }
                )
        else:
            rest.append(block)

    role = msg.role if msg.role in ("system", "assistant") else "user"
    content: Any = "".join(b.text for b in rest if isinstance(b, TextBlock))
    if any(isinstance(b, ImageBlock) for b in rest):
        content = _encode_parts(rest)

    if role == "assistant":
        calls = [_encode_tool_call(b) for b in rest if isinstance(b, ToolUseBlock) and b.name]
        if calls:
            out.append({"role": "assistant", "content": content or None, "tool_calls": calls})
        elif content or not out:
            out.append({"role": "assistant", "content": content})
    elif role == "system":
        if content:
            out.append({"role": "system", "content": content})
    elif content or not out:
        out.append({"role": "user", "content": content})
    return out


def encode_messages(system: str, messages: List[Message]) -> List[Dict[str, Any]]:
    """Encode the system prompt plus ``messages`` into the wire ``messages`` list."""
    wire: List[Dict[str, Any]] = []
    if system:
        wire.append({"role": "system", "content": system})
    for msg in messages:
        wire.extend(_encode_message(msg))
    return wire


def encode_request(
    request: MessageRequest,
    *,
    stream: bool,
    stream_usage: bool = False,
) -> Dict[str, Any]:
    """Build the ``/chat/completions`` JSON body for ``request``.

    ``max_tokens`` and ``temperature`` are only sent when set. With
    ``stream_usage`` the backend is asked to append a usage-only event.
    """
    body: Dict[str, Any] = {
        "model": request.model,
        "messages": encode_messages(request.system, request.messages),
        "stream": stream,
    }
    if request.tools:
        body["tools"] = [encode_tool(t) for t in request.tools]
    if request.max_tokens is not None:
        body["max_tokens"] = request.max_tokens
    if request.temperature is not None:
        body["temperature"] = request.temperature
    if stream and stream_usage:
        body["stream_options"] = {"include_usage": True}
    return body


# -------------------- Wire -> canonical --------------------


def _decode_image_url(url: str) -> ImageBlock:
    match = _DATA_URL.match(url)
    if match:
        return ImageBlock(
            source=ImageSource(type="base64", media_type=match["media"], data=match["data"])
        )
    return ImageBlock(source=ImageSource(type="url", url=url))


def _decode_content(content: Any) -> Any:
    if content is None or isinstance(content, str):
        return content or ""
    blocks: List[Any] = []
    for part in content:
        kind = part.get("type")
        if kind == "text":
            blocks.append(TextBlock(text=part.get("text", "")))
        elif kind == "image_url":
            ref = part.get("image_url")
            url = ref.get("url", "") if isinstance(ref, dict) else str(ref or "")
            blocks.append(_decode_image_url(url))
    return blocks


def _text_content(content: Any) -> str:
    if isinstance(content, list):
        return "".join(p.get("text", "") for p in content if p.get("type") == "text")
    return content or ""


def decode_request_messages(wire: List[Dict[str, Any]]) -> Tuple[str, List[Message]]:
    """Turn a wire ``messages`` list back into ``(system, messages)``.

    A leading system message becomes the system prompt; later system messages
    stay in the conversation. Consecutive ``tool`` messages fold into one user
    message of ``tool_result`` blocks.
    """
    system = ""
    messages: List[Message] = []
    pending_results: List[ToolResultBlock] = []

    def _flush_results() -> None:
        if pending_results:
            messages.append(Message(role="user", content=list(pending_results)))
            pending_results.clear()

    for i, item in enumerate(wire):
        role = item.get("role")
        if role == "tool":
            pending_results.append(
                ToolResultBlock(
                    tool_use_id=item.get("tool_call_id") or "",
                    content=_text_content(item.get("content")),
                )
            )
            continue
        _flush_results()
        if role == "system":
            text = _text_content(item.get("content"))
            if i == 0:
                system = text
            else:
                messages.append(Message(role="system", content=_decode_content(item.get("content"))))
        elif role == "assistant":
            messages.append(_decode_assistant(item))
        else:
            messages.append(Message(role="user", content=_decode_content(item.get("content"))))
    _flush_results()
    return system, messages


def _decode_assistant(item: Dict[str, Any]) -> Message:
    content = _decode_content(item.get("content"))
    calls: Optional[List[Dict[str, Any]]] = item.get("tool_calls")
    if not calls:
        return Message(role="assistant", content=content)
    if isinstance(content, str):
        blocks: List[Any] = [TextBlock(text=content)] if content else []
    else:
        blocks = content
    for call in calls:
        fn = call.get("function") or {}
        args, _ = parse_tool_arguments(fn.get("arguments"))
        blocks.append(ToolUseBlock(id=call.get("id") or "", name=fn.get("name", ""), input=args))
    return Message(role="assistant", content=blocks)


__all__ = [
    "encode_request",
    "encode_messages",
    "encode_tool",
    "decode_request_messages",
]
