"""Canonical request -> ``generateContent`` body (and back).

Mapping summary:

=====================  ==============================================
canonical              Gemini
=====================  ==============================================
role ``assistant``     ``model``
other roles            ``user``
system prompt          ``systemInstruction.parts[].text``
text block             ``{"text"}``
base64 image           ``{"inlineData": {mimeType, data}}``
url image              ``{"fileData": {mimeType, fileUri}}``
tool_use               ``{"functionCall": {name, args}}``
tool_result            ``{"functionResponse": {name, response}}``
=====================  ==============================================

Gemini correlates function responses by name rather than id, so a
tool_result's name is looked up from the tool_use it references.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..base.ids import new_tool_call_id
from ..base.logging import get_logger, normalized_log_event
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


def encode_tool(tool: Tool) -> Dict[str, Any]:
    return {
        "name": tool.name,
        "description": tool.description,
        "parameters": tool.input_schema,
    }


def _encode_image(block: ImageBlock) -> Dict[str, Any]:
    src = block.source
    if src.type == "base64":
        return {"inlineData": {"mimeType": src.media_type, "data": src.data}}
    return {"fileData": {"mimeType": src.media_type, "fileUri": src.url}}


def _encode_parts(msg: Message, tool_names: Dict[str, str]) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = []
    for block in msg.blocks():
        if isinstance(block, TextBlock):
            if block.text:
                parts.append({"text": block.text})
        elif isinstance(block, ImageBlock):
            parts.append(_encode_image(block))
        elif isinstance(block, ToolUseBlock):
            if block.id:
                tool_names[block.id] = block.name
            parts.append({"functionCall": {"name": block.name, "args": dict(block.input)}})
        elif isinstance(block, ToolResultBlock):
            name = tool_names.get(block.tool_use_id, block.tool_use_id)
            parts.append(
                {
                    "functionResponse": {
                        "name": name,
                        "response": {"content": block.content_text()},
                    }
                }
            )
    return parts


def encode_request(request: MessageRequest, *, logger: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """Build the ``generateContent`` / ``streamGenerateContent`` body.

    ``systemInstruction`` only carries text; images in system-role messages
    are dropped with a ``request.system_image.dropped`` warning.
    """
    system_parts: List[Dict[str, Any]] = []
    if request.system:
        system_parts.append({"text": request.system})
    contents: List[Dict[str, Any]] = []
    tool_names: Dict[str, str] = {}
    for msg in request.messages:
        if msg.role == "system":
            text = msg.text()
            if text:
                system_parts.append({"text": text})
            images = sum(isinstance(b, ImageBlock) for b in msg.blocks())
            if images:
                normalized_log_event(
                    logger or get_logger("dcode_providers.gemini"),
                    "request.system_image.dropped",
                    phase="start",
                    level=logging.WARNING,
                    model=request.model,
                    images=images,
                )
            continue
        parts = _encode_parts(msg, tool_names)
        if parts:
            contents.append({"role": "model" if msg.role == "assistant" else "user", "parts": parts})

    body: Dict[str, Any] = {"contents": contents}
    if system_parts:
        body["systemInstruction"] = {"parts": system_parts}
    gen: Dict[str, Any] = {}
    if request.max_tokens is not None:
        gen["maxOutputTokens"] = request.max_tokens
    if request.temperature is not None:
        gen["temperature"] = request.temperature
    if gen:
        body["generationConfig"] = gen
    if request.tools:
        body["tools"] = [{"functionDeclarations": [encode_tool(t) for t in request.tools]}]
    return body


def _decode_parts(parts: List[Dict[str, Any]], call_ids: Dict[str, str]) -> List[Any]:
    blocks: List[Any] = []
    for part in parts:
        if "text" in part:
            if not part.get("thought"):
                blocks.append(TextBlock(text=part["text"]))
        elif "inlineData" in part:
            data = part["inlineData"]
            blocks.append(
                ImageBlock(
                    source=ImageSource(type="base64", media_type=data.get("mimeType", ""), data=data.get("data", ""))
                )
            )
        elif "fileData" in part:
            data = part["fileData"]
            blocks.append(
                ImageBlock(
                    source=ImageSource(type="url", media_type=data.get("mimeType", ""), url=data.get("fileUri", ""))
                )
            )
        elif "functionCall" in part:
            call = part["functionCall"]
            call_id = call.get("id") or new_tool_call_id()
            call_ids[call.get("name", "")] = call_id
            blocks.append(ToolUseBlock(id=call_id, name=call.get("name", ""), input=call.get("args")))
        elif "functionResponse" in part:
            resp = part["functionResponse"]
            name = resp.get("name", "")
            payload = resp.get("response")
            content = payload.get("content", payload) if isinstance(payload, dict) else payload
            blocks.append(ToolResultBlock(tool_use_id=call_ids.get(name, name), content=content or ""))
    return blocks


def decode_request_contents(body: Dict[str, Any]) -> Tuple[str, List[Message]]:
    """Turn a ``generateContent`` body back into ``(system, messages)``.

    Function responses are linked to the most recent call of the same name.
    A turn holding exactly one text part decodes to plain string content.
    """
    instruction = body.get("systemInstruction") or {}
    system = "\n\n".join(p.get("text", "") for p in instruction.get("parts", []) if "text" in p)
    call_ids: Dict[str, str] = {}
    messages: List[Message] = []
    for turn in body.get("contents", []):
        role = "assistant" if turn.get("role") == "model" else "user"
        blocks = _decode_parts(turn.get("parts", []), call_ids)
        if len(blocks) == 1 and isinstance(blocks[0], TextBlock):
            messages.append(Message(role=role, content=blocks[0].text))
        else:
            messages.append(Message(role=role, content=blocks))
    return system, messages


__all__ = ["encode_request", "encode_tool", "decode_request_contents"]
