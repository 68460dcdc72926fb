"""Canonical protocol types public surface.

Re-exports the implementations under ``dcode_providers.base.models_parts`` to
provide a stable import path for adapters and callers. These are the only
shapes that cross the boundary between this package and the rest of the
application; vendor payloads never do.
"""

from .models_parts.content_block import (
    ContentBlock,
    ImageBlock,
    ImageSource,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    decode_content_block,
    text_of,
)
from .models_parts.message import Message, Role
from .models_parts.tool import Tool
from .models_parts.usage import Usage
from .models_parts.message_request import MessageRequest
from .models_parts.message_response import MessageResponse, STOP_END_TURN, STOP_TOOL_USE

__all__ = [
    "ContentBlock",
    "ImageBlock",
    "ImageSource",
    "TextBlock",
    "ToolResultBlock",
    "ToolUseBlock",
    "decode_content_block",
    "text_of",
    "Message",
    "Role",
    "Tool",
    "Usage",
    "MessageRequest",
    "MessageResponse",
    "STOP_END_TURN",
    "STOP_TOOL_USE",
]
