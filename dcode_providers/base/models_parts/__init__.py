"""Canonical protocol model parts (one concern per module).

Prefer importing from ``dcode_providers.base.models`` for the stable surface.
"""

from .content_block import (
    ContentBlock,
    ImageBlock,
    ImageSource,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
    decode_content_block,
    text_of,
)
from .message import Message, Role
from .tool import Tool
from .usage import Usage
from .message_request import MessageRequest
from .message_response import MessageResponse, STOP_END_TURN, STOP_TOOL_USE

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
