"""Canonical conversation message (single-class module)."""
from __future__ import annotations

from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict

from .content_block import ContentBlock, TextBlock, ToolResultBlock, ToolUseBlock, text_of

Role = Literal["user", "assistant", "system", "tool"]


class Message(BaseModel):
    """One conversational turn.

    ``content`` is either plain text or an ordered list of content blocks;
    exactly one representation is ever populated because the field holds one
    or the other. Adapters map ``role`` to their wire roles.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    role: Role
    content: Union[str, List[ContentBlock]]

    def blocks(self) -> List[ContentBlock]:
        """Return the content as blocks (plain text becomes one text block)."""
        if isinstance(self.content, str):
            return [TextBlock(text=self.content)] if self.content else []
        return list(self.content)

    def text(self) -> str:
        """Return the concatenated text of this message."""
        if isinstance(self.content, str):
            return self.content
        return text_of(self.content)

    def tool_uses(self) -> List[ToolUseBlock]:
        return [b for b in self.blocks() if isinstance(b, ToolUseBlock)]

    def tool_results(self) -> List[ToolResultBlock]:
        return [b for b in self.blocks() if isinstance(b, ToolResultBlock)]


__all__ = ["Message", "Role"]
