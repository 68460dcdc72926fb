"""Canonical response returned by a blocking call (single-class module)."""
from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .content_block import ContentBlock, ToolUseBlock, text_of
from .usage import Usage

STOP_END_TURN = "end_turn"
STOP_TOOL_USE = "tool_use"


class MessageResponse(BaseModel):
    """Assistant turn produced by one round trip.

    ``stop_reason`` is ``"end_turn"``, ``"tool_use"``, or a vendor reason
    passed through unchanged (e.g. ``"length"``). Tool-use ids are unique
    within one response.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = ""
    model: str = ""
    role: Literal["assistant"] = "assistant"
    content: List[ContentBlock] = Field(default_factory=list)
    stop_reason: str = STOP_END_TURN
    usage: Usage = Field(default_factory=Usage)

    @model_validator(mode="after")
    def _unique_tool_ids(self) -> "MessageResponse":
        ids = [b.id for b in self.content if isinstance(b, ToolUseBlock) and b.id]
        if len(ids) != len(set(ids)):
            raise ValueError("tool_use ids must be unique within a response")
        return self

    def text(self) -> str:
        """Concatenated text of all text blocks."""
        return text_of(self.content)

    def tool_uses(self) -> List[ToolUseBlock]:
        """Tool invocations in emission order."""
        return [b for b in self.content if isinstance(b, ToolUseBlock)]


__all__ = ["MessageResponse", "STOP_END_TURN", "STOP_TOOL_USE"]
