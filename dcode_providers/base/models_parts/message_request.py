"""
Canonical request sent to an adapter.

Purpose
-------
``MessageRequest`` is built fresh by the orchestration loop for each call and
is read-only to adapters. Validation happens at construction so adapters can
assume a well-formed conversation:

- ``max_tokens`` (when set) is positive; ``temperature`` lies in ``[0, 2]``.
- Tool names are unique.
- Every ``tool_result`` references a ``tool_use`` id emitted in an earlier
  message of the same request.

Failure modes
-------------
Violations raise ``pydantic.ValidationError``.
"""
from __future__ import annotations

from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .message import Message
from .tool import Tool


class MessageRequest(BaseModel):
    """Vendor-neutral request for one blocking or streaming call.

    Attributes:
        model: Target model id.
        messages: Ordered conversation history.
        system: System prompt text (may be empty).
        max_tokens: Optional output token cap.
        temperature: Optional sampling temperature.
        tools: Tools the model may call.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    model: str = Field(..., min_length=1)
    messages: List[Message]
    system: str = ""
    max_tokens: Optional[int] = Field(None, gt=0)
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    tools: List[Tool] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_conversation(self) -> "MessageRequest":
        names = [t.name for t in self.tools]
        if len(names) != len(set(names)):
            raise ValueError("tool names must be unique within a request")
        seen: Set[str] = set()
        for msg in self.messages:
            for result in msg.tool_results():
                if result.tool_use_id and result.tool_use_id not in seen:
                    raise ValueError(
                        f"tool_result references unknown tool_use id '{result.tool_use_id}'"
                    )
            seen.update(u.id for u in msg.tool_uses() if u.id)
        return self


__all__ = ["MessageRequest"]
