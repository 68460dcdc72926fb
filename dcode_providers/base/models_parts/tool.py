"""Canonical tool definition (single-class module)."""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class Tool(BaseModel):
    """A function the model may call, advertised once per request.

    Attributes:
        name: Unique tool name within the request.
        description: Natural-language description shown to the model.
        input_schema: JSON Schema object describing the tool's arguments.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    input_schema: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})


__all__ = ["Tool"]
