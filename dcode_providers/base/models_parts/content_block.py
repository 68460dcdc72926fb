"""
Canonical content blocks (tagged union).

Purpose
-------
A content block is one typed unit of conversational content: text, an image,
a model-issued tool invocation, or the result of running a tool. Adapters
translate these to and from each vendor's wire encoding; nothing outside the
adapters ever sees vendor payloads.

Decoding
--------
Blocks are pydantic models discriminated on ``type``. Unknown fields are
ignored, unknown ``type`` values and missing required fields raise
``pydantic.ValidationError``. Instances are frozen once constructed.
"""
from __future__ import annotations

import json
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


_FROZEN = ConfigDict(extra="ignore", frozen=True)


class ImageSource(BaseModel):
    """Location of image bytes: inline base64 data or a remote URL.

    Attributes:
        type: ``"base64"`` when ``data`` carries the encoded bytes, ``"url"``
            when ``url`` points at a remote resource.
        media_type: MIME type such as ``"image/png"``.
        data: Base64 payload (``type == "base64"``).
        url: Remote location (``type == "url"``).
    """

    model_config = _FROZEN

    type: Literal["base64", "url"]
    media_type: str = ""
    data: str = ""
    url: str = ""

    @model_validator(mode="after")
    def _check_payload(self) -> "ImageSource":
        if self.type == "base64" and not self.data:
            raise ValueError("base64 image source requires data")
        if self.type == "url" and not self.url:
            raise ValueError("url image source requires url")
        return self

    def as_data_url(self) -> str:
        """Return a ``data:`` URL for inline sources, or the remote URL."""
        if self.type == "url":
            return self.url
        return f"data:{self.media_type or 'application/octet-stream'};base64,{self.data}"


class TextBlock(BaseModel):
    """Plain text content."""

    model_config = _FROZEN

    type: Literal["text"] = "text"
    text: str


class ImageBlock(BaseModel):
    """Image attachment."""

    model_config = _FROZEN

    type: Literal["image"] = "image"
    source: ImageSource


class ToolUseBlock(BaseModel):
    """A model-issued request to invoke a named tool with structured arguments.

    ``id`` may be empty on input; adapters substitute a generated id when
    encoding. ``input`` is always an object, never ``None``.
    """

    model_config = _FROZEN

    type: Literal["tool_use"] = "tool_use"
    id: str = ""
    name: str
    input: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _null_input(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("input") is None:
            data = {**data, "input": {}}
        return data


class ToolResultBlock(BaseModel):
    """Output of a tool invocation, referencing the originating ``tool_use.id``.

    ``content`` is usually text; structured values are allowed and are
    JSON-encoded by adapters whose wire format expects a string.
    """

    model_config = _FROZEN

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: Union[str, List[Any], Dict[str, Any]] = ""
    is_error: bool = False

    def content_text(self) -> str:
        """Return the result as a string, JSON-encoding structured content."""
        if isinstance(self.content, str):
            return self.content
        if isinstance(self.content, list) and all(
            isinstance(p, dict) and p.get("type") == "text" for p in self.content
        ):
            return "".join(str(p.get("text", "")) for p in self.content)
        return json.dumps(self.content, ensure_ascii=False)


ContentBlock = Annotated[
    Union[TextBlock, ImageBlock, ToolUseBlock, ToolResultBlock],
    Field(discriminator="type"),
]

_CONTENT_BLOCK_ADAPTER: TypeAdapter[Any] = TypeAdapter(ContentBlock)


def decode_content_block(data: Any) -> Union[TextBlock, ImageBlock, ToolUseBlock, ToolResultBlock]:
    """Decode a raw mapping into the matching content block variant.

    Raises:
        pydantic.ValidationError: On unknown ``type`` or missing required fields.
    """
    return _CONTENT_BLOCK_ADAPTER.validate_python(data)


def text_of(blocks: Optional[List[Any]]) -> str:
    """Concatenate the text of every :class:`TextBlock` in ``blocks``."""
    return "".join(b.text for b in blocks or [] if isinstance(b, TextBlock))


__all__ = [
    "ImageSource",
    "TextBlock",
    "ImageBlock",
    "ToolUseBlock",
    "ToolResultBlock",
    "ContentBlock",
    "decode_content_block",
    "text_of",
]
