"""Validation rules of the canonical protocol types."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from dcode_providers.base.models import (
    ImageBlock,
    ImageSource,
    Message,
    MessageRequest,
    MessageResponse,
    TextBlock,
    Tool,
    ToolResultBlock,
    ToolUseBlock,
    Usage,
    decode_content_block,
)


def _user(text: str) -> Message:
    return Message(role="user", content=text)


def test_decode_content_block_dispatches_on_type_and_ignores_extras():
    block = decode_content_block({"type": "tool_use", "id": "t1", "name": "ls", "input": None, "cache": 1})
    assert isinstance(block, ToolUseBlock)  # nosec B101
    assert block.input == {}  # nosec B101


def test_decode_content_block_rejects_unknown_type():
    with pytest.raises(ValidationError):
        decode_content_block({"type": "video", "url": "x"})


def test_image_source_requires_matching_payload():
    with pytest.raises(ValidationError):
        ImageSource(type="base64", media_type="image/png")
    src = ImageSource(type="base64", media_type="image/png", data="AAAA")
    assert src.as_data_url() == "data:image/png;base64,AAAA"  # nosec B101
    assert ImageSource(type="url", url="https://x/y.png").as_data_url() == "https://x/y.png"  # nosec B101


def test_tool_result_content_text_variants():
    assert ToolResultBlock(tool_use_id="t", content="ok").content_text() == "ok"  # nosec B101
    parts = [{"type": "text", "text": "a"}, {"type": "text", "text": "b"}]
    assert ToolResultBlock(tool_use_id="t", content=parts).content_text() == "ab"  # nosec B101
    assert ToolResultBlock(tool_use_id="t", content={"n": 1}).content_text() == '{"n": 1}'  # nosec B101


def test_message_helpers():
    msg = Message(
        role="assistant",
        content=[TextBlock(text="hi "), ToolUseBlock(id="t1", name="ls"), TextBlock(text="there")],
    )
    assert msg.text() == "hi there"  # nosec B101
    assert [u.name for u in msg.tool_uses()] == ["ls"]  # nosec B101
    assert _user("").blocks() == []  # nosec B101


def test_request_bounds():
    with pytest.raises(ValidationError):
        MessageRequest(model="m", messages=[_user("x")], max_tokens=0)
    with pytest.raises(ValidationError):
        MessageRequest(model="m", messages=[_user("x")], temperature=2.5)
    with pytest.raises(ValidationError):
        MessageRequest(model="", messages=[_user("x")])


def test_request_rejects_duplicate_tool_names():
    with pytest.raises(ValidationError):
        MessageRequest(model="m", messages=[_user("x")], tools=[Tool(name="ls"), Tool(name="ls")])


def test_tool_result_must_reference_earlier_tool_use():
    use = Message(role="assistant", content=[ToolUseBlock(id="t1", name="ls")])
    result = Message(role="user", content=[ToolResultBlock(tool_use_id="t1", content="a.txt")])
    MessageRequest(model="m", messages=[_user("go"), use, result])

    dangling = Message(role="user", content=[ToolResultBlock(tool_use_id="nope", content="")])
    with pytest.raises(ValidationError):
        MessageRequest(model="m", messages=[_user("go"), use, dangling])

    same_message = Message(
        role="assistant",
        content=[ToolResultBlock(tool_use_id="t2", content=""), ToolUseBlock(id="t2", name="ls")],
    )
    with pytest.raises(ValidationError):
        MessageRequest(model="m", messages=[same_message])


def test_response_tool_ids_unique():
    with pytest.raises(ValidationError):
        MessageResponse(content=[ToolUseBlock(id="a", name="x"), ToolUseBlock(id="a", name="y")])


def test_usage_totals_and_defaults():
    usage = Usage(input_tokens=3, output_tokens=4)
    assert usage.total_tokens == 7  # nosec B101
    assert MessageResponse().usage == Usage()  # nosec B101
    with pytest.raises(ValidationError):
        Usage(input_tokens=-1)


def test_models_are_frozen():
    block = TextBlock(text="a")
    with pytest.raises(ValidationError):
        block.text = "b"  # type: ignore[misc]
    assert isinstance(ImageBlock(source=ImageSource(type="url", url="u")), ImageBlock)  # nosec B101
