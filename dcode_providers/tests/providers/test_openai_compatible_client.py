from __future__ import annotations

import json

import httpx
import pytest
import respx

from dcode_providers.base.errors import ClassifiedError, ErrorKind
from dcode_providers.base.models import Message, MessageRequest
from dcode_providers.openai_compatible import BACKEND_PROFILES, OpenAICompatibleProvider, generic_profile

OPENROUTER = "https://openrouter.ai/api/v1"


def _completion(content="hi", **extra):
    body = {
        "id": "chatcmpl-9",
        "model": "anthropic/claude-sonnet-4",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 4, "completion_tokens": 2},
    }
    body.update(extra)
    return body


def _request():
    return MessageRequest(model="anthropic/claude-sonnet-4", messages=[Message(role="user", content="hello")])


@respx.mock
def test_create_message_round_trip():
    route = respx.post(f"{OPENROUTER}/chat/completions").mock(return_value=httpx.Response(200, json=_completion()))
    provider = OpenAICompatibleProvider(BACKEND_PROFILES["openrouter"], "or-key")

    response = provider.create_message(_request())

    assert response.text() == "hi" and response.stop_reason == "end_turn"  # nosec B101
    assert response.usage.input_tokens == 4  # nosec B101
    sent = route.calls.last.request
    assert sent.headers["authorization"] == "Bearer or-key"  # nosec B101
    assert sent.headers["x-title"] == "dcode"  # nosec B101
    assert json.loads(sent.content)["stream"] is False  # nosec B101


@pytest.mark.parametrize(
    "status,kind,retryable",
    [
        (401, ErrorKind.AUTH, False),
        (429, ErrorKind.RATE_LIMIT, True),
        (503, ErrorKind.SERVER, True),
        (400, ErrorKind.INVALID_REQUEST, False),
    ],
)
@respx.mock
def test_create_message_status_classification(status, kind, retryable):
    respx.post(f"{OPENROUTER}/chat/completions").mock(
        return_value=httpx.Response(status, json={"error": {"message": "nope"}}, headers={"Retry-After": "7"})
    )
    provider = OpenAICompatibleProvider(BACKEND_PROFILES["openrouter"], "or-key")
    with pytest.raises(ClassifiedError) as info:
        provider.create_message(_request())
    err = info.value
    assert (err.kind, err.retryable, err.raw_status) == (kind, retryable, status)  # nosec B101
    assert err.provider == "openrouter" and err.model == "anthropic/claude-sonnet-4"  # nosec B101
    if status == 429:
        assert err.retry_after == 7.0  # nosec B101


@respx.mock
def test_context_overflow_is_flagged():
    body = {"error": {"message": "This model's maximum context length is 128000 tokens", "code": "context_length_exceeded"}}
    respx.post(f"{OPENROUTER}/chat/completions").mock(return_value=httpx.Response(400, json=body))
    provider = OpenAICompatibleProvider(BACKEND_PROFILES["openrouter"], "or-key")
    with pytest.raises(ClassifiedError) as info:
        provider.create_message(_request())
    assert info.value.context_overflow and info.value.kind is ErrorKind.INVALID_REQUEST  # nosec B101


@respx.mock
def test_transport_failure_is_network():
    respx.post(f"{OPENROUTER}/chat/completions").mock(side_effect=httpx.ConnectError("refused"))
    provider = OpenAICompatibleProvider(BACKEND_PROFILES["openrouter"], "or-key")
    with pytest.raises(ClassifiedError) as info:
        provider.create_message(_request())
    assert info.value.kind is ErrorKind.NETWORK and info.value.retryable  # nosec B101


@respx.mock
def test_html_body_is_malformed():
    respx.post(f"{OPENROUTER}/chat/completions").mock(return_value=httpx.Response(200, text="<html>oops</html>"))
    provider = OpenAICompatibleProvider(BACKEND_PROFILES["openrouter"], "or-key")
    with pytest.raises(ClassifiedError) as info:
        provider.create_message(_request())
    assert info.value.kind is ErrorKind.MALFORMED_RESPONSE  # nosec B101
    assert info.value.provider == "openrouter"  # nosec B101


def test_keyless_generic_backend_sends_no_authorization():
    provider = OpenAICompatibleProvider(generic_profile("local", "http://localhost:11434/v1"))
    with respx.mock() as router:
        route = router.post("http://localhost:11434/v1/chat/completions").mock(return_value=httpx.Response(200, json=_completion("ok")))
        assert provider.create_message(_request()).text() == "ok"  # nosec B101
    assert "authorization" not in route.calls.last.request.headers  # nosec B101


def test_injected_client_is_used():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion("injected"))

    client = httpx.Client(transport=httpx.MockTransport(handler))
    provider = OpenAICompatibleProvider(BACKEND_PROFILES["deepseek"], "k", client=client)
    assert provider.create_message(_request()).text() == "injected"  # nosec B101
    client.close()


@respx.mock
def test_list_models_static_and_refresh():
    profile = BACKEND_PROFILES["together"]
    route = respx.get(f"{profile.base_url}/models").mock(
        return_value=httpx.Response(200, json={"object": "list", "data": [{"id": "a"}, {"id": "b"}]})
    )
    provider = OpenAICompatibleProvider(profile, "k")

    assert provider.list_models() == list(profile.models)  # nosec B101
    assert not route.called  # nosec B101
    assert provider.list_models(refresh=True) == ["a", "b"]  # nosec B101
    assert provider.list_models() == ["a", "b"]  # nosec B101


@respx.mock
def test_list_models_refresh_failure_is_classified():
    profile = BACKEND_PROFILES["mistral"]
    respx.get(f"{profile.base_url}/models").mock(return_value=httpx.Response(401, json={"message": "bad key"}))
    provider = OpenAICompatibleProvider(profile, "k")
    with pytest.raises(ClassifiedError) as info:
        provider.list_models(refresh=True)
    assert info.value.kind is ErrorKind.AUTH  # nosec B101
    assert provider.list_models() == list(profile.models)  # nosec B101
