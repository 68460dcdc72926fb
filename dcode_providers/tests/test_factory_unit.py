from __future__ import annotations

import pytest

import dcode_providers
from dcode_providers.base.factory import ProviderFactory, UnknownProviderError, create_provider
from dcode_providers.base.interfaces import Provider
from dcode_providers.gemini import GeminiProvider
from dcode_providers.openai_compatible import BACKEND_PROFILES, OpenAICompatibleProvider


def test_factory_unknown_provider():
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("nope")


def test_supported_lists_every_profile_and_google():
    supported = ProviderFactory.supported()
    for name in BACKEND_PROFILES:
        assert name in supported  # nosec B101
    assert "google" in supported and "google-vertex" in supported  # nosec B101


@pytest.mark.parametrize("name", sorted(BACKEND_PROFILES))
def test_openai_compatible_ids_share_one_implementation(name):
    provider = ProviderFactory.create(name, api_key="k")
    assert isinstance(provider, OpenAICompatibleProvider)  # nosec B101
    assert isinstance(provider, Provider)  # nosec B101
    assert provider.provider_name == name  # nosec B101
    assert provider.profile.base_url == BACKEND_PROFILES[name].base_url  # nosec B101
    assert provider.list_models()  # nosec B101


def test_env_key_and_model_override(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "from-env")
    monkeypatch.setenv("GROQ_MODEL", "llama-3.1-8b-instant")
    provider = create_provider("GROQ")
    assert provider._api_key == "from-env"  # nosec B101
    assert provider.default_model == "llama-3.1-8b-instant"  # nosec B101


def test_unknown_id_with_base_url_is_generic_backend():
    provider = dcode_providers.create("local-llm", base_url="http://localhost:8080/v1/")
    assert isinstance(provider, OpenAICompatibleProvider)  # nosec B101
    assert provider.profile.base_url == "http://localhost:8080/v1"  # nosec B101
    assert provider.profile.requires_key is False  # nosec B101


def test_google_and_vertex(monkeypatch):
    google = ProviderFactory.create("google", api_key="g")
    assert isinstance(google, GeminiProvider) and not google.uses_vertex  # nosec B101

    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "proj")
    vertex = ProviderFactory.create("google-vertex", access_token="tok")
    assert vertex.provider_name == "google-vertex" and vertex.uses_vertex  # nosec B101


def test_missing_adapter_class(monkeypatch):
    monkeypatch.setattr(
        ProviderFactory,
        "_ADAPTERS",
        {**ProviderFactory._ADAPTERS, "gemini": {"module": "dcode_providers.gemini.client", "class": "Missing"}},
    )
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("google")
