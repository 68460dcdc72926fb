"""Named OpenAI-compatible backends.

Many vendors expose the OpenAI Chat Completions wire shape. They differ only
in base URL, model catalog and a few headers, so each is a
:class:`BackendProfile` value handed to the one
:class:`~dcode_providers.openai_compatible.client.OpenAICompatibleProvider`
implementation rather than a subclass.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Tuple

from ..config import defaults as d


@dataclass(frozen=True)
class BackendProfile:
    """Endpoint/catalog pair describing one OpenAI-compatible backend.

    Attributes:
        name: Stable provider id (``"groq"``).
        base_url: API root; ``/chat/completions`` and ``/models`` are relative
            to it.
        models: Static model catalog, in display order.
        default_model: Model used when configuration does not name one.
        headers: Extra static headers sent with every request.
        stream_usage: Ask for a final usage event while streaming
            (``stream_options.include_usage``).
        requires_key: Whether calls without an API key are refused before any
            network I/O.
    """

    name: str
    base_url: str
    models: Tuple[str, ...] = ()
    default_model: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    stream_usage: bool = False
    requires_key: bool = True

    def with_overrides(
        self,
        *,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "BackendProfile":
        """Return a copy with configuration overrides applied."""
        merged: Dict[str, str] = dict(self.headers)
        if headers:
            merged.update(headers)
        return replace(
            self,
            base_url=(base_url or self.base_url).rstrip("/"),
            default_model=default_model or self.default_model,
            headers=merged,
        )


def generic_profile(name: str, base_url: str, *, models: Tuple[str, ...] = ()) -> BackendProfile:
    """Profile for an unlisted OpenAI-compatible endpoint (gateway, local server)."""
    return BackendProfile(
        name=name,
        base_url=base_url.rstrip("/"),
        models=models,
        default_model=models[0] if models else None,
        requires_key=False,
    )


BACKEND_PROFILES: Dict[str, BackendProfile] = {
    p.name: p
    for p in (
        BackendProfile(
            name="openai",
            base_url=d.OPENAI_DEFAULT_BASE_URL,
            default_model=d.OPENAI_DEFAULT_MODEL,
            stream_usage=True,
            models=(
                "gpt-5.2",
                "gpt-5.1",
                "gpt-5",
                "gpt-5-mini",
                "gpt-4.1",
                "gpt-4.1-mini",
                "gpt-4o",
                "gpt-4o-mini",
                "o3",
                "o4-mini",
            ),
        ),
        BackendProfile(
            name="groq",
            base_url=d.GROQ_DEFAULT_BASE_URL,
            default_model=d.GROQ_DEFAULT_MODEL,
            models=(
                "llama-3.3-70b-versatile",
                "llama-3.1-8b-instant",
                "meta-llama/llama-4-scout-17b-16e-instruct",
                "meta-llama/llama-4-maverick-17b-128e-instruct",
                "qwen/qwen3-32b",
                "deepseek-r1-distill-llama-70b",
                "moonshotai/kimi-k2-instruct",
                "openai/gpt-oss-120b",
                "openai/gpt-oss-20b",
            ),
        ),
        BackendProfile(
            name="openrouter",
            base_url=d.OPENROUTER_DEFAULT_BASE_URL,
            default_model=d.OPENROUTER_DEFAULT_MODEL,
            headers={"X-Title": "dcode"},
            models=(
                "anthropic/claude-sonnet-4.5",
                "anthropic/claude-sonnet-4",
                "anthropic/claude-opus-4.1",
                "anthropic/claude-haiku-4.5",
                "openai/gpt-5",
                "openai/gpt-4.1",
                "openai/gpt-4o-mini",
                "google/gemini-2.5-pro",
                "google/gemini-2.5-flash",
                "x-ai/grok-4",
                "deepseek/deepseek-chat",
            ),
        ),
        BackendProfile(
            name="deepseek",
            base_url=d.DEEPSEEK_DEFAULT_BASE_URL,
            default_model=d.DEEPSEEK_DEFAULT_MODEL,
            models=("deepseek-reasoner", "deepseek-chat"),
        ),
        BackendProfile(
            name="xai",
            base_url=d.XAI_DEFAULT_BASE_URL,
            default_model=d.XAI_DEFAULT_MODEL,
            models=(
                "grok-4",
                "grok-4-fast",
                "grok-4-fast-non-reasoning",
                "grok-code-fast-1",
                "grok-3",
                "grok-3-mini",
                "grok-3-fast",
                "grok-2",
                "grok-2-vision",
            ),
        ),
        BackendProfile(
            name="together",
            base_url=d.TOGETHER_DEFAULT_BASE_URL,
            default_model=d.TOGETHER_DEFAULT_MODEL,
            models=(
                "meta-llama/Llama-3.3-70B-Instruct-Turbo",
                "meta-llama/Meta-Llama-3.1-405B-Instruct-Turbo",
                "meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo",
                "Qwen/Qwen2.5-72B-Instruct-Turbo",
                "mistralai/Mixtral-8x7B-Instruct-v0.1",
                "google/gemma-2-27b-it",
            ),
        ),
        BackendProfile(
            name="mistral",
            base_url=d.MISTRAL_DEFAULT_BASE_URL,
            default_model=d.MISTRAL_DEFAULT_MODEL,
            models=(
                "devstral-medium-latest",
                "devstral-small-2507",
                "magistral-medium-latest",
                "mistral-large-latest",
                "mistral-medium-latest",
                "mistral-small-latest",
                "codestral-latest",
                "ministral-8b-latest",
            ),
        ),
        BackendProfile(
            name="cerebras",
            base_url=d.CEREBRAS_DEFAULT_BASE_URL,
            default_model=d.CEREBRAS_DEFAULT_MODEL,
            models=(
                "gpt-oss-120b",
                "qwen-3-235b-a22b-instruct-2507",
                "llama3.1-8b",
                "zai-glm-4.7",
            ),
        ),
        BackendProfile(
            name="deepinfra",
            base_url=d.DEEPINFRA_DEFAULT_BASE_URL,
            default_model=d.DEEPINFRA_DEFAULT_MODEL,
            models=(
                "Qwen/Qwen3-Coder-480B-A35B-Instruct-Turbo",
                "moonshotai/Kimi-K2-Instruct",
                "deepseek-ai/DeepSeek-V3.2",
                "deepseek-ai/DeepSeek-R1-0528",
                "openai/gpt-oss-120b",
                "zai-org/GLM-4.7",
            ),
        ),
        BackendProfile(
            name="perplexity",
            base_url=d.PERPLEXITY_DEFAULT_BASE_URL,
            default_model=d.PERPLEXITY_DEFAULT_MODEL,
            models=("sonar", "sonar-pro", "sonar-reasoning", "sonar-reasoning-pro"),
        ),
    )
}


def get_profile(name: str) -> Optional[BackendProfile]:
    """Return the built-in profile for ``name`` (case-insensitive), if any."""
    return BACKEND_PROFILES.get((name or "").strip().lower())


__all__ = ["BackendProfile", "BACKEND_PROFILES", "generic_profile", "get_profile"]
