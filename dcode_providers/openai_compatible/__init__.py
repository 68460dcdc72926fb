"""OpenAI-compatible adapter package.

A single :class:`OpenAICompatibleProvider` serves every Chat Completions
backend (OpenAI, Groq, OpenRouter, DeepSeek, xAI, Together, Mistral,
Cerebras, DeepInfra, Perplexity, and user-configured gateways), parameterized
by a :class:`BackendProfile`.
"""

from .profiles import BACKEND_PROFILES, BackendProfile, generic_profile, get_profile
from .encode import decode_request_messages, encode_request
from .decode import decode_response
from .stream import OpenAIStreamDecoder, ToolCallAccumulator
from .client import OpenAICompatibleProvider

__all__ = [
    "BACKEND_PROFILES",
    "BackendProfile",
    "generic_profile",
    "get_profile",
    "encode_request",
    "decode_request_messages",
    "decode_response",
    "OpenAIStreamDecoder",
    "ToolCallAccumulator",
    "OpenAICompatibleProvider",
]
