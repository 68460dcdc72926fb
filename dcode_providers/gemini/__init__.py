"""Gemini / Vertex AI adapter package."""

from .endpoints import Endpoint, build_endpoint
from .encode import decode_request_contents, encode_request
from .decode import GeminiStreamDecoder, decode_response
from .client import GEMINI_MODELS, GeminiProvider

__all__ = [
    "Endpoint",
    "build_endpoint",
    "encode_request",
    "decode_request_contents",
    "decode_response",
    "GeminiStreamDecoder",
    "GeminiProvider",
    "GEMINI_MODELS",
]
