"""Gemini API vs Vertex AI endpoint selection.

Two hosts serve the same ``generateContent`` schema:

- Gemini API (API key): ``generativelanguage.googleapis.com/v1beta``
- Vertex AI (GCP project): ``{region}-aiplatform.googleapis.com/v1`` under
  ``projects/{project}/locations/{region}/publishers/google``; the ``global``
  location has no regional host prefix.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config.defaults import GEMINI_DEFAULT_BASE_URL, VERTEX_DEFAULT_REGION

GENERATE_ACTION = "generateContent"
STREAM_ACTION = "streamGenerateContent"


@dataclass(frozen=True)
class Endpoint:
    """Resolved request target: absolute URL plus query parameters."""

    url: str
    params: Dict[str, str] = field(default_factory=dict)


def vertex_host(region: str) -> str:
    if region == "global":
        return "https://aiplatform.googleapis.com"
    return f"https://{region}-aiplatform.googleapis.com"


def build_endpoint(
    model: str,
    *,
    stream: bool = False,
    project_id: Optional[str] = None,
    region: Optional[str] = None,
    base_url: Optional[str] = None,
) -> Endpoint:
    """Return the endpoint for one call.

    A ``project_id`` selects Vertex AI; otherwise the Gemini API host (or
    ``base_url`` when overridden) is used. Streaming uses
    ``streamGenerateContent`` with ``alt=sse``. Credentials are not part of
    the endpoint; callers add them per request.
    """
    action = STREAM_ACTION if stream else GENERATE_ACTION
    params = {"alt": "sse"} if stream else {}
    if project_id:
        loc = region or VERTEX_DEFAULT_REGION
        url = (
            f"{vertex_host(loc)}/v1/projects/{project_id}/locations/{loc}"
            f"/publishers/google/models/{model}:{action}"
        )
        return Endpoint(url=url, params=params)
    root = (base_url or GEMINI_DEFAULT_BASE_URL).rstrip("/")
    return Endpoint(url=f"{root}/models/{model}:{action}", params=params)


def models_url(base_url: Optional[str] = None) -> str:
    """``GET`` target listing models on the Gemini API host."""
    return f"{(base_url or GEMINI_DEFAULT_BASE_URL).rstrip('/')}/models"


__all__ = ["Endpoint", "build_endpoint", "models_url", "vertex_host", "GENERATE_ACTION", "STREAM_ACTION"]
